"""FastAPI dependency injection — provides the app's SceneManager."""

from __future__ import annotations

from fastapi import Request

from deeptime.api.scene_manager import SceneManager


def get_scene_manager(request: Request) -> SceneManager:
    manager: SceneManager | None = getattr(request.app.state, "scene_manager", None)
    if manager is None:
        raise RuntimeError("SceneManager not initialized — server not started correctly.")
    return manager
