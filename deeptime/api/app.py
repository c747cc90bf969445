"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deeptime.api.routes import api_router
from deeptime.api.scene_manager import SceneManager
from deeptime.config import DeepTimeConfig
from deeptime.core.catalog import CreatureCatalog
from deeptime.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: DeepTimeConfig | None = None, catalog: CreatureCatalog | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = DeepTimeConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = SceneManager(_config, catalog=catalog)
        app.state.scene_manager = manager
        manager.start()
        logger.info("API server started — frame loop running.")
        yield
        await manager.stop()
        app.state.scene_manager = None
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Deep Time AR Core",
        description=(
            "Era transition and creature placement service for the Deep Time AR scene.\n\n"
            "## API Groups\n\n"
            "- **Transition** — Start, cancel and observe era-to-era transitions\n"
            "- **Placement** — Distribute creatures on the ground plane, creature catalogue\n"
            "- **Ground** — Detected ground-plane height and anchoring checks\n"
            "- **Config** — Read-only scene configuration\n"
            "- **Events** — Scene event feed\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Transition", "description": "Era transitions: phase, progress, effect, slider lock."},
            {"name": "Placement", "description": "Non-overlapping creature placement and the creature catalogue."},
            {"name": "Ground", "description": "Ground-plane height pushed by the AR session and anchoring checks."},
            {"name": "Config", "description": "Read-only timing, placement and frame-loop parameters."},
            {"name": "Events", "description": "Recent scene events (transitions, loads, placements)."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
