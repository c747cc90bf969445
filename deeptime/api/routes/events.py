"""GET /api/v1/events — the scene event feed."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from deeptime.api.dependencies import get_scene_manager
from deeptime.api.scene_manager import SceneManager
from deeptime.api.schemas import EventSchema

router = APIRouter()


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since_ms: float | None = Query(None, description="Only events at or after this timestamp"),
    limit: int = Query(50, ge=1, le=1000),
    manager: SceneManager = Depends(get_scene_manager),
) -> list[EventSchema]:
    log = manager.event_log
    events = log.since(since_ms)[-limit:] if since_ms is not None else log.latest(limit)
    return [
        EventSchema(
            timestamp_ms=e.timestamp_ms,
            category=e.category,
            message=e.message,
            creature_ids=list(e.creature_ids),
        )
        for e in events
    ]
