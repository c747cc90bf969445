"""Transition endpoints — start, cancel and observe era transitions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from deeptime.api.dependencies import get_scene_manager
from deeptime.api.scene_manager import SceneManager
from deeptime.api.schemas import ControlResponse, EraSchema, TransitionRequest, TransitionStateResponse
from deeptime.core.enums import Direction
from deeptime.core.errors import TransitionInProgressError
from deeptime.core.models import Era

router = APIRouter()


def _era_schema(era: Era | None) -> EraSchema | None:
    if era is None:
        return None
    return EraSchema(name=era.name, years_ago=era.years_ago, period=era.period, epoch=era.epoch)


def serialize_state(manager: SceneManager) -> TransitionStateResponse:
    snap = manager.transition_state()
    load_error = manager.machine.last_load_error
    track = manager.effect_track
    return TransitionStateResponse(
        phase=snap.phase.name,
        progress=snap.progress,
        effect=snap.effect.name.lower(),
        direction=snap.direction.name.lower(),
        duration_ms=snap.duration_ms,
        slider_locked=manager.slider_locked,
        current_era=_era_schema(snap.current_era),
        target_era=_era_schema(snap.target_era),
        last_load_error=str(load_error) if load_error else None,
        effect_progress=manager.uniforms.get("uProgress") if track.is_active else None,
    )


@router.get("/transition", response_model=TransitionStateResponse)
def get_transition(manager: SceneManager = Depends(get_scene_manager)) -> TransitionStateResponse:
    return serialize_state(manager)


@router.post("/transition", response_model=TransitionStateResponse, status_code=202)
async def start_transition(
    body: TransitionRequest,
    manager: SceneManager = Depends(get_scene_manager),
) -> TransitionStateResponse:
    era = Era(name=body.era.name, years_ago=body.era.years_ago, period=body.era.period, epoch=body.era.epoch)
    direction = Direction.PAST if body.direction == "past" else Direction.FUTURE
    future = manager.start_transition(era, direction)
    if future.done() and not future.cancelled():
        exc = future.exception()
        if isinstance(exc, TransitionInProgressError):
            raise HTTPException(status_code=409, detail=str(exc))
    return serialize_state(manager)


@router.post("/transition/cancel", response_model=ControlResponse)
async def cancel_transition(manager: SceneManager = Depends(get_scene_manager)) -> ControlResponse:
    if not manager.slider_locked:
        return ControlResponse(status="noop", message="No transition in progress.")
    manager.cancel_transition()
    return ControlResponse(status="ok", message="Transition cancelled.")
