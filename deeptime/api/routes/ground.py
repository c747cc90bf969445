"""Ground-plane endpoints — push detected heights and check anchoring."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from deeptime.api.dependencies import get_scene_manager
from deeptime.api.scene_manager import SceneManager
from deeptime.api.schemas import AnchorCheckRequest, AnchorCheckResponse, GroundRequest, GroundResponse
from deeptime.core.models import Vector3

router = APIRouter()


def _ground(manager: SceneManager) -> GroundResponse:
    anchor = manager.anchor
    return GroundResponse(
        ground_y=anchor.ground_y,
        has_ground_plane=anchor.has_ground_plane,
        tolerance_meters=anchor.tolerance_meters,
    )


@router.get("/ground", response_model=GroundResponse)
def get_ground(manager: SceneManager = Depends(get_scene_manager)) -> GroundResponse:
    return _ground(manager)


@router.put("/ground", response_model=GroundResponse)
async def set_ground(body: GroundRequest, manager: SceneManager = Depends(get_scene_manager)) -> GroundResponse:
    manager.set_ground_y(body.y)
    return _ground(manager)


@router.post("/ground/check", response_model=AnchorCheckResponse)
def check_anchor(
    body: AnchorCheckRequest,
    manager: SceneManager = Depends(get_scene_manager),
) -> AnchorCheckResponse:
    position = Vector3(body.x, body.y, body.z)
    return AnchorCheckResponse(
        anchored=manager.anchor.is_anchored(position, body.tolerance),
        anchored_y=manager.anchor.anchor_y(body.y),
    )
