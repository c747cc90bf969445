"""Placement and catalogue endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import TypeAdapter

from deeptime.api.dependencies import get_scene_manager
from deeptime.api.scene_manager import SceneManager
from deeptime.api.schemas import (
    BoundingBoxSchema,
    DistributeRequest,
    PlacedCreatureSchema,
    PlacementResponse,
    ValidationResponse,
    Vector3Schema,
)
from deeptime.core.models import CreatureDescriptor, PlacedCreature, Vector3

router = APIRouter()

_creatures_adapter = TypeAdapter(list[CreatureDescriptor])


def _vec(v: Vector3) -> Vector3Schema:
    return Vector3Schema(x=v.x, y=v.y, z=v.z)


def _serialize_placed(manager: SceneManager, placed: list[PlacedCreature]) -> list[PlacedCreatureSchema]:
    return [
        PlacedCreatureSchema(
            id=p.id,
            instance_id=p.instance_id,
            name=p.descriptor.name if p.descriptor else "",
            position=_vec(p.position),
            bounding_box=BoundingBoxSchema(min=_vec(p.bounding_box.min), max=_vec(p.bounding_box.max)),
            scale=p.descriptor.real_world_scale_meters if p.descriptor else p.bounding_box.size.y,
            opacity=manager.opacity_of(p.instance_id),
        )
        for p in placed
    ]


@router.get("/placement", response_model=PlacementResponse)
def get_placement(manager: SceneManager = Depends(get_scene_manager)) -> PlacementResponse:
    return PlacementResponse(
        placed=_serialize_placed(manager, manager.placed),
        valid=manager.validate(),
    )


@router.post("/placement/distribute", response_model=PlacementResponse)
async def distribute(
    body: DistributeRequest,
    manager: SceneManager = Depends(get_scene_manager),
) -> PlacementResponse:
    catalog = manager.catalog
    if body.creature_ids:
        creatures = []
        for cid in body.creature_ids:
            descriptor = catalog.by_id(cid)
            if descriptor is None:
                raise HTTPException(status_code=404, detail=f"Unknown creature '{cid}'.")
            creatures.append(descriptor)
    elif body.era:
        creatures = catalog.for_era(body.era)
    else:
        raise HTTPException(status_code=422, detail="Provide creature_ids or era.")

    center = Vector3(body.center.x, body.center.y, body.center.z) if body.center else None
    result = manager.distribute(creatures, center, body.max_creatures, replace=body.replace)
    return PlacementResponse(
        placed=_serialize_placed(manager, result.placed),
        skipped=result.skipped,
        valid=manager.validate(),
    )


@router.post("/placement/validate", response_model=ValidationResponse)
def validate(manager: SceneManager = Depends(get_scene_manager)) -> ValidationResponse:
    return ValidationResponse(valid=manager.validate(), count=len(manager.placed))


@router.get("/creatures")
def list_creatures(
    era: str | None = Query(None, description="Only creatures of this era"),
    manager: SceneManager = Depends(get_scene_manager),
) -> list[dict]:
    creatures = manager.catalog.for_era(era) if era else manager.catalog.all()
    return _creatures_adapter.dump_python(creatures, mode="json")


@router.get("/eras")
def list_eras(manager: SceneManager = Depends(get_scene_manager)) -> list[str]:
    return manager.catalog.eras()
