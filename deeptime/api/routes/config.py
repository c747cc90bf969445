"""GET /api/v1/config — expose the scene configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from deeptime.api.dependencies import get_scene_manager
from deeptime.api.scene_manager import SceneManager
from deeptime.api.schemas import ConfigResponse

router = APIRouter()


@router.get("/config", response_model=ConfigResponse)
def get_config(manager: SceneManager = Depends(get_scene_manager)) -> ConfigResponse:
    cfg = manager.config
    return ConfigResponse(
        duration_ms=cfg.transition.duration_ms,
        fade_out_ratio=cfg.transition.fade_out_ratio,
        fade_in_ratio=cfg.transition.fade_in_ratio,
        load_race_policy=cfg.transition.load_race_policy.name.lower(),
        min_spacing=cfg.placement.min_spacing,
        distribution_radius=cfg.placement.distribution_radius,
        max_creatures=cfg.placement.max_creatures,
        max_attempts_per_creature=cfg.placement.max_attempts_per_creature,
        max_overlap_fraction=cfg.placement.max_overlap_fraction,
        placement_seed=cfg.placement_seed,
        ground_tolerance_meters=cfg.ground_tolerance_meters,
        shader_effect_enabled=cfg.shader_effect_enabled,
        tick_rate=manager.tick_rate,
    )
