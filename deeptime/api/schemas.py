"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


# --- Shared ---

class Vector3Schema(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class EraSchema(BaseModel):
    name: str
    years_ago: float = Field(..., ge=0)
    period: str = ""
    epoch: str | None = None


class ControlResponse(BaseModel):
    status: str
    message: str = ""


# --- Transition ---

class TransitionRequest(BaseModel):
    era: EraSchema
    direction: Literal["past", "future"] = "past"


class TransitionStateResponse(BaseModel):
    phase: str
    progress: float
    effect: str
    direction: str
    duration_ms: float
    slider_locked: bool
    current_era: EraSchema | None = None
    target_era: EraSchema | None = None
    last_load_error: str | None = None
    effect_progress: float | None = None


# --- Ground plane ---

class GroundRequest(BaseModel):
    y: float


class GroundResponse(BaseModel):
    ground_y: float | None
    has_ground_plane: bool
    tolerance_meters: float


class AnchorCheckRequest(BaseModel):
    x: float = 0.0
    y: float
    z: float = 0.0
    tolerance: float | None = Field(None, ge=0)


class AnchorCheckResponse(BaseModel):
    anchored: bool
    anchored_y: float


# --- Placement ---

class DistributeRequest(BaseModel):
    creature_ids: list[str] = Field(default_factory=list)
    era: str | None = None
    center: Vector3Schema | None = None
    max_creatures: int | None = Field(None, ge=0)
    replace: bool = True


class BoundingBoxSchema(BaseModel):
    min: Vector3Schema
    max: Vector3Schema


class PlacedCreatureSchema(BaseModel):
    id: str
    instance_id: str = ""
    name: str = ""
    position: Vector3Schema
    bounding_box: BoundingBoxSchema
    scale: float
    opacity: float = 1.0


class PlacementResponse(BaseModel):
    placed: list[PlacedCreatureSchema]
    skipped: list[str] = Field(default_factory=list)
    valid: bool


class ValidationResponse(BaseModel):
    valid: bool
    count: int


# --- Events ---

class EventSchema(BaseModel):
    timestamp_ms: float
    category: str
    message: str
    creature_ids: list[str] = Field(default_factory=list)


# --- Config ---

class ConfigResponse(BaseModel):
    duration_ms: float
    fade_out_ratio: float
    fade_in_ratio: float
    load_race_policy: str
    min_spacing: float
    distribution_radius: float
    max_creatures: int
    max_attempts_per_creature: int
    max_overlap_fraction: float
    placement_seed: int
    ground_tolerance_meters: float
    shader_effect_enabled: bool
    tick_rate: float
