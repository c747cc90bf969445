"""Core data models: Vector3, BoundingBox, Era, CreatureDescriptor, PlacedCreature."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic.dataclasses import dataclass as pydantic_dataclass


@dataclass(frozen=True, slots=True)
class Vector3:
    """Immutable 3D coordinate in meters (Y is up)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def with_y(self, y: float) -> Vector3:
        return Vector3(self.x, y, self.z)

    def horizontal_distance(self, other: Vector3) -> float:
        """Distance in the XZ plane."""
        dx = self.x - other.x
        dz = self.z - other.z
        return (dx * dx + dz * dz) ** 0.5

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __repr__(self) -> str:
        return f"({self.x:.3f}, {self.y:.3f}, {self.z:.3f})"


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box given by its min and max corners."""

    min: Vector3
    max: Vector3

    @classmethod
    def from_footprint(cls, position: Vector3, scale: float) -> BoundingBox:
        """Cube of side *scale* standing on the ground at *position*."""
        half = scale / 2.0
        return cls(
            Vector3(position.x - half, position.y, position.z - half),
            Vector3(position.x + half, position.y + scale, position.z + half),
        )

    @property
    def size(self) -> Vector3:
        return Vector3(
            max(0.0, self.max.x - self.min.x),
            max(0.0, self.max.y - self.min.y),
            max(0.0, self.max.z - self.min.z),
        )

    @property
    def volume(self) -> float:
        s = self.size
        return s.x * s.y * s.z

    def intersects(self, other: BoundingBox) -> bool:
        """True when the boxes touch or overlap (inclusive bounds)."""
        return not (
            other.max.x < self.min.x or other.min.x > self.max.x
            or other.max.y < self.min.y or other.min.y > self.max.y
            or other.max.z < self.min.z or other.min.z > self.max.z
        )

    def intersection(self, other: BoundingBox) -> BoundingBox:
        """Overlap region; degenerate (zero volume) when disjoint."""
        return BoundingBox(
            Vector3(max(self.min.x, other.min.x), max(self.min.y, other.min.y), max(self.min.z, other.min.z)),
            Vector3(min(self.max.x, other.max.x), min(self.max.y, other.max.y), min(self.max.z, other.max.z)),
        )


@pydantic_dataclass(frozen=True)
class Era:
    """A named geological time span, ordered by how long ago it was."""

    name: str
    years_ago: float
    period: str = ""
    epoch: str | None = None


@pydantic_dataclass(frozen=True)
class CreatureDescriptor:
    """Immutable description of a creature, owned by the content layer."""

    id: str
    real_world_scale_meters: float
    supported_animations: tuple[str, ...] = ("idle",)
    name: str = ""
    era: str = ""
    diet: str = ""
    size: str = ""


@dataclass(slots=True)
class PlacedCreature:
    """A creature positioned on the ground plane; owned by the scene layer."""

    id: str
    position: Vector3
    bounding_box: BoundingBox
    descriptor: CreatureDescriptor | None = None
    instance_id: str = ""              # unique per placement; set by the scene
