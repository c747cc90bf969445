"""Creature placement — non-overlapping distribution on the ground plane.

Sequential rejection sampling: each creature gets a fixed budget of
random (angle, distance) candidates around the center; the first
candidate whose approximate box overlaps every already-placed box by at
most the threshold wins.  A creature that exhausts its budget is skipped,
never raised.  With the default cap of three creatures and twenty
attempts this is all the packing that is needed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Sequence

from deeptime.core.enums import Domain
from deeptime.core.models import BoundingBox, CreatureDescriptor, PlacedCreature, Vector3

if TYPE_CHECKING:
    from deeptime.config import PlacementConfig
    from deeptime.core.ground_plane import GroundPlaneAnchor
    from deeptime.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

DEFAULT_CENTER = Vector3(0.0, 0.0, -3.0)

# Creature index occupies the low bits of the RNG key, the caller's key the rest.
_INDEX_BITS = 16


def overlap_fraction(a: BoundingBox, b: BoundingBox) -> float:
    """Intersection volume relative to the smaller of the two boxes."""
    if not a.intersects(b):
        return 0.0
    smaller = min(a.volume, b.volume)
    if smaller == 0.0:
        return 0.0
    return a.intersection(b).volume / smaller


def approximate_box(position: Vector3, scale: float) -> BoundingBox:
    """Cube of side *scale* standing on the footprint at *position*."""
    return BoundingBox.from_footprint(position, scale)


@dataclass(slots=True)
class PlacementResult:
    """Outcome of one ``distribute`` run."""

    placed: list[PlacedCreature] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)   # creature ids, input order
    attempts: int = 0


class CreaturePlacementEngine:
    """Finds ground-plane positions for creatures without visible overlap.

    Holds configuration only; previously placed creatures are always passed
    in explicitly, so independent scenes can share one engine.
    """

    __slots__ = ("_config", "_anchor", "_rng")

    def __init__(
        self,
        config: PlacementConfig,
        anchor: GroundPlaneAnchor,
        rng: DeterministicRNG,
    ) -> None:
        self._config = config
        self._anchor = anchor
        self._rng = rng

    @property
    def config(self) -> PlacementConfig:
        return self._config

    def overlap_fraction(self, a: BoundingBox, b: BoundingBox) -> float:
        return overlap_fraction(a, b)

    def is_position_valid(
        self,
        position: Vector3,
        scale: float,
        placed: Iterable[PlacedCreature],
    ) -> bool:
        """True when a creature of *scale* at *position* fits next to *placed*."""
        box = approximate_box(position, scale)
        threshold = self._config.max_overlap_fraction
        return all(overlap_fraction(box, other.bounding_box) <= threshold for other in placed)

    def _sample(self, center: Vector3, key: int, attempt: int) -> Vector3:
        cfg = self._config
        angle = self._rng.next_angle(Domain.PLACEMENT_ANGLE, key, attempt)
        distance = self._rng.next_uniform(
            Domain.PLACEMENT_DISTANCE, key, attempt,
            cfg.min_spacing, max(cfg.min_spacing, cfg.distribution_radius),
        )
        return Vector3(
            center.x + math.cos(angle) * distance,
            self._anchor.anchor_y(center.y),
            center.z + math.sin(angle) * distance,
        )

    def find_valid_position(
        self,
        scale: float,
        center: Vector3 = DEFAULT_CENTER,
        placed: Sequence[PlacedCreature] = (),
        max_attempts: int | None = None,
        key: int = 0,
    ) -> tuple[Vector3 | None, int]:
        """Return ``(position, attempts_used)``; position is None when exhausted."""
        budget = self._config.max_attempts_per_creature if max_attempts is None else max_attempts
        for attempt in range(budget):
            candidate = self._sample(center, key, attempt)
            if self.is_position_valid(candidate, scale, placed):
                return candidate, attempt + 1
        return None, budget

    def distribute_report(
        self,
        creatures: Sequence[CreatureDescriptor],
        center: Vector3 = DEFAULT_CENTER,
        max_creatures: int | None = None,
        max_attempts_per_creature: int | None = None,
        existing: Sequence[PlacedCreature] = (),
        key: int = 0,
    ) -> PlacementResult:
        """Place *creatures* in order and report which ones were skipped.

        *key* selects the random stream: the same key, seed and inputs give
        the same layout.
        """
        cap = self._config.max_creatures if max_creatures is None else max_creatures
        result = PlacementResult()
        to_place = list(creatures)[: max(0, cap)]
        if not to_place:
            return result

        occupied: list[PlacedCreature] = list(existing)
        for index, creature in enumerate(to_place):
            stream = (key << _INDEX_BITS) | index
            position, used = self.find_valid_position(
                creature.real_world_scale_meters,
                center,
                occupied,
                max_attempts_per_creature,
                stream,
            )
            result.attempts += used
            if position is None:
                logger.warning(
                    "Placement exhausted for %s after %d attempts — skipping",
                    creature.id, used,
                )
                result.skipped.append(creature.id)
                continue
            placed = PlacedCreature(
                id=creature.id,
                position=position,
                bounding_box=approximate_box(position, creature.real_world_scale_meters),
                descriptor=creature,
            )
            occupied.append(placed)
            result.placed.append(placed)

        logger.debug(
            "Distributed %d/%d creatures around %s (%d attempts)",
            len(result.placed), len(to_place), center, result.attempts,
        )
        return result

    def distribute(
        self,
        creatures: Sequence[CreatureDescriptor],
        center: Vector3 = DEFAULT_CENTER,
        max_creatures: int | None = None,
        max_attempts_per_creature: int | None = None,
        existing: Sequence[PlacedCreature] = (),
        key: int = 0,
    ) -> list[PlacedCreature]:
        """Place *creatures* around *center*; skipped creatures are omitted."""
        return self.distribute_report(
            creatures, center, max_creatures, max_attempts_per_creature, existing, key,
        ).placed

    def validate_distribution(self, placed: Sequence[PlacedCreature]) -> bool:
        """True iff every pair of boxes overlaps by at most the threshold."""
        threshold = self._config.max_overlap_fraction
        for i in range(len(placed)):
            for j in range(i + 1, len(placed)):
                if overlap_fraction(placed[i].bounding_box, placed[j].bounding_box) > threshold:
                    return False
        return True
