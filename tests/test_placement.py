"""Tests for the creature placement engine.

Placement is rejection sampling over a deterministic RNG, so every test
here is reproducible for a given seed and key.
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from deeptime.config import PlacementConfig
from deeptime.core.ground_plane import GroundPlaneAnchor
from deeptime.core.models import BoundingBox, CreatureDescriptor, PlacedCreature, Vector3
from deeptime.systems.placement import (
    DEFAULT_CENTER,
    CreaturePlacementEngine,
    approximate_box,
    overlap_fraction,
)
from deeptime.systems.rng import DeterministicRNG


def _make_engine(seed=42, config=None, ground_y=None):
    anchor = GroundPlaneAnchor()
    if ground_y is not None:
        anchor.set_ground_y(ground_y)
    return CreaturePlacementEngine(config or PlacementConfig(), anchor, DeterministicRNG(seed))


def _creatures(n, scale=0.5):
    return [CreatureDescriptor(id=f"c{i}", real_world_scale_meters=scale) for i in range(n)]


# ---------------------------------------------------------------------------
# Overlap metric
# ---------------------------------------------------------------------------

class TestOverlapFraction:
    """Intersection volume over the smaller box's volume."""

    def test_identical_boxes(self):
        box = approximate_box(Vector3(0, 0, 0), 2.0)
        assert overlap_fraction(box, box) == pytest.approx(1.0)

    def test_disjoint_boxes(self):
        a = approximate_box(Vector3(0, 0, 0), 1.0)
        b = approximate_box(Vector3(5, 0, 0), 1.0)
        assert overlap_fraction(a, b) == 0.0

    def test_touching_faces_have_zero_overlap(self):
        a = approximate_box(Vector3(0, 0, 0), 1.0)
        b = approximate_box(Vector3(1, 0, 0), 1.0)
        assert a.intersects(b)
        assert overlap_fraction(a, b) == 0.0

    def test_half_overlap(self):
        a = BoundingBox(Vector3(0, 0, 0), Vector3(2, 2, 2))
        b = BoundingBox(Vector3(1, 0, 0), Vector3(3, 2, 2))
        assert overlap_fraction(a, b) == pytest.approx(0.5)

    def test_small_box_inside_large_box(self):
        big = approximate_box(Vector3(0, 0, 0), 10.0)
        small = approximate_box(Vector3(1, 0, 1), 0.5)
        assert overlap_fraction(big, small) == pytest.approx(1.0)
        assert overlap_fraction(small, big) == pytest.approx(1.0)

    def test_footprint_box_stands_on_ground(self):
        box = approximate_box(Vector3(1.0, -1.0, 2.0), 3.0)
        assert box.min == Vector3(-0.5, -1.0, 0.5)
        assert box.max == Vector3(2.5, 2.0, 3.5)
        assert box.volume == pytest.approx(27.0)


# ---------------------------------------------------------------------------
# Distribution
# ---------------------------------------------------------------------------

class TestDistribute:
    """Distribution honours spacing, radius and the creature cap."""

    def test_single_creature_in_annulus(self):
        engine = _make_engine()
        placed = engine.distribute(_creatures(1, scale=1.0), DEFAULT_CENTER)
        assert len(placed) == 1
        distance = placed[0].position.horizontal_distance(DEFAULT_CENTER)
        assert 2.0 <= distance < 5.0

    def test_all_positions_in_annulus(self):
        engine = _make_engine()
        for key in range(20):
            for p in engine.distribute(_creatures(3), DEFAULT_CENTER, key=key):
                distance = p.position.horizontal_distance(DEFAULT_CENTER)
                assert 2.0 <= distance < 5.0

    def test_cap_at_max_creatures(self):
        engine = _make_engine()
        placed = engine.distribute(_creatures(5), DEFAULT_CENTER)
        assert len(placed) == 3
        assert [p.id for p in placed] == ["c0", "c1", "c2"]

    def test_explicit_cap(self):
        engine = _make_engine()
        assert len(engine.distribute(_creatures(5), DEFAULT_CENTER, max_creatures=1)) == 1
        assert engine.distribute(_creatures(5), DEFAULT_CENTER, max_creatures=0) == []

    def test_zero_creatures(self):
        engine = _make_engine()
        report = engine.distribute_report([], DEFAULT_CENTER)
        assert report.placed == []
        assert report.skipped == []
        assert report.attempts == 0

    def test_distribution_is_valid(self):
        engine = _make_engine()
        for key in range(10):
            placed = engine.distribute(_creatures(3, scale=1.5), DEFAULT_CENTER, key=key)
            assert engine.validate_distribution(placed)

    def test_boxes_match_positions(self):
        engine = _make_engine()
        for p in engine.distribute(_creatures(2, scale=2.0), DEFAULT_CENTER):
            assert p.bounding_box == approximate_box(p.position, 2.0)
            assert p.descriptor is not None


class TestDeterminism:
    """Same seed, key and inputs give the same layout."""

    def test_same_key_same_layout(self):
        a = _make_engine(seed=7).distribute(_creatures(3), DEFAULT_CENTER, key=3)
        b = _make_engine(seed=7).distribute(_creatures(3), DEFAULT_CENTER, key=3)
        assert [p.position for p in a] == [p.position for p in b]

    def test_repeat_call_same_engine(self):
        engine = _make_engine()
        a = engine.distribute(_creatures(3), DEFAULT_CENTER, key=1)
        b = engine.distribute(_creatures(3), DEFAULT_CENTER, key=1)
        assert [p.position for p in a] == [p.position for p in b]

    def test_different_key_different_layout(self):
        engine = _make_engine()
        a = engine.distribute(_creatures(3), DEFAULT_CENTER, key=1)
        b = engine.distribute(_creatures(3), DEFAULT_CENTER, key=2)
        assert [p.position for p in a] != [p.position for p in b]

    def test_different_seed_different_layout(self):
        a = _make_engine(seed=1).distribute(_creatures(3), DEFAULT_CENTER)
        b = _make_engine(seed=2).distribute(_creatures(3), DEFAULT_CENTER)
        assert [p.position for p in a] != [p.position for p in b]


class TestExhaustion:
    """A creature with no room is skipped, never raised."""

    def _blocker(self):
        box = approximate_box(DEFAULT_CENTER, 20.0)
        return PlacedCreature(id="blocker", position=DEFAULT_CENTER, bounding_box=box)

    def test_skipped_when_no_room(self, caplog):
        engine = _make_engine()
        with caplog.at_level("WARNING"):
            report = engine.distribute_report(
                _creatures(2), DEFAULT_CENTER, existing=[self._blocker()],
            )
        assert report.placed == []
        assert report.skipped == ["c0", "c1"]
        assert report.attempts == 2 * 20
        assert any("Placement exhausted" in r.getMessage() for r in caplog.records)

    def test_attempt_budget_respected(self):
        engine = _make_engine()
        report = engine.distribute_report(
            _creatures(1), DEFAULT_CENTER, max_attempts_per_creature=5, existing=[self._blocker()],
        )
        assert report.attempts == 5

    def test_find_valid_position_returns_none(self):
        engine = _make_engine()
        position, used = engine.find_valid_position(1.0, DEFAULT_CENTER, [self._blocker()], max_attempts=3)
        assert position is None
        assert used == 3

    def test_find_valid_position_succeeds_in_open_space(self):
        engine = _make_engine()
        position, used = engine.find_valid_position(1.0, DEFAULT_CENTER)
        assert position is not None
        assert used == 1


class TestGroundAnchoring:
    """Placed creatures sit on the detected ground plane."""

    def test_positions_use_ground_y(self):
        engine = _make_engine(ground_y=-1.2)
        placed = engine.distribute(_creatures(3), DEFAULT_CENTER)
        assert placed
        assert all(p.position.y == -1.2 for p in placed)
        assert all(p.bounding_box.min.y == -1.2 for p in placed)

    def test_center_y_without_ground(self):
        engine = _make_engine()
        center = Vector3(0.0, 0.7, -3.0)
        assert all(p.position.y == 0.7 for p in engine.distribute(_creatures(2), center))


class TestValidation:
    def test_overlapping_pair_is_invalid(self):
        engine = _make_engine()
        box = approximate_box(Vector3(0, 0, 0), 2.0)
        placed = [
            PlacedCreature(id="a", position=Vector3(0, 0, 0), bounding_box=box),
            PlacedCreature(id="b", position=Vector3(0, 0, 0), bounding_box=box),
        ]
        assert not engine.validate_distribution(placed)

    def test_empty_and_single_are_valid(self):
        engine = _make_engine()
        assert engine.validate_distribution([])
        box = approximate_box(Vector3(0, 0, 0), 2.0)
        assert engine.validate_distribution([PlacedCreature("a", Vector3(0, 0, 0), box)])

    def test_is_position_valid(self):
        engine = _make_engine()
        box = approximate_box(Vector3(0, 0, 0), 2.0)
        placed = [PlacedCreature("a", Vector3(0, 0, 0), box)]
        assert not engine.is_position_valid(Vector3(0.5, 0, 0), 2.0, placed)
        assert engine.is_position_valid(Vector3(10, 0, 0), 2.0, placed)

    def test_spacing_beyond_radius_uses_fixed_ring(self):
        engine = _make_engine(config=PlacementConfig(min_spacing=3.0, distribution_radius=1.0))
        for p in engine.distribute(_creatures(3), DEFAULT_CENTER):
            assert p.position.horizontal_distance(DEFAULT_CENTER) == pytest.approx(3.0)
