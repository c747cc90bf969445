"""Tests for ground-plane anchoring."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from deeptime.core.ground_plane import GROUND_PLANE_TOLERANCE, GroundPlaneAnchor
from deeptime.core.models import Vector3


class TestUnknownGround:
    """Before any hit-test result arrives."""

    def test_no_plane(self):
        anchor = GroundPlaneAnchor()
        assert anchor.ground_y is None
        assert not anchor.has_ground_plane

    def test_anchor_y_returns_candidate(self):
        anchor = GroundPlaneAnchor()
        assert anchor.anchor_y(1.25) == 1.25

    def test_nothing_is_anchored(self):
        anchor = GroundPlaneAnchor()
        assert not anchor.is_anchored(Vector3(0.0, 0.0, 0.0))


class TestKnownGround:
    """After set_ground_y, everything snaps to the plane."""

    def test_anchor_y_snaps(self):
        anchor = GroundPlaneAnchor()
        anchor.set_ground_y(-1.4)
        assert anchor.ground_y == -1.4
        assert anchor.anchor_y(3.0) == -1.4

    def test_anchor_keeps_xz(self):
        anchor = GroundPlaneAnchor()
        anchor.set_ground_y(-1.0)
        snapped = anchor.anchor(Vector3(2.0, 5.0, -3.0))
        assert snapped == Vector3(2.0, -1.0, -3.0)
        assert anchor.is_anchored(snapped)

    def test_tolerance(self):
        anchor = GroundPlaneAnchor()
        anchor.set_ground_y(0.0)
        assert GROUND_PLANE_TOLERANCE == 0.01
        assert anchor.is_anchored(Vector3(0.0, 0.009, 0.0))
        assert anchor.is_anchored(Vector3(0.0, -0.01, 0.0))
        assert not anchor.is_anchored(Vector3(0.0, 0.02, 0.0))

    def test_explicit_tolerance(self):
        anchor = GroundPlaneAnchor()
        anchor.set_ground_y(0.0)
        assert anchor.is_anchored(Vector3(0.0, 0.05, 0.0), tolerance_meters=0.1)

    def test_later_update_wins(self):
        anchor = GroundPlaneAnchor()
        anchor.set_ground_y(0.0)
        anchor.set_ground_y(-0.5)
        assert anchor.anchor_y(0.0) == -0.5

    def test_clear(self):
        anchor = GroundPlaneAnchor()
        anchor.set_ground_y(0.0)
        anchor.clear()
        assert not anchor.has_ground_plane
        assert anchor.anchor_y(2.0) == 2.0
