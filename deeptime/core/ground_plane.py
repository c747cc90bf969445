"""Ground-plane anchoring: the single detected floor height."""

from __future__ import annotations

import logging

from deeptime.core.models import Vector3

logger = logging.getLogger(__name__)

GROUND_PLANE_TOLERANCE = 0.01  # meters


class GroundPlaneAnchor:
    """Holds the detected ground height and answers anchoring queries.

    The AR session layer pushes heights through ``set_ground_y`` whenever a
    new hit-test result arrives; the transition and placement engines only
    read from it.
    """

    __slots__ = ("_ground_y", "_tolerance")

    def __init__(self, tolerance_meters: float = GROUND_PLANE_TOLERANCE) -> None:
        self._ground_y: float | None = None
        self._tolerance = tolerance_meters

    @property
    def ground_y(self) -> float | None:
        return self._ground_y

    @property
    def has_ground_plane(self) -> bool:
        return self._ground_y is not None

    @property
    def tolerance_meters(self) -> float:
        return self._tolerance

    def set_ground_y(self, y: float) -> None:
        if self._ground_y is None:
            logger.info("Ground plane detected at y=%.3f", y)
        else:
            logger.debug("Ground plane updated: %.3f -> %.3f", self._ground_y, y)
        self._ground_y = float(y)

    def clear(self) -> None:
        """Forget the detected plane (e.g. when the AR session ends)."""
        self._ground_y = None

    def anchor_y(self, candidate_y: float) -> float:
        """Return the ground height if known, otherwise *candidate_y*."""
        if self._ground_y is None:
            return candidate_y
        return self._ground_y

    def anchor(self, position: Vector3) -> Vector3:
        """Copy of *position* with its Y snapped to the ground plane."""
        return position.with_y(self.anchor_y(position.y))

    def is_anchored(self, position: Vector3, tolerance_meters: float | None = None) -> bool:
        """True iff *position* sits within tolerance of the known ground."""
        if self._ground_y is None:
            return False
        tol = self._tolerance if tolerance_meters is None else tolerance_meters
        return abs(position.y - self._ground_y) <= tol
