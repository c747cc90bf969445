"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class Phase(IntEnum):
    """States of the era transition state machine."""

    IDLE = 0
    FADING_OUT = 1
    LOADING = 2
    FADING_IN = 3
    COMPLETE = 4


# Legal forward edges; cancel (any non-idle -> IDLE) is handled separately.
PHASE_EDGES: dict[Phase, Phase] = {
    Phase.IDLE: Phase.FADING_OUT,
    Phase.FADING_OUT: Phase.LOADING,
    Phase.LOADING: Phase.FADING_IN,
    Phase.FADING_IN: Phase.COMPLETE,
    Phase.COMPLETE: Phase.IDLE,
}


@unique
class Direction(IntEnum):
    """Direction of time travel."""

    PAST = 0
    FUTURE = 1


@unique
class EffectType(IntEnum):
    """Visual effect category for a transition."""

    DISSOLVE = 0     # into the past
    EMERGE = 1       # out of the past


@unique
class LoadRacePolicy(IntEnum):
    """How wall-clock progress behaves while the creature load is pending."""

    ACCEPT = 0       # progress keeps running; LOADING may be skipped visually
    FREEZE = 1       # start is shifted by the load time; progress waits


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    PLACEMENT_ANGLE = 0
    PLACEMENT_DISTANCE = 1
