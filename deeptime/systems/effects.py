"""Effect selection: which visual effect and direction a transition uses.

Going to an older era (larger ``years_ago``) dissolves into the past;
anything else emerges toward the present.
"""

from __future__ import annotations

from deeptime.core.enums import Direction, EffectType


def determine_effect(current_years_ago: float, target_years_ago: float) -> EffectType:
    return EffectType.DISSOLVE if target_years_ago > current_years_ago else EffectType.EMERGE


def determine_direction(current_years_ago: float, target_years_ago: float) -> Direction:
    return Direction.PAST if target_years_ago > current_years_ago else Direction.FUTURE


def effect_for_direction(direction: Direction) -> EffectType:
    return EffectType.DISSOLVE if direction == Direction.PAST else EffectType.EMERGE


def select_effect(
    current_years_ago: float | None,
    target_years_ago: float,
    requested_direction: Direction = Direction.PAST,
) -> tuple[EffectType, Direction]:
    """Pick ``(effect, direction)`` for a transition.

    Without a known current era the caller's requested direction wins and
    the effect follows it.
    """
    if current_years_ago is None:
        return effect_for_direction(requested_direction), requested_direction
    return (
        determine_effect(current_years_ago, target_years_ago),
        determine_direction(current_years_ago, target_years_ago),
    )
