"""The in-flight transition record and its read-only snapshot."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from deeptime.core.enums import Direction, EffectType, Phase
from deeptime.core.models import Era

_session_ids = itertools.count(1)


@dataclass(slots=True)
class TransitionSession:
    """Mutable state of one era-to-era transition.

    Only the EraTransitionStateMachine mutates a session.  Identity
    (``session_id``) is what stale load results are checked against.
    """

    target_era: Era
    previous_era: Era | None
    direction: Direction
    effect: EffectType
    start_timestamp: float
    duration_ms: float
    fade_out_ratio: float
    fade_in_ratio: float
    phase: Phase = Phase.IDLE
    progress: float = 0.0
    clear_signalled: bool = False
    session_id: int = field(default_factory=lambda: next(_session_ids))

    @property
    def fade_out_end(self) -> float:
        return self.fade_out_ratio

    @property
    def loading_end(self) -> float:
        return self.fade_out_ratio + (1.0 - self.fade_out_ratio - self.fade_in_ratio)


@dataclass(frozen=True, slots=True)
class TransitionSnapshot:
    """Read-only view of the state machine, safe to hand to other layers."""

    phase: Phase
    progress: float
    effect: EffectType
    direction: Direction
    current_era: Era | None
    target_era: Era | None
    duration_ms: float
    session_id: int | None

    @classmethod
    def from_session(
        cls,
        session: TransitionSession | None,
        current_era: Era | None,
        effect: EffectType,
        direction: Direction,
        duration_ms: float,
    ) -> TransitionSnapshot:
        if session is None:
            return cls(
                phase=Phase.IDLE, progress=0.0, effect=effect, direction=direction,
                current_era=current_era, target_era=None,
                duration_ms=duration_ms, session_id=None,
            )
        return cls(
            phase=session.phase,
            progress=session.progress,
            effect=session.effect,
            direction=session.direction,
            current_era=current_era,
            target_era=session.target_era,
            duration_ms=session.duration_ms,
            session_id=session.session_id,
        )

    @property
    def is_transitioning(self) -> bool:
        return self.phase not in (Phase.IDLE, Phase.COMPLETE)
