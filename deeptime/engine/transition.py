"""EraTransitionStateMachine — timed, cancellable era-to-era transitions.

Phase cycle:
  IDLE -> FADING_OUT -> LOADING -> FADING_IN -> COMPLETE -> IDLE
  cancel(): any non-idle phase -> IDLE

Progress is always recomputed from absolute elapsed time on each
``tick(now)``, so the caller may tick at any cadence.  The one suspension
point is the creature load awaited on the FADING_OUT -> LOADING edge; a
staleness check afterwards (session identity and phase) drops results that
arrive after a cancel or after another tick has already moved the session
past LOADING.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable

from deeptime.config import MAX_TRANSITION_DURATION_MS, MIN_TRANSITION_DURATION_MS, TransitionTiming
from deeptime.core.enums import PHASE_EDGES, Direction, EffectType, LoadRacePolicy, Phase
from deeptime.core.errors import CreatureLoadError, TransitionCancelledError, TransitionInProgressError
from deeptime.core.session import TransitionSession, TransitionSnapshot
from deeptime.systems.effects import select_effect
from deeptime.systems.fade import FadeCoordinator

if TYPE_CHECKING:
    from deeptime.core.models import CreatureDescriptor, Era
    from deeptime.engine.observer import TransitionObserver

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class EraTransitionStateMachine:
    """Owns the phase sequence, the progress clock and slider-lock signalling.

    The observer receives lock/start/complete/clear notifications and the
    single ``load_creatures`` call; the fade coordinator receives opacity
    values during the fade phases.  Nothing here touches pixels.
    """

    __slots__ = (
        "_timing",
        "_observer",
        "_fade",
        "_clock",
        "_session",
        "_future",
        "_current_era",
        "_effect",
        "_direction",
        "_tick_seq",
        "_last_load_error",
        "_last_loaded",
    )

    def __init__(
        self,
        timing: TransitionTiming,
        observer: TransitionObserver,
        fade: FadeCoordinator | None = None,
        current_era: Era | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self._timing = timing
        self._observer = observer
        self._fade = fade or FadeCoordinator()
        self._clock = clock
        self._session: TransitionSession | None = None
        self._future: asyncio.Future[None] | None = None
        self._current_era = current_era
        self._effect = EffectType.DISSOLVE
        self._direction = Direction.PAST
        self._tick_seq = 0
        self._last_load_error: CreatureLoadError | None = None
        self._last_loaded: tuple[CreatureDescriptor, ...] = ()

    # -- accessors --

    @property
    def phase(self) -> Phase:
        return self._session.phase if self._session is not None else Phase.IDLE

    @property
    def progress(self) -> float:
        return self._session.progress if self._session is not None else 0.0

    @property
    def effect(self) -> EffectType:
        return self._effect

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def current_era(self) -> Era | None:
        return self._current_era

    @property
    def duration_ms(self) -> float:
        return self._timing.duration_ms

    @property
    def timing(self) -> TransitionTiming:
        return self._timing

    @property
    def is_transitioning(self) -> bool:
        return self.phase not in (Phase.IDLE, Phase.COMPLETE)

    @property
    def slider_locked(self) -> bool:
        """True from transition start until completion or cancel."""
        return self._session is not None

    @property
    def last_load_error(self) -> CreatureLoadError | None:
        return self._last_load_error

    @property
    def last_loaded(self) -> tuple[CreatureDescriptor, ...]:
        """Creatures returned by the most recent successful load."""
        return self._last_loaded

    def snapshot(self) -> TransitionSnapshot:
        return TransitionSnapshot.from_session(
            self._session, self._current_era, self._effect, self._direction, self._timing.duration_ms,
        )

    def set_current_era(self, era: Era | None) -> None:
        """Set the era used for direction calculation (outside a transition)."""
        self._current_era = era

    def elapsed_ms(self, now_ms: float | None = None) -> float:
        if self._session is None:
            return 0.0
        now = self._clock() if now_ms is None else now_ms
        return max(0.0, now - self._session.start_timestamp)

    def validate_duration(self) -> bool:
        return MIN_TRANSITION_DURATION_MS <= self._timing.duration_ms <= MAX_TRANSITION_DURATION_MS

    # -- public operations --

    def transition(
        self,
        target_era: Era,
        direction: Direction = Direction.PAST,
        now_ms: float | None = None,
    ) -> asyncio.Future[None]:
        """Start a transition to *target_era*.

        Returns a future resolved on completion.  While a session is active
        the returned future is already failed with TransitionInProgressError
        and the running session is left alone.  Requires a running loop.
        """
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        if self._session is not None:
            logger.debug(
                "Rejecting transition to %s: %s already in %s",
                target_era.name, self._session.target_era.name, self._session.phase.name,
            )
            future.set_exception(TransitionInProgressError(target_era.name))
            return future

        previous = self._current_era
        effect, resolved_direction = select_effect(
            previous.years_ago if previous is not None else None,
            target_era.years_ago,
            direction,
        )
        self._effect = effect
        self._direction = resolved_direction
        self._last_load_error = None

        timing = self._timing
        session = TransitionSession(
            target_era=target_era,
            previous_era=previous,
            direction=resolved_direction,
            effect=effect,
            start_timestamp=self._clock() if now_ms is None else now_ms,
            duration_ms=timing.duration_ms,
            fade_out_ratio=timing.fade_out_ratio,
            fade_in_ratio=timing.fade_in_ratio,
        )
        self._session = session
        self._future = future

        logger.info(
            "Transition #%d: %s -> %s (%s, %s, %.0f ms)",
            session.session_id,
            previous.name if previous is not None else "none",
            target_era.name, effect.name, resolved_direction.name, session.duration_ms,
        )
        self._notify("on_slider_lock_change", True)
        self._notify("on_transition_start", previous, target_era)
        if self._session is session:
            self._enter(session, Phase.FADING_OUT)
            session.progress = 0.0
        return future

    def cancel(self) -> None:
        """Abort the active transition; a no-op when idle."""
        session = self._session
        if session is None:
            return
        future = self._future
        self._session = None
        self._future = None
        logger.info(
            "Transition #%d to %s cancelled in %s at %.2f",
            session.session_id, session.target_era.name, session.phase.name, session.progress,
        )
        self._notify("on_slider_lock_change", False)
        if future is not None and not future.done():
            future.set_exception(TransitionCancelledError(session.target_era.name))

    async def tick(self, now_ms: float) -> Phase:
        """Advance the active session to *now_ms*; returns the resulting phase.

        Phase changes cascade within one call, so a single large step can
        walk several edges (always in order).
        """
        session = self._session
        if session is None:
            return Phase.IDLE

        self._tick_seq += 1
        seq = self._tick_seq
        session.progress = self._progress_at(session, now_ms)

        while self._session is session:
            before = session.phase
            await self._step(session)
            if self._session is not session or self._tick_seq != seq:
                # cancelled, completed, or overtaken by a concurrent tick
                break
            if session.phase == before:
                break
        return self.phase

    # -- internals --

    def _progress_at(self, session: TransitionSession, now_ms: float) -> float:
        elapsed = now_ms - session.start_timestamp
        return max(0.0, min(1.0, elapsed / session.duration_ms))

    def _enter(self, session: TransitionSession, phase: Phase) -> None:
        if PHASE_EDGES[session.phase] != phase:
            raise RuntimeError(f"Illegal phase edge {session.phase.name} -> {phase.name}")
        logger.debug("Transition #%d: %s -> %s", session.session_id, session.phase.name, phase.name)
        session.phase = phase

    async def _step(self, session: TransitionSession) -> None:
        progress = session.progress
        match session.phase:
            case Phase.FADING_OUT:
                if progress < session.fade_out_end:
                    self._fade.apply(1.0 - progress / session.fade_out_end)
                else:
                    await self._load(session)

            case Phase.LOADING:
                if progress >= session.loading_end:
                    self._enter(session, Phase.FADING_IN)

            case Phase.FADING_IN:
                if progress >= 1.0:
                    self._fade.apply(1.0)
                    self._complete(session)
                elif session.fade_in_ratio > 0.0:
                    self._fade.apply((progress - session.loading_end) / session.fade_in_ratio)
                else:
                    self._fade.apply(1.0)

    async def _load(self, session: TransitionSession) -> None:
        """Clear the old content, enter LOADING and await the creature load."""
        if not session.clear_signalled:
            session.clear_signalled = True
            self._notify("on_clear_content")
        if self._session is not session:
            return
        self._enter(session, Phase.LOADING)

        era = session.target_era
        started = self._clock()
        try:
            creatures = await self._observer.load_creatures(era)
        except Exception as exc:
            if self._load_is_stale(session):
                logger.debug("Ignoring load failure for stale transition #%d", session.session_id)
                return
            self._last_load_error = CreatureLoadError(era.name, exc)
            logger.warning("Failed to load creatures for %s — continuing transition: %r", era.name, exc)
        else:
            if self._load_is_stale(session):
                logger.debug("Discarding creatures loaded for stale transition #%d", session.session_id)
                return
            self._last_loaded = tuple(creatures or ())
            logger.info("Loaded %d creatures for %s", len(self._last_loaded), era.name)

        if self._timing.load_race_policy == LoadRacePolicy.FREEZE:
            waited = max(0.0, self._clock() - started)
            session.start_timestamp += waited
            logger.debug("Transition #%d: progress frozen for %.1f ms of loading", session.session_id, waited)

    def _load_is_stale(self, session: TransitionSession) -> bool:
        """True when *session* was cancelled, replaced or moved past LOADING meanwhile."""
        return self._session is not session or session.phase != Phase.LOADING

    def _complete(self, session: TransitionSession) -> None:
        self._enter(session, Phase.COMPLETE)
        future = self._future
        self._current_era = session.target_era

        self._notify("on_slider_lock_change", False)
        self._notify("on_transition_complete", session.target_era)
        if future is not None and not future.done():
            future.set_result(None)

        if self._session is session:
            self._enter(session, Phase.IDLE)
            session.progress = 0.0
            self._session = None
            self._future = None
        logger.info("Transition #%d complete: now in %s", session.session_id, session.target_era.name)

    def _notify(self, method: str, *args: object) -> None:
        """Call an observer notification; a failing observer never strands a transition."""
        try:
            getattr(self._observer, method)(*args)
        except Exception:
            logger.exception("Observer %s failed — continuing", method)
