"""SceneManager — owns one AR scene's core services and drives their frame loop.

Everything is constructed explicitly from a DeepTimeConfig; there is no
process-wide instance.  The manager is the transition observer: it keeps
the slider lock, clears and repopulates the placed creatures, and holds
the per-creature material state the fades write into.  The frame loop is
an asyncio task calling ``tick(now)`` at ``tick_rate``.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Sequence

from deeptime.core.catalog import CreatureCatalog, default_catalog, load_catalog
from deeptime.core.enums import Direction, EffectType, Phase
from deeptime.core.errors import TransitionCancelledError
from deeptime.core.ground_plane import GroundPlaneAnchor
from deeptime.core.models import BoundingBox, CreatureDescriptor, Era, PlacedCreature, Vector3
from deeptime.engine.observer import TransitionObserver
from deeptime.engine.transition import EraTransitionStateMachine, monotonic_ms
from deeptime.systems.fade import EffectTrack, FadeCoordinator, MaterialFadeTarget
from deeptime.systems.placement import CreaturePlacementEngine, PlacementResult
from deeptime.systems.rng import DeterministicRNG
from deeptime.utils.event_log import EventLog, SceneEvent

if TYPE_CHECKING:
    from deeptime.config import DeepTimeConfig
    from deeptime.core.session import TransitionSnapshot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CreatureMaterial:
    """Material state the renderer mirrors onto a creature's meshes."""

    opacity: float = 1.0
    transparent: bool = False


class SceneManager(TransitionObserver):
    """Wires ground plane, placement, fades and the transition machine together."""

    def __init__(
        self,
        config: DeepTimeConfig,
        catalog: CreatureCatalog | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.config = config
        self._clock = clock
        self._tick_rate: float = config.frame_interval_seconds
        self._event_log = EventLog()

        if catalog is None:
            catalog = load_catalog(config.catalog_path) if config.catalog_path else default_catalog()
        self._catalog = catalog

        self._anchor = GroundPlaneAnchor(config.ground_tolerance_meters)
        self._placement = CreaturePlacementEngine(
            config.placement, self._anchor, DeterministicRNG(config.placement_seed),
        )
        self._center = Vector3(*config.default_center)
        self._distribution_key = 0

        # Scene contents
        self._placed: list[PlacedCreature] = []
        self._materials: dict[str, CreatureMaterial] = {}     # by instance id
        self._instance_ids = itertools.count(1)
        self._slider_locked = False

        # Fades: creature materials, plus the optional full-scene uniform track
        self._fade = FadeCoordinator([MaterialFadeTarget(lambda: list(self._materials.values()))])
        self._uniforms: dict[str, Any] = {}
        self._effect_track = EffectTrack(self._uniforms, on_complete=self._on_effect_complete)

        self._machine = EraTransitionStateMachine(
            config.transition, self, self._fade, clock=clock,
        )
        self._task: asyncio.Task[None] | None = None

    # -- public properties --

    @property
    def machine(self) -> EraTransitionStateMachine:
        return self._machine

    @property
    def anchor(self) -> GroundPlaneAnchor:
        return self._anchor

    @property
    def placement(self) -> CreaturePlacementEngine:
        return self._placement

    @property
    def catalog(self) -> CreatureCatalog:
        return self._catalog

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def effect_track(self) -> EffectTrack:
        return self._effect_track

    @property
    def uniforms(self) -> dict[str, Any]:
        return self._uniforms

    @property
    def slider_locked(self) -> bool:
        return self._slider_locked

    @property
    def placed(self) -> list[PlacedCreature]:
        return list(self._placed)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(1.0 / 240.0, min(value, 0.5))

    def material_of(self, instance_id: str) -> CreatureMaterial | None:
        return self._materials.get(instance_id)

    def opacity_of(self, instance_id: str) -> float:
        material = self.material_of(instance_id)
        return material.opacity if material is not None else 1.0

    # -- transition control --

    def start_transition(self, era: Era, direction: Direction = Direction.PAST) -> asyncio.Future[None]:
        """Start a transition; the returned future may already be rejected."""
        now = self._clock()
        future = self._machine.transition(era, direction, now_ms=now)
        if future.done():
            return future
        future.add_done_callback(self._on_transition_done)
        if self.config.shader_effect_enabled:
            self._effect_track.stop()
            self._effect_track.start(self._machine.effect, self._machine.duration_ms, now)
        return future

    def cancel_transition(self) -> None:
        self._machine.cancel()
        self._effect_track.stop()

    def set_current_era(self, era: Era | None) -> None:
        self._machine.set_current_era(era)

    def transition_state(self) -> TransitionSnapshot:
        return self._machine.snapshot()

    async def tick(self, now_ms: float | None = None) -> Phase:
        """Advance the transition and the shader track to *now_ms*."""
        now = self._clock() if now_ms is None else now_ms
        phase = await self._machine.tick(now)
        self._effect_track.tick(now)
        return phase

    # -- ground plane & placement --

    def set_ground_y(self, y: float) -> None:
        """Store a new ground height and re-anchor everything already placed."""
        self._anchor.set_ground_y(y)
        for i, creature in enumerate(self._placed):
            position = self._anchor.anchor(creature.position)
            if position == creature.position:
                continue
            scale = creature.bounding_box.size.y
            self._placed[i] = PlacedCreature(
                id=creature.id,
                position=position,
                bounding_box=BoundingBox.from_footprint(position, scale),
                descriptor=creature.descriptor,
                instance_id=creature.instance_id,
            )
        self._log("ground", f"Ground plane at y={y:.3f}")

    def distribute(
        self,
        creatures: Sequence[CreatureDescriptor],
        center: Vector3 | None = None,
        max_creatures: int | None = None,
        replace: bool = True,
    ) -> PlacementResult:
        """Place *creatures* into the scene, replacing or extending its contents."""
        existing: Sequence[PlacedCreature] = () if replace else self._placed
        result = self._placement.distribute_report(
            creatures,
            center if center is not None else self._center,
            max_creatures=max_creatures,
            existing=existing,
            key=self._next_distribution_key(),
        )
        if replace:
            self._placed = []
            self._materials.clear()
        self._adopt(result.placed, visible=True)
        self._record_placement(result)
        return result

    def validate(self) -> bool:
        return self._placement.validate_distribution(self._placed)

    # -- TransitionObserver --

    def on_slider_lock_change(self, locked: bool) -> None:
        self._slider_locked = locked
        self._log("transition", "Slider locked" if locked else "Slider unlocked")

    def on_transition_start(self, previous: Era | None, target: Era) -> None:
        self._log("transition", f"Travelling {previous.name if previous else 'nowhere'} -> {target.name}")

    def on_transition_complete(self, target: Era) -> None:
        self._log("transition", f"Arrived in {target.name}", tuple(p.id for p in self._placed))

    def on_clear_content(self) -> None:
        cleared = tuple(p.id for p in self._placed)
        self._placed = []
        self._materials.clear()
        self._log("transition", f"Cleared {len(cleared)} creatures", cleared)

    async def load_creatures(self, era: Era) -> list[CreatureDescriptor]:
        creatures = self._catalog.for_era(era)
        result = self._placement.distribute_report(
            creatures, self._center, key=self._next_distribution_key(),
        )
        self._placed = []
        self._materials = {}
        # New arrivals start invisible and fade in
        self._adopt(result.placed, visible=False)
        self._record_placement(result)
        self._log("load", f"Loaded {len(creatures)} creatures for {era.name}", tuple(c.id for c in creatures))
        return creatures

    # -- frame loop --

    def start(self) -> None:
        """Start the frame loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run_loop(), name="frame-loop")
        logger.info("SceneManager started (tick_rate=%.4fs)", self._tick_rate)

    async def stop(self) -> None:
        self.cancel_transition()
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("SceneManager stopped.")

    async def _run_loop(self) -> None:
        while True:
            try:
                await self.tick()
            except Exception:
                logger.exception("Frame tick failed — continuing")
            await asyncio.sleep(self._tick_rate)

    # -- internals --

    def _next_distribution_key(self) -> int:
        self._distribution_key += 1
        return self._distribution_key

    def _adopt(self, placed: Sequence[PlacedCreature], visible: bool) -> None:
        """Give each new placement an instance id and its own material."""
        for creature in placed:
            creature.instance_id = f"{creature.id}#{next(self._instance_ids)}"
            self._placed.append(creature)
            self._materials[creature.instance_id] = (
                CreatureMaterial() if visible else CreatureMaterial(opacity=0.0, transparent=True)
            )

    def _record_placement(self, result: PlacementResult) -> None:
        if result.placed:
            self._log("placement", f"Placed {len(result.placed)} creatures", tuple(p.id for p in result.placed))
        if result.skipped:
            self._log("placement", f"No room for {len(result.skipped)} creatures", tuple(result.skipped))

    def _on_transition_done(self, future: asyncio.Future[None]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if isinstance(exc, TransitionCancelledError):
            self._log("transition", str(exc))
        elif exc is not None:
            logger.error("Transition failed: %r", exc)

    def _on_effect_complete(self, effect: EffectType) -> None:
        logger.debug("Shader effect %s finished", effect.name)

    def _log(self, category: str, message: str, creature_ids: tuple[str, ...] = ()) -> None:
        self._event_log.append(SceneEvent(
            timestamp_ms=self._clock(),
            category=category,
            message=message,
            creature_ids=creature_ids,
        ))
