"""Fade coordination: one opacity value fanned out to every fade target.

Per-material creature fades and the full-scene dissolve/emerge shader are
the same operation aimed at different sinks, so both go through the
``FadeTarget`` interface:

  MaterialFadeTarget      — sets ``transparent``/``opacity`` on material objects
  ShaderUniformFadeTarget — writes a progress uniform (``uProgress``)
  CallbackFadeTarget      — hands the value to an arbitrary callable

``EffectTrack`` is the optional tick-driven shader animation that runs
alongside a transition and feeds its progress through a uniform target.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, MutableMapping

from deeptime.core.enums import EffectType

logger = logging.getLogger(__name__)

# Tint colours for the two shader effects (RGB 0-255)
DISSOLVE_COLOR: tuple[int, int, int] = (0xD4, 0xA5, 0x74)  # amber/sepia for the past
EMERGE_COLOR: tuple[int, int, int] = (0x74, 0xB4, 0xD4)    # cyan/blue for the future


def opacity_for_phase_progress(phase_local_t: float) -> float:
    """Clamp a phase-local progress value into a valid opacity."""
    return max(0.0, min(1.0, phase_local_t))


def effect_color(effect: EffectType) -> tuple[int, int, int]:
    return DISSOLVE_COLOR if effect == EffectType.DISSOLVE else EMERGE_COLOR


class FadeTarget(ABC):
    """Something that accepts a clamped [0, 1] fade value."""

    @abstractmethod
    def apply(self, value: float) -> None:
        """Receive a value already clamped to [0, 1]."""


class MaterialFadeTarget(FadeTarget):
    """Sets opacity on every material yielded by *provider*.

    Materials are any objects exposing an ``opacity`` attribute; objects
    without one are skipped.
    """

    __slots__ = ("_provider",)

    def __init__(self, provider: Callable[[], Iterable[Any]]) -> None:
        self._provider = provider

    def apply(self, value: float) -> None:
        for material in self._provider():
            if not hasattr(material, "opacity"):
                continue
            material.transparent = True
            material.opacity = value


class ShaderUniformFadeTarget(FadeTarget):
    """Writes the value into a uniform mapping under *name*."""

    __slots__ = ("_uniforms", "_name")

    def __init__(self, uniforms: MutableMapping[str, Any], name: str = "uProgress") -> None:
        self._uniforms = uniforms
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def apply(self, value: float) -> None:
        self._uniforms[self._name] = value


class CallbackFadeTarget(FadeTarget):
    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[float], None]) -> None:
        self._fn = fn

    def apply(self, value: float) -> None:
        self._fn(value)


class FadeCoordinator:
    """Clamps once, then pushes the value to each registered target."""

    __slots__ = ("_targets", "_last")

    def __init__(self, targets: Iterable[FadeTarget] = ()) -> None:
        self._targets: list[FadeTarget] = list(targets)
        self._last: float | None = None

    @property
    def last_opacity(self) -> float | None:
        """The last value applied, or None if nothing has been applied."""
        return self._last

    @property
    def targets(self) -> tuple[FadeTarget, ...]:
        return tuple(self._targets)

    def add_target(self, target: FadeTarget) -> None:
        self._targets.append(target)

    def remove_target(self, target: FadeTarget) -> None:
        if target in self._targets:
            self._targets.remove(target)

    def apply(self, phase_local_t: float) -> float:
        opacity = opacity_for_phase_progress(phase_local_t)
        self._last = opacity
        for target in self._targets:
            target.apply(opacity)
        return opacity


class EffectTrack:
    """Full-scene dissolve/emerge uniform animation, driven by ``tick(now)``.

    Writes ``uProgress`` (through a ShaderUniformFadeTarget), ``uTime`` in
    seconds and ``uColor``.  Runs independently of the transition phases and
    stops itself when progress reaches 1.
    """

    __slots__ = ("_uniforms", "_progress", "_effect", "_start", "_duration", "_active", "_on_complete")

    def __init__(
        self,
        uniforms: MutableMapping[str, Any] | None = None,
        on_complete: Callable[[EffectType], None] | None = None,
    ) -> None:
        self._uniforms: MutableMapping[str, Any] = uniforms if uniforms is not None else {}
        self._progress = FadeCoordinator([ShaderUniformFadeTarget(self._uniforms, "uProgress")])
        self._effect: EffectType | None = None
        self._start = 0.0
        self._duration = 0.0
        self._active = False
        self._on_complete = on_complete

    @property
    def uniforms(self) -> MutableMapping[str, Any]:
        return self._uniforms

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def effect(self) -> EffectType | None:
        return self._effect

    def start(self, effect: EffectType, duration_ms: float, now_ms: float) -> bool:
        """Begin an effect; ignored (returns False) while one is running."""
        if self._active:
            return False
        self._effect = effect
        self._start = now_ms
        self._duration = max(1.0, duration_ms)
        self._active = True
        self._uniforms["uColor"] = effect_color(effect)
        self._uniforms["uTime"] = 0.0
        self._progress.apply(0.0)
        logger.debug("Effect %s started (%.0f ms)", effect.name, self._duration)
        return True

    def tick(self, now_ms: float) -> float:
        """Advance from absolute time; returns the applied progress."""
        if not self._active:
            return self._progress.last_opacity or 0.0
        elapsed = max(0.0, now_ms - self._start)
        progress = self._progress.apply(elapsed / self._duration)
        self._uniforms["uTime"] = elapsed / 1000.0
        if progress >= 1.0:
            effect = self._effect
            self.stop()
            if self._on_complete is not None and effect is not None:
                self._on_complete(effect)
        return progress

    def set_progress(self, progress: float) -> None:
        """Manual override, e.g. to scrub the effect from outside."""
        if self._active:
            self._progress.apply(progress)

    def stop(self) -> None:
        self._active = False
