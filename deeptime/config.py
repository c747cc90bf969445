"""Runtime configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass, field

from deeptime.core.enums import LoadRacePolicy

MIN_TRANSITION_DURATION_MS = 1000.0
MAX_TRANSITION_DURATION_MS = 2000.0


def clamp_duration(duration_ms: float) -> float:
    """Clamp a requested transition duration into the allowed window."""
    return max(MIN_TRANSITION_DURATION_MS, min(MAX_TRANSITION_DURATION_MS, float(duration_ms)))


@dataclass(frozen=True)
class TransitionTiming:
    """Timing of one era transition.

    ``duration_ms`` is clamped into [1000, 2000] on construction.  The two
    fade ratios share the timeline with the loading slice in between, so
    their sum may not exceed 1.
    """

    duration_ms: float = 1500.0
    fade_out_ratio: float = 0.4
    fade_in_ratio: float = 0.4       # 0.2 left for loading
    load_race_policy: LoadRacePolicy = LoadRacePolicy.ACCEPT

    def __post_init__(self) -> None:
        object.__setattr__(self, "duration_ms", clamp_duration(self.duration_ms))
        for name in ("fade_out_ratio", "fade_in_ratio"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.fade_out_ratio + self.fade_in_ratio > 1.0:
            raise ValueError(
                f"fade_out_ratio + fade_in_ratio must be <= 1, got "
                f"{self.fade_out_ratio} + {self.fade_in_ratio}"
            )

    @property
    def fade_out_end(self) -> float:
        return self.fade_out_ratio

    @property
    def loading_end(self) -> float:
        return self.fade_out_ratio + (1.0 - self.fade_out_ratio - self.fade_in_ratio)


@dataclass(frozen=True)
class PlacementConfig:
    """Tuning for the rejection-sampling creature distribution."""

    min_spacing: float = 2.0              # meters from the center point
    distribution_radius: float = 5.0      # meters
    max_creatures: int = 3                # hard performance cap
    max_attempts_per_creature: int = 20
    max_overlap_fraction: float = 0.10


@dataclass(frozen=True)
class DeepTimeConfig:
    """Immutable configuration for a scene session."""

    transition: TransitionTiming = field(default_factory=TransitionTiming)
    placement: PlacementConfig = field(default_factory=PlacementConfig)

    # Placement RNG
    placement_seed: int = 42
    default_center: tuple[float, float, float] = (0.0, 0.0, -3.0)

    # Ground plane
    ground_tolerance_meters: float = 0.01

    # Frame loop
    frame_interval_seconds: float = 1.0 / 60.0

    # Full-scene dissolve/emerge uniform track alongside the fades
    shader_effect_enabled: bool = True

    # Creature catalogue (JSON manifest); built-in set when empty
    catalog_path: str = ""

    # Logging
    log_level: str = "INFO"
