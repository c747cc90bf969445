"""Engine systems: RNG, effect selection, fades, creature placement."""

from deeptime.systems.rng import DeterministicRNG
from deeptime.systems.effects import select_effect
from deeptime.systems.fade import EffectTrack, FadeCoordinator, FadeTarget
from deeptime.systems.placement import CreaturePlacementEngine, PlacementResult

__all__ = [
    "CreaturePlacementEngine",
    "DeterministicRNG",
    "EffectTrack",
    "FadeCoordinator",
    "FadeTarget",
    "PlacementResult",
    "select_effect",
]
