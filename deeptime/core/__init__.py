"""Core data models, ground plane and creature catalogue."""

from deeptime.core.enums import Direction, Domain, EffectType, LoadRacePolicy, Phase
from deeptime.core.models import BoundingBox, CreatureDescriptor, Era, PlacedCreature, Vector3
from deeptime.core.ground_plane import GroundPlaneAnchor
from deeptime.core.session import TransitionSession, TransitionSnapshot
from deeptime.core.catalog import CreatureCatalog, default_catalog, load_catalog

__all__ = [
    "BoundingBox",
    "CreatureCatalog",
    "CreatureDescriptor",
    "Direction",
    "Domain",
    "EffectType",
    "Era",
    "GroundPlaneAnchor",
    "LoadRacePolicy",
    "Phase",
    "PlacedCreature",
    "TransitionSession",
    "TransitionSnapshot",
    "Vector3",
    "default_catalog",
    "load_catalog",
]
