"""Creature catalogue — which creatures belong to which era.

The manifest format matches the content layer's JSON file::

    {"creatures": {"Mesozoic": [{"id": "...", "scale": 12.0,
                                 "animations": ["idle", "roar"], ...}]}}

Key types:
  CreatureCatalog — era name -> immutable CreatureDescriptor list
  default_catalog — small built-in set used when no manifest is configured
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from deeptime.core.models import CreatureDescriptor, Era

logger = logging.getLogger(__name__)


class CreatureCatalog:
    """Read-only lookup of creature descriptors by era and id."""

    __slots__ = ("_by_era", "_by_id")

    def __init__(self, creatures: Mapping[str, Iterable[CreatureDescriptor]] | None = None) -> None:
        self._by_era: dict[str, tuple[CreatureDescriptor, ...]] = {}
        self._by_id: dict[str, CreatureDescriptor] = {}
        for era_name, items in (creatures or {}).items():
            entries = tuple(items)
            self._by_era[era_name] = entries
            for c in entries:
                self._by_id.setdefault(c.id, c)

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> CreatureCatalog:
        creatures: dict[str, list[CreatureDescriptor]] = {}
        for era_name, entries in manifest.get("creatures", {}).items():
            creatures[era_name] = [_descriptor_from_entry(era_name, e) for e in entries]
        return cls(creatures)

    def for_era(self, era: Era | str) -> list[CreatureDescriptor]:
        """Creatures listed under *era*, dropping entries tagged for another era."""
        name = era.name if isinstance(era, Era) else era
        return [c for c in self._by_era.get(name, ()) if not c.era or c.era == name]

    def by_id(self, creature_id: str) -> CreatureDescriptor | None:
        return self._by_id.get(creature_id)

    def eras(self) -> list[str]:
        return list(self._by_era)

    def all(self) -> list[CreatureDescriptor]:
        return [c for entries in self._by_era.values() for c in entries]

    def __len__(self) -> int:
        return len(self._by_id)


def _descriptor_from_entry(era_name: str, entry: Mapping[str, Any]) -> CreatureDescriptor:
    scale = entry.get("scale", entry.get("real_world_scale_meters"))
    if scale is None:
        raise ValueError(f"Creature {entry.get('id', '?')!r} in {era_name} has no scale")
    return CreatureDescriptor(
        id=entry["id"],
        real_world_scale_meters=float(scale),
        supported_animations=tuple(entry.get("animations", ("idle",))),
        name=entry.get("name", ""),
        era=entry.get("era", era_name),
        diet=entry.get("diet", ""),
        size=entry.get("size", ""),
    )


def load_catalog(path: str | Path) -> CreatureCatalog:
    """Read a JSON manifest from disk."""
    path = Path(path)
    manifest = json.loads(path.read_text(encoding="utf-8"))
    catalog = CreatureCatalog.from_manifest(manifest)
    logger.info("Loaded %d creatures across %d eras from %s", len(catalog), len(catalog.eras()), path)
    return catalog


def _c(cid: str, name: str, era: str, scale: float, anims: tuple[str, ...], diet: str, size: str) -> CreatureDescriptor:
    return CreatureDescriptor(
        id=cid, real_world_scale_meters=scale, supported_animations=anims,
        name=name, era=era, diet=diet, size=size,
    )


DEFAULT_ERAS: tuple[Era, ...] = (
    Era(name="Cenozoic", years_ago=2_000_000, period="Quaternary", epoch="Pleistocene"),
    Era(name="Mesozoic", years_ago=66_000_000, period="Cretaceous"),
    Era(name="Paleozoic", years_ago=300_000_000, period="Carboniferous"),
)


def default_catalog() -> CreatureCatalog:
    """Built-in creature set for the three default eras."""
    return CreatureCatalog({
        "Cenozoic": [
            _c("woolly-mammoth", "Woolly Mammoth", "Cenozoic", 3.5, ("idle", "walk", "trumpet"), "herbivore", "large"),
            _c("smilodon", "Smilodon", "Cenozoic", 1.2, ("idle", "walk", "roar"), "carnivore", "medium"),
            _c("megatherium", "Megatherium", "Cenozoic", 4.0, ("idle", "eat"), "herbivore", "large"),
        ],
        "Mesozoic": [
            _c("tyrannosaurus", "Tyrannosaurus Rex", "Mesozoic", 4.0, ("idle", "walk", "roar"), "carnivore", "massive"),
            _c("triceratops", "Triceratops", "Mesozoic", 3.0, ("idle", "graze", "attention"), "herbivore", "large"),
            _c("velociraptor", "Velociraptor", "Mesozoic", 0.5, ("idle", "walk"), "carnivore", "small"),
            _c("pteranodon", "Pteranodon", "Mesozoic", 1.8, ("idle",), "carnivore", "medium"),
        ],
        "Paleozoic": [
            _c("meganeura", "Meganeura", "Paleozoic", 0.7, ("idle",), "carnivore", "small"),
            _c("arthropleura", "Arthropleura", "Paleozoic", 2.0, ("idle", "walk"), "herbivore", "medium"),
        ],
    })
