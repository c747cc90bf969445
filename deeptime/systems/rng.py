"""Domain-separated deterministic RNG using xxhash.

Each sample is a pure function of the seed and its coordinates, so a
placement run with the same seed lays creatures out identically no matter
how often the frame loop ticks in between.

Formula: RNG_Value = Hash(Seed, Domain, Key, Attempt)
"""

from __future__ import annotations

import math
import struct

import xxhash

from deeptime.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator."""

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, key: int, attempt: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, key, attempt)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, attempt: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, attempt) / (self._MAX_UINT64 + 1)

    def next_uniform(self, domain: Domain, key: int, attempt: int, low: float, high: float) -> float:
        """Return a deterministic float in [low, high)."""
        return low + self.next_float(domain, key, attempt) * (high - low)

    def next_angle(self, domain: Domain, key: int, attempt: int) -> float:
        """Return a deterministic angle in [0, 2*pi)."""
        return self.next_float(domain, key, attempt) * math.tau
