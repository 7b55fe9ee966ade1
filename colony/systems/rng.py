"""Domain-separated deterministic RNG using xxhash.

Room layout and worker placement depend ONLY on the world seed and the
key being placed, never on call order, so a seed always reproduces the
same room.

Formula: RNG_Value = Hash(WorldSeed, Domain, Key, Salt)
"""

from __future__ import annotations

import struct

import xxhash

from colony.core.enums import Domain
from colony.core.models import Vector2


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, key, salt) — no
    internal mutable state.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, key: int, salt: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, key, salt)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, salt: int = 0) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, salt) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, key: int, salt: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, key, salt)
        return low + int(f * (high - low + 1))

    def next_position(self, domain: Domain, key: int, salt: int,
                      width: int, height: int, margin: int = 1) -> Vector2:
        """Return a deterministic position at least *margin* tiles inside the edges."""
        x = self.next_int(domain, key, salt * 2, margin, width - 1 - margin)
        y = self.next_int(domain, key, salt * 2 + 1, margin, height - 1 - margin)
        return Vector2(x, y)
