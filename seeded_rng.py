"""
seeded_rng.py

Shared-seed randomness. Every client must produce the same platform and coin
layout from the same seed, so both the generator and the seed hash below are
fixed bit-for-bit:

- RandomStream: mulberry32 over 32-bit unsigned state.
- derive_seed: 31-multiplier rolling hash over UTF-16 code units, wrapped to a
  signed 32-bit integer at each step, absolute value at the end.
"""

from __future__ import annotations

import math
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF
GOLDEN_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296.0


class RandomSource(Protocol):
    """Anything that yields floats in [0, 1) (random.Random, RandomStream)."""

    def random(self) -> float:
        ...


def _imul(a: int, b: int) -> int:
    return ((a & MASK_32) * (b & MASK_32)) & MASK_32


def _to_int32(v: int) -> int:
    v &= MASK_32
    return v - 0x100000000 if v & 0x80000000 else v


class RandomStream:
    """Seeded mulberry32 stream. Draw order is part of the determinism contract."""

    def __init__(self, seed: int) -> None:
        self.state = int(seed) & MASK_32

    def next(self) -> float:
        self.state = (self.state + GOLDEN_INCREMENT) & MASK_32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
        return ((t ^ (t >> 14)) & MASK_32) / TWO_POW_32

    def random(self) -> float:
        return self.next()

    def next_int(self, lo: float, hi: float) -> float:
        """Integer step in [lo, hi] inclusive (lo is added back, so float bounds stay float)."""
        return math.floor(self.next() * (hi - lo + 1)) + lo

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("pick() from an empty sequence")
        return items[math.floor(self.next() * len(items))]


def derive_seed(identity: str, salt: str = "") -> int:
    """Hash a calendar identity plus salt into a non-negative seed."""
    text = identity + salt
    units = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(units), 2):
        code = units[i] | (units[i + 1] << 8)
        h = _to_int32((h << 5) - h + code)
    return abs(h)
