"""
Screen-Time Casino - Deterministic Random Sources

Every game round is a pure function of (input, seed). The seed feeds a
linear-congruential generator owned by that round alone; replaying the
same seed replays the same round, which is how Math Challenge re-derives
its answer key at grading time.

Two parameterizations are in use:

    ParkMillerRandom          state = state * 16807 mod (2^31 - 1)
                              slots, blackjack, roulette, jewel mining
    LinearCongruentialRandom  state = (state * 9301 + 49297) mod 233280
                              plinko, pai gow, math challenge

Usage:
    from tools.seeded_rng import ParkMillerRandom
    rng = ParkMillerRandom(12345)
    rng.next()            # float in [0, 1)
    rng.next_int(1, 6)    # inclusive bounds
    rng.shuffle(cards)    # in-place Fisher-Yates
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import MutableSequence, Sequence, TypeVar

T = TypeVar("T")


# ═══════════════════════════════════════════════════════════════
# Base Stream
# ═══════════════════════════════════════════════════════════════

class SeededRandom(ABC):
    """A reproducible stream of floats in [0, 1)."""

    modulus: int = 1

    def __init__(self, seed: int):
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise TypeError(f"seed must be an int, got {type(seed).__name__}")
        self.seed = seed
        self.state = self._initial_state(seed)

    def _initial_state(self, seed: int) -> int:
        return seed % self.modulus

    @abstractmethod
    def next(self) -> float:
        """Advance the state and return a float in [0, 1)."""
        ...

    def next_int(self, low: int, high: int) -> int:
        """Integer N with low <= N <= high."""
        return math.floor(self.next() * (high - low + 1)) + low

    def choice(self, seq: Sequence[T]) -> T:
        return seq[math.floor(self.next() * len(seq))]

    def shuffle(self, items: MutableSequence[T]) -> None:
        """Fisher-Yates, walking from the tail toward the head."""
        for i in range(len(items) - 1, 0, -1):
            j = math.floor(self.next() * (i + 1))
            items[i], items[j] = items[j], items[i]


# ═══════════════════════════════════════════════════════════════
# Generators
# ═══════════════════════════════════════════════════════════════

class ParkMillerRandom(SeededRandom):
    """Lehmer generator (MINSTD), multiplier 16807, prime modulus 2^31 - 1."""

    multiplier = 16807
    modulus = 2147483647

    def _initial_state(self, seed: int) -> int:
        # zero is a fixed point of a pure multiplicative generator
        return seed % self.modulus or 1

    def next(self) -> float:
        self.state = (self.state * self.multiplier) % self.modulus
        return (self.state - 1) / (self.modulus - 1)


class LinearCongruentialRandom(SeededRandom):
    """Short-period mixed LCG (a=9301, c=49297, m=233280)."""

    multiplier = 9301
    increment = 49297
    modulus = 233280

    def next(self) -> float:
        self.state = (self.state * self.multiplier + self.increment) % self.modulus
        return self.state / self.modulus
