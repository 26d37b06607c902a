"""Random sources for the simulation.

The engine never touches the module-level `random` functions. Every call
that needs randomness receives a SimRandom, so a whole play (or game) can
be replayed exactly from a seed, and tests can pin the sequence of values.

All helpers are built on top of `random()`, so a subclass only has to
override that one method to control every roll.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class SimRandom:
    """Seedable random source threaded through the engine."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], inclusive."""
        if high < low:
            low, high = high, low
        span = high - low + 1
        return low + min(int(self.random() * span), span - 1)

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self.random() < probability

    def noise(self, spread: float) -> float:
        """Symmetric noise in [-spread, +spread]."""
        return (self.random() * 2.0 - 1.0) * spread

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise IndexError("Cannot choose from an empty sequence")
        return items[self.randint(0, len(items) - 1)]

    def shuffle(self, items: list) -> None:
        """In-place Fisher-Yates shuffle driven by random()."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(0, i)
            items[i], items[j] = items[j], items[i]

    def spawn(self) -> SimRandom:
        """Derive an independent child source (e.g. one per game in a week)."""
        return SimRandom(self.randint(0, 2**31 - 1))


class SequenceRandom(SimRandom):
    """
    Replays a fixed list of values, repeating the last one forever.

    A constant 0.5 zeroes every noise term, which makes contests compare raw
    power; 0.99 / 0.01 push every probability check one way.
    """

    def __init__(self, values: Sequence[float]):
        if not values:
            raise ValueError("SequenceRandom needs at least one value")
        for value in values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Sequence values must be in [0, 1), got {value}")
        super().__init__(seed=None)
        self._values = list(values)
        self._index = 0

    def random(self) -> float:
        value = self._values[min(self._index, len(self._values) - 1)]
        self._index += 1
        return value

    @property
    def calls(self) -> int:
        """How many values have been drawn so far."""
        return self._index
