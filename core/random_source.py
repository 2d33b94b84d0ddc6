"""
Seeded Random Source
Deterministic pseudo-random stream shared by every stochastic step of a layout run
"""
from typing import List, MutableSequence, TypeVar

from config.layout_config import LCG_MULTIPLIER, LCG_INCREMENT, LCG_MODULUS

T = TypeVar("T")


class SeededRandom:
    """
    32-bit linear congruential generator.

    state = (state * 1664525 + 1013904223) mod 2^32, output = state / 2^32.
    All arithmetic is done on Python integers so the stream is identical on
    every platform for a given seed.
    """

    def __init__(self, seed: int):
        self._state = int(seed) % LCG_MODULUS

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        """Advance the generator and return a float in [0, 1)"""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def randint_below(self, n: int) -> int:
        """Draw an integer in [0, n)"""
        return int(self.next() * n)

    def shuffle(self, items: MutableSequence[T]) -> None:
        """
        Fisher-Yates shuffle in place.

        Walks from the last index down to 1, swapping i with j = floor(next() * (i + 1)).
        """
        for i in range(len(items) - 1, 0, -1):
            j = self.randint_below(i + 1)
            items[i], items[j] = items[j], items[i]

    def shuffled(self, items: List[T]) -> List[T]:
        """Return a shuffled copy of items"""
        copy = list(items)
        self.shuffle(copy)
        return copy
