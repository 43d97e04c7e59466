"""RandomStream: the one seeded random sequence shared by a pipeline run."""

from __future__ import annotations

from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomStream:
    """Seeded pseudo-random draws, consumed in a fixed order.

    A run creates exactly one stream and hands the same object to every
    compositor, so a fixed seed reproduces an identical timeline. Copying a
    stream would fork that order, so copy/deepcopy are refused.

    Args:
        seed: Random seed. None draws one from OS entropy; the chosen value
            is kept in `seed` so the run can be reproduced.
    """

    def __init__(self, seed: int | None = None):
        if seed is None:
            seed = int(np.random.default_rng().integers(0, 2**31))
        self.seed = int(seed)
        self._rng = np.random.default_rng(self.seed)
        self.draws = 0

    def next_int(self, low: int, high: int) -> int:
        """Integer in [low, high)."""
        if high <= low:
            raise ValueError(f"Empty range [{low}, {high})")
        self.draws += 1
        return int(self._rng.integers(low, high))

    def next_float(self) -> float:
        """Float in [0.0, 1.0)."""
        self.draws += 1
        return float(self._rng.random())

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.next_float()

    def choice(self, items: Sequence[T]) -> T:
        return items[self.next_int(0, len(items))]

    def shuffled(self, items: Sequence[T]) -> list[T]:
        """Uniformly shuffled copy of items."""
        self.draws += 1
        order = self._rng.permutation(len(items))
        return [items[int(i)] for i in order]

    def __copy__(self):
        raise TypeError("RandomStream must not be copied; pass the same stream along")

    def __deepcopy__(self, memo):
        raise TypeError("RandomStream must not be copied; pass the same stream along")
