"""Prefix-sum index for score-proportional seed selection.

Slots are kept in insertion order, never sorted by score. Each slot stores
the running total of scores up to and including itself, so drawing a target
uniformly from ``[0, total)`` and taking the first slot whose running total
reaches it picks every input with probability ``score / total``.

Replacing an input shifts every later running total by the score delta,
which is O(n) in the worst case. Lookups are either a linear scan or a
binary search; both return the same slot for every target because the
running totals never decrease.
"""

from __future__ import annotations

import random
from bisect import bisect_left
from typing import Generic, Iterator, Literal, TypeVar

T = TypeVar("T")

Strategy = Literal["linear", "bisect"]


class SamplingIndex(Generic[T]):
    """Ordered ``(running_score, item)`` slots with proportional lookup."""

    def __init__(self, strategy: Strategy = "bisect") -> None:
        if strategy not in ("linear", "bisect"):
            raise ValueError(f"Unknown sampling strategy: {strategy!r}")
        self.strategy: Strategy = strategy
        # _items[i] is held by the slot whose running total is _running[i].
        self._items: list[T] = []
        self._running: list[float] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    @property
    def total(self) -> float:
        return self._running[-1] if self._running else 0.0

    def running_scores(self) -> list[float]:
        return list(self._running)

    def append(self, item: T, score: float) -> int:
        """Add a slot at the end; returns its index."""
        self._running.append(self.total + score)
        self._items.append(item)
        return len(self._items) - 1

    def replace(self, index: int, item: T, score_delta: float, score: float) -> None:
        """Swap the item in ``index`` and shift later running totals by ``score_delta``."""
        for i in range(index + 1, len(self._running)):
            self._running[i] += score_delta

        self._running[index] = score if index == 0 else self._running[index - 1] + score
        self._items[index] = item

    def select(self, target: float) -> T:
        """Deterministic lookup: the first slot whose running total is >= ``target``."""
        if not self._items:
            raise IndexError("select from an empty sampling index")
        if self.strategy == "bisect":
            i = bisect_left(self._running, target)
        else:
            i = 0
            while i < len(self._running) and self._running[i] < target:
                i += 1
        # Float drift can leave target a hair above the last total.
        return self._items[min(i, len(self._items) - 1)]

    def pick(self, rng: random.Random) -> T:
        """Draw one item with probability proportional to its score."""
        return self.select(rng.random() * self.total)
