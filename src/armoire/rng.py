"""Injectable randomness for reward resolution.

Handlers never touch the global ``random`` module; they receive a
``RandomSource`` so tests and replays can substitute a deterministic one.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(ABC):
    """Supplies uniform draws and uniform choices."""

    @abstractmethod
    def uniform(self) -> float:
        """Return a float in [0, 1)."""

    @abstractmethod
    def pick_one(self, choices: Sequence[T]) -> T:
        """Return one element of ``choices``; raises ValueError when empty."""


class SeededRandomSource(RandomSource):
    """Production source backed by ``random.Random``."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random(seed)

    def uniform(self) -> float:
        return self.rng.random()

    def pick_one(self, choices: Sequence[T]) -> T:
        if not choices:
            raise ValueError("pick_one() requires a non-empty sequence")
        return self.rng.choice(list(choices))


class FixedRandomSource(RandomSource):
    """Deterministic source replaying scripted values.

    ``draws`` are returned by ``uniform()`` in order; once exhausted the last
    draw repeats. ``picks`` are keys returned by ``pick_one()`` when present
    in the offered choices, otherwise the first choice is returned.

    Args:
        draws: Values for ``uniform()`` (each in [0, 1)).
        picks: Preferred results for ``pick_one()``.
    """

    def __init__(self, draws: Iterable[float] = (0.0,), picks: Iterable[object] = ()):
        self.draws: List[float] = list(draws) or [0.0]
        self.picks: List[object] = list(picks)
        self.uniform_calls = 0
        self.pick_calls = 0

    def uniform(self) -> float:
        index = min(self.uniform_calls, len(self.draws) - 1)
        self.uniform_calls += 1
        return self.draws[index]

    def pick_one(self, choices: Sequence[T]) -> T:
        if not choices:
            raise ValueError("pick_one() requires a non-empty sequence")
        self.pick_calls += 1
        for wanted in self.picks:
            if wanted in choices:
                return wanted  # type: ignore[return-value]
        return choices[0]
