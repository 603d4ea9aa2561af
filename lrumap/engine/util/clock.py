# lrumap/engine/util/clock.py
from __future__ import annotations

import time
from typing import Callable

__all__ = ["Clock", "monotonic_usecs", "FixedStepClock"]

# A clock returns a non-negative microsecond count, non-decreasing across calls.
Clock = Callable[[], int]


def monotonic_usecs() -> int:
    """Microseconds from the process-wide monotonic clock."""
    return time.monotonic_ns() // 1000


class FixedStepClock:
    """
    Deterministic clock for replays and tests.

    Each call returns the current reading and then advances it by `step`.
    With step == 0 the clock is frozen (equal timestamps are still ordered
    correctly by the recency audit, which only rejects increases).
    """

    def __init__(self, start: int = 0, step: int = 1) -> None:
        if int(start) < 0 or int(step) < 0:
            raise ValueError("FixedStepClock requires start >= 0 and step >= 0")
        self._t = int(start)
        self._step = int(step)

    def __call__(self) -> int:
        t = self._t
        self._t += self._step
        return t

    def advance(self, usecs: int) -> None:
        self._t += max(0, int(usecs))

    def peek(self) -> int:
        return self._t
