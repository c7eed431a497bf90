# botkit/task/clock.py
"""
Injected time sources for stateful leaves.

All times are milliseconds on a monotonic axis. Leaves never read the wall
clock directly; they call ``cx.clock.now_ms()``.
"""
from __future__ import annotations
import time
from typing import Protocol


class Clock(Protocol):
    """Anything with a monotonic ``now_ms()`` reading."""

    def now_ms(self) -> float:
        ...


class MonotonicClock:
    """Wall clock sampled at whole-millisecond resolution."""

    def now_ms(self) -> float:
        return float(time.monotonic_ns() // 1_000_000)


class ManualClock:
    """
    Clock that only moves when told to.

    Used to drive leaves with a fixed dt so trajectories are reproducible.
    """

    def __init__(self, start_ms: float = 0.0, step_ms: float = 0.0):
        self._now = float(start_ms)
        self.step_ms = float(step_ms)

    def now_ms(self) -> float:
        return self._now

    def advance(self, ms: float | None = None) -> float:
        """Move forward by ``ms`` (or ``step_ms``) and return the new reading."""
        delta = self.step_ms if ms is None else float(ms)
        if delta < 0:
            raise ValueError(f"Clock cannot run backwards: {delta}")
        self._now += delta
        return self._now


def elapsed_ms(now: float, last: float | None) -> float:
    """Elapsed interval with the 1 ms floor applied (absent ``last`` counts as 1 ms)."""
    if last is None:
        return 1.0
    return max(now - last, 1.0)
