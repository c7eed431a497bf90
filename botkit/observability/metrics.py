"""Tick metrics for driver loops."""

import time
from collections import deque
from typing import Any, Deque, Dict


class MetricsCollector:
    """
    Counters, timers and last-value metrics for one control loop.

    Timers keep the latest duration in ``timers`` and the most recent
    ``history_size`` durations in ``history`` so jitter between ticks can be
    inspected without growing over a long session.
    """

    def __init__(self, history_size: int = 1000):
        if history_size < 1:
            raise ValueError(f"history_size must be positive, got {history_size}")
        self.history_size = history_size
        self.metrics: Dict[str, Any] = {}
        self.counters: Dict[str, int] = {}
        self.timers: Dict[str, float] = {}
        self.history: Dict[str, Deque[float]] = {}
        self._started: Dict[str, float] = {}

    def set_metric(self, name: str, value: Any):
        self.metrics[name] = value

    def increment_counter(self, name: str, delta: int = 1):
        self.counters[name] = self.counters.get(name, 0) + delta

    def start_timer(self, name: str):
        self._started[name] = time.perf_counter()

    def stop_timer(self, name: str) -> float:
        """Stop a timer and return its duration in seconds (0.0 if never started)."""
        if name not in self._started:
            return 0.0
        duration = time.perf_counter() - self._started.pop(name)
        self.timers[name] = duration
        self.history.setdefault(name, deque(maxlen=self.history_size)).append(duration)
        return duration

    def get_all_metrics(self) -> Dict[str, Any]:
        return {
            "metrics": self.metrics.copy(),
            "counters": self.counters.copy(),
            "timers": self.timers.copy()
        }

    def reset(self):
        self.metrics.clear()
        self.counters.clear()
        self.timers.clear()
        self.history.clear()
        self._started.clear()

    def timer_stats(self, name: str) -> Dict[str, float]:
        """Stats over the retained window of durations."""
        durations = self.history.get(name, [])
        if not durations:
            return {"count": 0}
        return {
            "count": len(durations),
            "mean": sum(durations) / len(durations),
            "max": max(durations),
            "total": sum(durations),
        }

    def summary_stats(self) -> Dict[str, Any]:
        return {
            "total_metrics": len(self.metrics),
            "total_counters": len(self.counters),
            "total_timers": len(self.timers),
            "counter_sum": sum(self.counters.values()),
            "timer_total": sum(sum(d) for d in self.history.values())
        }
