"""In-process search metrics: per-operation count, total latency, slow count."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_SLOW_THRESHOLD_MS = 500.0


@dataclass(frozen=True)
class OperationStats:
    """Read-out for one operation name."""

    count: int
    total_duration_ms: float
    average_duration_ms: float
    slow_count: int


class SearchMetricsCollector:
    """Thread-safe metrics sink. One instance per process, created at startup.

    record_operation() is called once per orchestrator call; the HTTP health
    endpoint reads snapshot().
    """

    def __init__(self, slow_threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS) -> None:
        self.slow_threshold_ms = slow_threshold_ms
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {}
        self._durations: dict[str, float] = {}
        self._slow: dict[str, int] = {}

    def record_operation(self, name: str, duration_ms: float) -> None:
        slow = duration_ms > self.slow_threshold_ms
        with self._lock:
            self._counts[name] = self._counts.get(name, 0) + 1
            self._durations[name] = self._durations.get(name, 0.0) + duration_ms
            if slow:
                self._slow[name] = self._slow.get(name, 0) + 1
        if slow:
            logger.warning("Slow %s operation: %.1fms", name, duration_ms)

    def get_count(self, name: str) -> int:
        with self._lock:
            return self._counts.get(name, 0)

    def get_average_duration(self, name: str) -> float:
        with self._lock:
            count = self._counts.get(name, 0)
            return self._durations.get(name, 0.0) / count if count else 0.0

    def get_slow_count(self, name: str) -> int:
        with self._lock:
            return self._slow.get(name, 0)

    def snapshot(self) -> dict[str, OperationStats]:
        """Consistent copy of every operation's stats."""
        with self._lock:
            return {
                name: OperationStats(
                    count=count,
                    total_duration_ms=self._durations.get(name, 0.0),
                    average_duration_ms=self._durations.get(name, 0.0) / count,
                    slow_count=self._slow.get(name, 0),
                )
                for name, count in self._counts.items()
            }

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._durations.clear()
            self._slow.clear()
