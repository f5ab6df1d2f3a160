"""Query frequency tracking: hot queries and cache candidates."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from docsearch.shared.utils import normalize_whitespace

logger = logging.getLogger(__name__)

HOT_QUERY_THRESHOLD = 10
CACHE_CANDIDATE_THRESHOLD = 20
SLOW_QUERY_THRESHOLD_MS = 500.0
# Slow queries are only reported once they repeat this often per minute.
FREQUENT_SLOW_THRESHOLD = 5


@dataclass
class QueryStats:
    """Counters for one normalized query string."""

    query: str
    total_count: int = 0
    count_this_minute: int = 0
    total_duration_ms: float = field(default=0.0)

    @property
    def average_duration_ms(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.total_duration_ms / self.total_count


class QueryFrequencyAnalyzer:
    """Counts repeated queries per minute window and their average latency.

    The caller is responsible for calling reset_minute_counters() once per
    minute (analyze() does so after logging).
    """

    def __init__(
        self,
        hot_threshold: int = HOT_QUERY_THRESHOLD,
        cache_threshold: int = CACHE_CANDIDATE_THRESHOLD,
        slow_threshold_ms: float = SLOW_QUERY_THRESHOLD_MS,
    ) -> None:
        self.hot_threshold = hot_threshold
        self.cache_threshold = cache_threshold
        self.slow_threshold_ms = slow_threshold_ms
        self._lock = threading.Lock()
        self._stats: dict[str, QueryStats] = {}

    @staticmethod
    def normalize(query: str) -> str:
        return normalize_whitespace(query)

    def record(self, query: str | None, duration_ms: float) -> None:
        """Count one execution of query. Blank queries are ignored."""
        if query is None or not query.strip():
            return
        key = self.normalize(query)
        with self._lock:
            stats = self._stats.setdefault(key, QueryStats(query=key))
            stats.total_count += 1
            stats.count_this_minute += 1
            stats.total_duration_ms += duration_ms
            candidate = self._is_cache_candidate(stats)
        if candidate:
            logger.info(
                "Cache candidate: %r executed %d times/min, avg %.0fms",
                key[:200],
                stats.count_this_minute,
                stats.average_duration_ms,
            )

    def get_stats(self, query: str) -> QueryStats | None:
        with self._lock:
            return self._stats.get(self.normalize(query))

    def hot_queries(self, limit: int = 10) -> list[QueryStats]:
        """Queries executed at least hot_threshold times this minute, most frequent first."""
        with self._lock:
            hot = [s for s in self._stats.values() if s.count_this_minute >= self.hot_threshold]
        hot.sort(key=lambda s: s.count_this_minute, reverse=True)
        return hot[:limit]

    def cache_candidates(self) -> list[QueryStats]:
        """Frequent and slow queries worth caching."""
        with self._lock:
            return [s for s in self._stats.values() if self._is_cache_candidate(s)]

    def slow_frequent_queries(self, limit: int = 5) -> list[QueryStats]:
        with self._lock:
            slow = [
                s
                for s in self._stats.values()
                if s.average_duration_ms > self.slow_threshold_ms
                and s.count_this_minute >= FREQUENT_SLOW_THRESHOLD
            ]
        slow.sort(key=lambda s: s.average_duration_ms, reverse=True)
        return slow[:limit]

    def analyze(self) -> None:
        """Log hot and slow-frequent queries, then start a new minute window."""
        with self._lock:
            unique = len(self._stats)
        if unique == 0:
            return
        logger.info("Query frequency analysis: %d unique queries", unique)
        for stats in self.hot_queries():
            logger.info(
                "Hot query %r: %d times/min, avg %.0fms, total %d",
                stats.query,
                stats.count_this_minute,
                stats.average_duration_ms,
                stats.total_count,
            )
        for stats in self.slow_frequent_queries():
            logger.warning(
                "Slow frequent query %r: avg %.0fms, %d times/min",
                stats.query,
                stats.average_duration_ms,
                stats.count_this_minute,
            )
        self.reset_minute_counters()

    def reset_minute_counters(self) -> None:
        """Start a new minute window, dropping queries idle for the one that ended."""
        with self._lock:
            idle = [key for key, stats in self._stats.items() if stats.count_this_minute == 0]
            for key in idle:
                del self._stats[key]
            for stats in self._stats.values():
                stats.count_this_minute = 0
        if idle:
            logger.debug("Evicted %d idle queries from frequency stats", len(idle))

    def _is_cache_candidate(self, stats: QueryStats) -> bool:
        return (
            stats.count_this_minute >= self.cache_threshold
            and stats.average_duration_ms > self.slow_threshold_ms
        )
