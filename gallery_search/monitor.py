# Path: gallery_search/monitor.py
# Purpose: Measure indexing throughput and search latency.
# Layer: gallery_search.
# Details: One instance per application session, injected into the indexing pipeline and ranker.

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from gallery_search.models.domain import IndexingStats, SearchStats


class PerformanceMonitor:
    """Stopwatch pair for the indexing run and searches.

    ``start_*`` return their start mark; concurrent callers pass it back to ``end_*``
    instead of relying on the last recorded start.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._indexing_started = 0.0
        self._search_started = 0.0

    def start_indexing(self) -> float:
        with self._lock:
            self._indexing_started = self._clock()
            return self._indexing_started

    def end_indexing(self, image_count: int, started: Optional[float] = None) -> IndexingStats:
        with self._lock:
            origin = self._indexing_started if started is None else started
            elapsed = self._clock() - origin
        duration_ms = int(elapsed * 1000)
        rate = image_count * 1000.0 / duration_ms if duration_ms > 0 else 0.0
        return IndexingStats(total_images=image_count, duration_ms=duration_ms, images_per_second=rate)

    def start_search(self) -> float:
        with self._lock:
            self._search_started = self._clock()
            return self._search_started

    def end_search(self, result_count: int, started: Optional[float] = None) -> SearchStats:
        with self._lock:
            origin = self._search_started if started is None else started
            elapsed = self._clock() - origin
        return SearchStats(result_count=result_count, duration_ms=int(elapsed * 1000))
