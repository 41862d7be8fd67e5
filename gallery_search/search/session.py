# Path: gallery_search/search/session.py
# Purpose: Let a newer query supersede an in-flight one through explicit cancellation tokens.
# Layer: gallery_search/search.
# Details: The ranker never cancels work itself; the session discards results that went stale.

from __future__ import annotations

import threading
from typing import List, Optional

from gallery_search.models.domain import SearchMode, SearchResult
from .pipeline import HybridRanker


class CancellationToken:
    """Flag shared between the party that starts work and the party that may abandon it."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class SearchSession:
    """Feed successive query proposals (e.g. from a debounced text box) into a ranker."""

    def __init__(self, ranker: HybridRanker, min_query_length: int = 2) -> None:
        self.ranker = ranker
        self.min_query_length = min_query_length
        self._lock = threading.Lock()
        self._current: Optional[CancellationToken] = None

    def _begin(self) -> CancellationToken:
        token = CancellationToken()
        with self._lock:
            if self._current is not None:
                self._current.cancel()
            self._current = token
        return token

    def cancel(self) -> None:
        """Abandon whatever query is in flight."""

        with self._lock:
            if self._current is not None:
                self._current.cancel()

    def submit(self, query: str, mode: SearchMode | str = SearchMode.FUZZY) -> Optional[List[SearchResult]]:
        """Run ``query`` and return its results, or None if a newer query superseded it.

        Queries shorter than ``min_query_length`` after trimming return an empty list.
        """

        token = self._begin()
        trimmed = query.strip()
        if len(trimmed) < self.min_query_length:
            return []
        results = self.ranker.search(trimmed, mode)
        if token.cancelled:
            return None
        return results


__all__ = ["CancellationToken", "SearchSession"]
