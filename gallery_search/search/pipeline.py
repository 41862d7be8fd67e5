# Path: gallery_search/search/pipeline.py
# Purpose: Orchestrate query workflow by combining label strategies, the embedder, and the vector index.
# Layer: gallery_search/search.
# Details: Fuzzy mode fuses lexical and cosine scores; exact, prefix, and contains modes stay purely lexical.

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from gallery_config.settings import SearchSettings
from gallery_search.embedders.base import Embedder, tokenize
from gallery_search.models.domain import ImageRecord, SearchMode, SearchResult
from gallery_search.monitor import PerformanceMonitor
from gallery_search.store.base import RecordStore
from .lexical import text_score
from .strategies import DEFAULT_STRATEGIES, SearchStrategy
from .vector_index import VectorIndex

logger = logging.getLogger(__name__)


class HybridRanker:
    """High-level service bridging callers with the record store, embedder, and vector index.

    The ranker only reads from the store, so concurrent calls are safe.
    """

    def __init__(
        self,
        store: RecordStore,
        embedder: Embedder,
        vector_index: Optional[VectorIndex] = None,
        settings: Optional[SearchSettings] = None,
        strategies: Optional[Dict[SearchMode, SearchStrategy]] = None,
        monitor: Optional[PerformanceMonitor] = None,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.vector_index = vector_index or VectorIndex()
        self.settings = settings or SearchSettings()
        self.strategies: Dict[SearchMode, SearchStrategy] = strategies or dict(DEFAULT_STRATEGIES)
        self.monitor = monitor or PerformanceMonitor()

    def search(self, query: str, mode: SearchMode | str = SearchMode.FUZZY) -> List[SearchResult]:
        """
        Rank stored records against a free-text query.

        External calls:
        - gallery_search/search/strategies.py::SearchStrategy.prefilter - gathers label candidates.
        - gallery_search/search/vector_index.py::VectorIndex.similarity - cosine score in fuzzy mode.
        """

        if not query or not query.strip():
            return []

        mode = SearchMode.parse(mode)
        strategy = self.strategies.get(mode)
        if strategy is None:
            raise ValueError(f"No strategy registered for search mode: {mode.value}")

        started = self.monitor.start_search()
        tokens = tokenize(query)
        candidates = self._gather_candidates(strategy, tokens)
        if not candidates:
            results: List[SearchResult] = []
        elif mode is SearchMode.FUZZY:
            results = self._fused(query, tokens, candidates, strategy)
        else:
            results = self._lexical(tokens, candidates, strategy)

        results.sort(key=lambda result: result.relevance_score, reverse=True)
        results = results[: self.settings.result_limit]

        stats = self.monitor.end_search(len(results), started)
        logger.debug("Search %r (%s) returned %d results in %d ms", query, mode.value, stats.result_count, stats.duration_ms)
        return results

    def semantic_search(
        self, query: str, threshold: Optional[float] = None, top_k: Optional[int] = None
    ) -> List[SearchResult]:
        """Rank records by embedding similarity alone."""

        if not query or not query.strip():
            return []
        return self.vector_index.rank(
            self.embedder.embed_query(query),
            self.store.all_with_embedding(),
            threshold=self.settings.vector_threshold if threshold is None else threshold,
            top_k=self.settings.vector_top_k if top_k is None else top_k,
        )

    def _gather_candidates(self, strategy: SearchStrategy, tokens: List[str]) -> List[ImageRecord]:
        """Union embedded records with the strategy's label matches, first occurrence wins."""

        merged: Dict[str, ImageRecord] = {}
        for record in self.store.all_with_embedding() + strategy.prefilter(self.store, tokens):
            merged.setdefault(record.id, record)
        return list(merged.values())

    def _fused(
        self, query: str, tokens: List[str], candidates: List[ImageRecord], strategy: SearchStrategy
    ) -> List[SearchResult]:
        query_embedding = self.embedder.embed_query(query)
        results: List[SearchResult] = []
        for record in candidates:
            lexical = text_score(record, tokens, strategy.score)
            semantic = self.vector_index.similarity(query_embedding, record) or 0.0
            combined = self.settings.text_weight * lexical + self.settings.semantic_weight * semantic
            if combined > self.settings.fusion_threshold:
                results.append(SearchResult(record=record, relevance_score=combined))
        return results

    @staticmethod
    def _lexical(tokens: List[str], candidates: List[ImageRecord], strategy: SearchStrategy) -> List[SearchResult]:
        results: List[SearchResult] = []
        for record in candidates:
            score = text_score(record, tokens, strategy.score)
            if score > 0.0:
                results.append(SearchResult(record=record, relevance_score=score))
        return results


__all__ = ["HybridRanker"]
