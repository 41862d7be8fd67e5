# Path: gallery_search/search/vector_index.py
# Purpose: Rank image records by cosine similarity to a query embedding.
# Layer: gallery_search/search.
# Details: Decodes stored embeddings on demand; cached vectors are reused only while they match the stored bytes.

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from gallery_search.embedders.cache import EmbeddingCache
from gallery_search.embedders.codec import decode_embedding, encode_embedding
from gallery_search.models.domain import ImageRecord, SearchResult

logger = logging.getLogger(__name__)


def cosine_similarity(first: np.ndarray, second: np.ndarray) -> float:
    """Return the cosine of the angle between two vectors.

    Vectors of different length, or with zero magnitude, have similarity 0.
    """

    first = np.asarray(first, dtype=np.float32)
    second = np.asarray(second, dtype=np.float32)
    if first.shape != second.shape:
        return 0.0
    magnitude = float(np.linalg.norm(first)) * float(np.linalg.norm(second))
    if magnitude == 0.0:
        return 0.0
    return float(np.dot(first, second)) / magnitude


class VectorIndex:
    """Brute-force cosine ranking over records pulled from a store."""

    def __init__(self, cache: Optional[EmbeddingCache] = None) -> None:
        self.cache = cache

    def vector_for(self, record: ImageRecord) -> Optional[np.ndarray]:
        """Return the decoded embedding of ``record``, or None when it is absent or unusable."""

        if record.embedding is None:
            return None
        if self.cache is not None:
            cached = self.cache.get(record.id)
            # A re-indexed record carries new bytes; its cached vector no longer applies.
            if cached is not None and encode_embedding(cached) == bytes(record.embedding):
                return cached
        try:
            vector = decode_embedding(record.embedding)
        except Exception:  # noqa: BLE001 - one bad row must not abort a ranking pass
            logger.warning("Error processing embedding for %s", record.id, exc_info=True)
            return None
        if vector.size == 0:
            logger.warning("Skipping empty embedding for %s", record.id)
            return None
        if self.cache is not None:
            self.cache.put(record.id, vector)
        return vector

    def similarity(self, query: np.ndarray, record: ImageRecord) -> Optional[float]:
        """Return cosine similarity between ``query`` and the record's embedding."""

        vector = self.vector_for(record)
        if vector is None:
            return None
        return cosine_similarity(query, vector)

    def rank(
        self,
        query: np.ndarray,
        candidates: Sequence[ImageRecord],
        threshold: float = 0.2,
        top_k: int = 50,
    ) -> List[SearchResult]:
        """Return candidates with similarity >= ``threshold``, best first, at most ``top_k``."""

        results: List[SearchResult] = []
        for record in candidates:
            score = self.similarity(query, record)
            if score is None:
                continue
            if score >= threshold:
                results.append(SearchResult(record=record, relevance_score=score))
        results.sort(key=lambda result: result.relevance_score, reverse=True)
        return results[:top_k]


__all__ = ["VectorIndex", "cosine_similarity"]
