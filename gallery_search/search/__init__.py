# Path: gallery_search/search/__init__.py
# Purpose: Package initializer for label strategies, vector ranking, and the hybrid ranker.
# Layer: gallery_search/search.
# Details: Exposes strategy classes, the vector index, the ranker entrypoint, and query sessions.

from .lexical import is_whole_word_match, string_similarity, text_score
from .pipeline import HybridRanker
from .session import CancellationToken, SearchSession
from .strategies import (
    DEFAULT_STRATEGIES,
    ContainsMatch,
    ExactMatch,
    FuzzyMatch,
    PrefixMatch,
    SearchStrategy,
)
from .vector_index import VectorIndex, cosine_similarity

__all__ = [
    "CancellationToken",
    "ContainsMatch",
    "DEFAULT_STRATEGIES",
    "ExactMatch",
    "FuzzyMatch",
    "HybridRanker",
    "PrefixMatch",
    "SearchSession",
    "SearchStrategy",
    "VectorIndex",
    "cosine_similarity",
    "is_whole_word_match",
    "string_similarity",
    "text_score",
]
