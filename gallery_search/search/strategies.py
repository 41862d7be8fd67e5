# Path: gallery_search/search/strategies.py
# Purpose: Define label matching strategies, one per search mode.
# Layer: gallery_search/search.
# Details: Each strategy scores a (query token, label) pair and pre-filters candidate records from the store.

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from gallery_search.models.domain import ImageRecord, SearchMode
from gallery_search.store.base import RecordStore
from .lexical import is_whole_word_match, string_similarity


class SearchStrategy(ABC):
    """Interface for mode-specific lexical scoring."""

    mode: SearchMode
    description: str

    @abstractmethod
    def score(self, token: str, label: str) -> float:
        """Score one lowercased query token against one lowercased label, in [0, 1]."""

    def prefilter(self, store: RecordStore, tokens: Sequence[str]) -> List[ImageRecord]:
        """Return records whose labels could satisfy this mode for any token."""

        if not tokens:
            return []
        return [
            record
            for record in store.all_with_embedding()
            if any(self._admits(token, label) for token in tokens for label in record.label_list())
        ]

    def _admits(self, token: str, label: str) -> bool:
        return self.score(token, label) > 0.0


class ExactMatch(SearchStrategy):
    """Only whole-label equality counts."""

    mode = SearchMode.EXACT
    description = "Match labels equal to a query word."

    def score(self, token: str, label: str) -> float:
        return 1.0 if label == token else 0.0


class PrefixMatch(SearchStrategy):
    """Labels starting with the query word (``hand`` finds ``handbag``) and the reverse."""

    mode = SearchMode.PREFIX
    description = "Match labels that start with a query word."

    def score(self, token: str, label: str) -> float:
        if label == token:
            return 1.0
        if label.startswith(token) and len(token) >= 2:
            return 0.7 + 0.3 * (len(token) / len(label))
        if token.startswith(label) and len(label) >= 2:
            return 0.8
        return 0.0

    def _admits(self, token: str, label: str) -> bool:
        return label.startswith(token) or token.startswith(label)


class ContainsMatch(SearchStrategy):
    """Substring matching in either direction."""

    mode = SearchMode.CONTAINS
    description = "Match labels containing a query word anywhere."

    def score(self, token: str, label: str) -> float:
        if label == token:
            return 1.0
        if token in label:
            return 0.7
        if label in token and len(label) >= 2:
            return 0.5
        return 0.0

    def prefilter(self, store: RecordStore, tokens: Sequence[str]) -> List[ImageRecord]:
        if not tokens:
            return []
        return [
            record
            for record in store.all_with_embedding()
            if any(token in record.labels.lower() for token in tokens)
        ]


class FuzzyMatch(SearchStrategy):
    """Layered matching that tolerates partial words and small typos."""

    mode = SearchMode.FUZZY
    description = "Blend prefix, whole-word, typo-tolerant, and substring matching."

    similarity_threshold = 0.85

    def score(self, token: str, label: str) -> float:
        if label == token:
            return 1.0
        if label.startswith(token) and len(token) >= 3:
            return 0.7 + 0.2 * (len(token) / len(label))
        if token.startswith(label) and len(label) >= 3:
            return 0.6
        if is_whole_word_match(label, token):
            return 0.8
        if string_similarity(label, token) > self.similarity_threshold:
            return 0.4
        if len(token) >= 4 and token in label:
            return 0.3
        return 0.0

    def prefilter(self, store: RecordStore, tokens: Sequence[str]) -> List[ImageRecord]:
        matches: Dict[str, ImageRecord] = {}
        for token in tokens:
            patterns = [f"%{token}%"]
            if len(token) >= 3:
                patterns.append(f"%{token[:3]}%")
            for pattern in patterns:
                for record in store.search_labels(pattern):
                    matches.setdefault(record.id, record)
        return list(matches.values())


DEFAULT_STRATEGIES: Dict[SearchMode, SearchStrategy] = {
    strategy.mode: strategy for strategy in (ExactMatch(), PrefixMatch(), ContainsMatch(), FuzzyMatch())
}


__all__ = [
    "ContainsMatch",
    "DEFAULT_STRATEGIES",
    "ExactMatch",
    "FuzzyMatch",
    "PrefixMatch",
    "SearchStrategy",
]
