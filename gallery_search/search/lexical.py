# Path: gallery_search/search/lexical.py
# Purpose: String-similarity helpers and per-image text scoring.
# Layer: gallery_search/search.
# Details: Strategies supply the per-(token, label) score; this module aggregates it over a record.

from __future__ import annotations

import re
from typing import Callable, Sequence

from rapidfuzz.distance import Levenshtein

from gallery_search.models.domain import ImageRecord

TokenScorer = Callable[[str, str], float]


def string_similarity(first: str, second: str) -> float:
    """Return ``(max_len - edit_distance) / max_len``; two empty strings are identical."""

    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return (longest - Levenshtein.distance(first, second)) / longest


def is_whole_word_match(label: str, token: str) -> bool:
    """Return True if ``token`` appears in ``label`` delimited by word boundaries."""

    return re.search(rf"\b{re.escape(token)}\b", label) is not None


def text_score(record: ImageRecord, tokens: Sequence[str], scorer: TokenScorer) -> float:
    """Average each token's best label score over all query tokens.

    Tokens that match no label add nothing to the sum but still count in the divisor, so
    a partially matched query scores lower than a fully matched one.
    """

    if not tokens:
        return 0.0
    labels = record.label_list()
    if not labels:
        return 0.0

    total = 0.0
    for token in tokens:
        best = max(scorer(token, label) for label in labels)
        if best > 0.0:
            total += best
    return total / len(tokens)


__all__ = ["TokenScorer", "is_whole_word_match", "string_similarity", "text_score"]
