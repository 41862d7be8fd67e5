# Path: gallery_search/models/domain.py
# Purpose: Define domain models shared across embedding, search, and indexing workflows.
# Layer: gallery_search/models.
# Details: Lightweight dataclasses simplify hand-off between stores, engines, and consumers.

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional

import numpy as np


class SearchMode(enum.Enum):
    """Label matching policy selected per query."""

    EXACT = "exact"
    PREFIX = "prefix"
    CONTAINS = "contains"
    FUZZY = "fuzzy"

    @classmethod
    def parse(cls, value: "SearchMode | str") -> "SearchMode":
        """Accept either a member or its case-insensitive name/value."""

        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(f"Unknown search mode: {value!r}")


@dataclass
class ImageRecord:
    """Indexed image keyed by its opaque URI."""

    id: str
    file_name: str = ""
    date_added: int = 0
    size_bytes: int = 0
    mime_type: str = ""
    embedding: Optional[bytes] = None
    labels: str = ""  # comma-joined, "" means no labels
    confidence: float = 0.0
    last_indexed: int = 0  # epoch milliseconds

    def label_list(self) -> List[str]:
        """Return labels split on commas, trimmed and lowercased, without blanks."""

        if not self.labels or not self.labels.strip():
            return []
        parts = (part.strip().lower() for part in self.labels.split(","))
        return [part for part in parts if part]


@dataclass
class ImageMetadata:
    """File metadata reported by a media source."""

    file_name: str = ""
    size_bytes: int = 0
    date_added: int = 0
    mime_type: str = ""


@dataclass
class AnalysisResult:
    """Labels, mean confidence, and embedding produced for one image during indexing."""

    labels: List[str]
    confidence: float
    embedding: np.ndarray


@dataclass
class SearchResult:
    """Search result item pairing a record with its relevance score."""

    record: ImageRecord
    relevance_score: float


@dataclass(frozen=True)
class IndexingProgress:
    """Progress event streamed while indexing runs."""

    processed: int
    total: int
    message: str

    @property
    def fraction(self) -> float:
        return self.processed / self.total if self.total > 0 else 0.0

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.processed == self.total


@dataclass(frozen=True)
class IndexingStats:
    """Timing summary for one indexing run."""

    total_images: int
    duration_ms: int
    images_per_second: float


@dataclass(frozen=True)
class SearchStats:
    """Timing summary for one search."""

    result_count: int
    duration_ms: int
