# Path: gallery_search/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: gallery_search/models.
# Details: Exposes dataclasses used across embedding, search, and indexing layers.

from .domain import (
    AnalysisResult,
    ImageMetadata,
    ImageRecord,
    IndexingProgress,
    IndexingStats,
    SearchMode,
    SearchResult,
    SearchStats,
)

__all__ = [
    "AnalysisResult",
    "ImageMetadata",
    "ImageRecord",
    "IndexingProgress",
    "IndexingStats",
    "SearchMode",
    "SearchResult",
    "SearchStats",
]
