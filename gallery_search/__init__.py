# Path: gallery_search/__init__.py
# Purpose: Package initializer for the gallery retrieval engine.
# Layer: gallery_search.
# Details: Aggregates key subpackages for embedders, record stores, search, indexing, and models.

from .models.domain import ImageRecord, IndexingProgress, SearchMode, SearchResult
from .services import GalleryServices, create_services

__all__ = [
    "GalleryServices",
    "ImageRecord",
    "IndexingProgress",
    "SearchMode",
    "SearchResult",
    "create_services",
]
