# Path: gallery_search/indexing/__init__.py
# Purpose: Package initializer for indexing utilities.
# Layer: gallery_search/indexing.
# Details: Exposes scanning, label analysis, and the incremental indexing pipeline.

from .scanner import ImageScanner, MediaSource
from .index_builder import IndexingPipeline, pending_images
from .labels import LabelAnalyzer, Labeler, PathLabeler, normalize_label

__all__ = [
    "ImageScanner",
    "IndexingPipeline",
    "LabelAnalyzer",
    "Labeler",
    "MediaSource",
    "PathLabeler",
    "normalize_label",
    "pending_images",
]
