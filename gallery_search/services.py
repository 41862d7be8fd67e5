# Path: gallery_search/services.py
# Purpose: Wire stores, embedder, cache, ranker, and indexing pipeline for one application session.
# Layer: gallery_search.
# Details: Every shared resource is created here and owned by the returned container; nothing is a module global.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gallery_config.settings import AppSettings
from gallery_search.embedders.cache import EmbeddingCache
from gallery_search.embedders.hash_embedder import HashEmbedder
from gallery_search.indexing.index_builder import IndexingPipeline
from gallery_search.indexing.labels import LabelAnalyzer, Labeler, PathLabeler
from gallery_search.indexing.scanner import ImageScanner, MediaSource
from gallery_search.monitor import PerformanceMonitor
from gallery_search.search.pipeline import HybridRanker
from gallery_search.search.session import SearchSession
from gallery_search.search.vector_index import VectorIndex
from gallery_search.store.base import RecordStore
from gallery_search.store.sqlite_store import SqliteRecordStore


@dataclass
class GalleryServices:
    """Session-scoped container handed to scripts and the HTTP layer."""

    settings: AppSettings
    store: RecordStore
    embedder: HashEmbedder
    cache: EmbeddingCache
    monitor: PerformanceMonitor
    ranker: HybridRanker
    indexer: IndexingPipeline

    def new_session(self) -> SearchSession:
        """Return a query session that drops superseded results."""

        return SearchSession(self.ranker, min_query_length=self.settings.search.min_query_length)


def create_services(
    settings: Optional[AppSettings] = None,
    store: Optional[RecordStore] = None,
    media_source: Optional[MediaSource] = None,
    labeler: Optional[Labeler] = None,
) -> GalleryServices:
    """Build the service graph; defaults use SQLite, the folder scanner, and the file-name labeler."""

    settings = settings or AppSettings()
    store = store or SqliteRecordStore(settings.database_path)
    media_source = media_source or ImageScanner(settings.image_folder)
    labeler = labeler or PathLabeler()

    embedder = HashEmbedder(dim=settings.embedder.dim)
    cache = EmbeddingCache(
        capacity=settings.embedder.cache_capacity,
        evict_count=settings.embedder.cache_evict_count,
    )
    monitor = PerformanceMonitor()
    ranker = HybridRanker(
        store=store,
        embedder=embedder,
        vector_index=VectorIndex(cache=cache),
        settings=settings.search,
        monitor=monitor,
    )
    indexer = IndexingPipeline(
        store=store,
        media_source=media_source,
        analyzer=LabelAnalyzer(labeler, embedder),
        cache=cache,
        settings=settings.indexing,
        monitor=monitor,
    )
    return GalleryServices(
        settings=settings,
        store=store,
        embedder=embedder,
        cache=cache,
        monitor=monitor,
        ranker=ranker,
        indexer=indexer,
    )


__all__ = ["GalleryServices", "create_services"]
