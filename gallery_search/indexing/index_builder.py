# Path: gallery_search/indexing/index_builder.py
# Purpose: Build and refresh image records from a media source.
# Layer: gallery_search/indexing.
# Details: Prunes vanished images, re-analyzes missing or stale ones on a bounded worker pool, and streams progress.

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, List, Optional
from urllib.parse import unquote, urlparse

from gallery_config.settings import IndexingSettings
from gallery_search.embedders.cache import EmbeddingCache
from gallery_search.embedders.codec import encode_embedding
from gallery_search.models.domain import ImageRecord, IndexingProgress
from gallery_search.monitor import PerformanceMonitor
from gallery_search.search.session import CancellationToken
from gallery_search.store.base import RecordStore
from .labels import LabelAnalyzer
from .scanner import MediaSource

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000

STARTING_MESSAGE = "Starting gallery scan..."
COMPLETE_MESSAGE = "Indexing complete!"
ENUMERATION_FAILED_MESSAGE = "Unable to read the media library"


def _now_ms() -> int:
    return int(time.time() * 1000)


def display_name(image_id: str) -> str:
    """Return the last path segment of an image id for progress messages."""

    path = unquote(urlparse(image_id).path) or image_id
    return path.rstrip("/").rsplit("/", 1)[-1]


class IndexingPipeline:
    """Incrementally synchronize the record store with the media source.

    Each image upserts independently by id, so worker completion order never changes the
    final store contents.
    """

    def __init__(
        self,
        store: RecordStore,
        media_source: MediaSource,
        analyzer: LabelAnalyzer,
        cache: Optional[EmbeddingCache] = None,
        settings: Optional[IndexingSettings] = None,
        monitor: Optional[PerformanceMonitor] = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.store = store
        self.media_source = media_source
        self.analyzer = analyzer
        self.cache = cache
        self.settings = settings or IndexingSettings()
        self.monitor = monitor or PerformanceMonitor()
        self.clock = clock

    @property
    def staleness_ms(self) -> int:
        return self.settings.staleness_days * DAY_MS

    def needs_reindex(self, existing: Optional[ImageRecord], now: int) -> bool:
        """Return True when a record is missing or its analysis is at least ``staleness_days`` old."""

        return existing is None or now - existing.last_indexed >= self.staleness_ms

    def run(self, cancel_token: Optional[CancellationToken] = None) -> Iterator[IndexingProgress]:
        """
        Index the media library, yielding a progress event after every image.

        External calls:
        - MediaSource.enumerate / MediaSource.metadata - discover images and file details.
        - gallery_search/indexing/labels.py::LabelAnalyzer.analyze - labels and embeds an image.
        - gallery_search/store/base.py::RecordStore.upsert - persists each record.
        """

        yield IndexingProgress(0, 0, STARTING_MESSAGE)
        started = self.monitor.start_indexing()

        try:
            image_ids = list(self.media_source.enumerate())
        except Exception:  # noqa: BLE001 - leave the store untouched when the library is unreadable
            logger.exception("Failed to enumerate media library")
            yield IndexingProgress(0, 0, ENUMERATION_FAILED_MESSAGE)
            return

        total = len(image_ids)
        try:
            removed = self.store.delete_where_id_not_in(image_ids)
            if removed:
                logger.info("Removed %d records for images no longer in the library", removed)
        except Exception:  # noqa: BLE001 - pruning is best effort
            logger.exception("Failed to prune deleted images")

        processed = 0
        batch_size = max(1, self.settings.batch_size)
        workers = self.settings.max_workers or os.cpu_count() or 1
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for offset in range(0, total, batch_size):
                if cancel_token is not None and cancel_token.cancelled:
                    logger.info("Indexing cancelled after %d of %d images", processed, total)
                    return
                batch = image_ids[offset : offset + batch_size]
                futures = [pool.submit(self.index_image, image_id) for image_id in batch]
                # Barrier: report the batch in enumeration order once every worker finished.
                for image_id, future in zip(batch, futures):
                    future.result()
                    processed += 1
                    yield IndexingProgress(processed, total, f"Processing: {display_name(image_id)}")

        stats = self.monitor.end_indexing(total, started)
        logger.info(
            "Indexed %d images in %d ms (%.1f images/s)", stats.total_images, stats.duration_ms, stats.images_per_second
        )
        yield IndexingProgress(total, total, COMPLETE_MESSAGE)

    def run_with_callback(
        self,
        callback: Callable[[IndexingProgress], None],
        cancel_token: Optional[CancellationToken] = None,
    ) -> Optional[IndexingProgress]:
        """Drive :meth:`run`, handing each event to ``callback``; return the last event."""

        last: Optional[IndexingProgress] = None
        for progress in self.run(cancel_token):
            callback(progress)
            last = progress
        return last

    def index_image(self, image_id: str) -> bool:
        """Analyze and upsert one image if needed; return True when the record was written.

        Failures are logged and reported as False so one bad image never halts the scan.
        """

        try:
            existing = self.store.get(image_id)
            now = self.clock()
            if not self.needs_reindex(existing, now):
                return False

            analysis = self.analyzer.analyze(image_id)
            metadata = self.media_source.metadata(image_id)
            last_indexed = now if existing is None else max(now, existing.last_indexed + 1)
            record = ImageRecord(
                id=image_id,
                file_name=metadata.file_name,
                date_added=metadata.date_added,
                size_bytes=metadata.size_bytes,
                mime_type=metadata.mime_type,
                embedding=encode_embedding(analysis.embedding),
                labels=",".join(analysis.labels),
                confidence=analysis.confidence,
                last_indexed=last_indexed,
            )
            self.store.upsert(record)
            if self.cache is not None:
                self.cache.put(image_id, analysis.embedding)
            return True
        except Exception:  # noqa: BLE001 - best-effort batch job
            logger.exception("Error scanning image %s", image_id)
            return False


def pending_images(pipeline: IndexingPipeline, image_ids: List[str]) -> List[str]:
    """Return the ids among ``image_ids`` that the next run would analyze."""

    now = pipeline.clock()
    return [image_id for image_id in image_ids if pipeline.needs_reindex(pipeline.store.get(image_id), now)]


__all__ = ["IndexingPipeline", "display_name", "pending_images"]
