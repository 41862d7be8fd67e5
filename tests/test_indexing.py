# tests/test_indexing.py

import os

import numpy as np
import pytest
from PIL import Image

from conftest import NOW_MS, FakeLabeler, FakeMediaSource, make_record
from gallery_config import IndexingSettings
from gallery_search.embedders import EmbeddingCache, decode_embedding
from gallery_search.indexing import (
    ImageScanner,
    IndexingPipeline,
    LabelAnalyzer,
    PathLabeler,
    normalize_label,
    pending_images,
)
from gallery_search.indexing.index_builder import DAY_MS
from gallery_search.models import IndexingProgress
from gallery_search.search import CancellationToken

IDS = ["content://media/3", "content://media/2", "content://media/1"]


def build_pipeline(store, embedder, clock, labeler=None, source=None, cache=None, **settings):
    settings.setdefault("max_workers", 2)
    return IndexingPipeline(
        store=store,
        media_source=source or FakeMediaSource(IDS),
        analyzer=LabelAnalyzer(labeler or FakeLabeler(), embedder),
        cache=cache,
        settings=IndexingSettings(**settings),
        clock=clock,
    )


def test_progress_events(store, embedder, clock):
    events = list(build_pipeline(store, embedder, clock).run())

    assert events[0] == IndexingProgress(0, 0, "Starting gallery scan...")
    assert events[1:-1] == [
        IndexingProgress(1, 3, "Processing: 3"),
        IndexingProgress(2, 3, "Processing: 2"),
        IndexingProgress(3, 3, "Processing: 1"),
    ]
    assert events[-1] == IndexingProgress(3, 3, "Indexing complete!")
    assert events[-1].is_complete


def test_records_are_built_from_analysis(store, embedder, clock):
    labeler = FakeLabeler({IDS[0]: [("  beach   SUNSET ", 0.9), ("Beach Sunset", 0.7), ("dog", 0.8)]})

    list(build_pipeline(store, embedder, clock, labeler=labeler).run())

    record = store.get(IDS[0])
    assert record.labels == "Beach Sunset,Dog"
    assert record.confidence == pytest.approx(0.8)
    assert record.file_name == "3"
    assert record.mime_type == "image/jpeg"
    assert record.last_indexed == NOW_MS
    assert len(record.embedding) == 512
    assert np.array_equal(decode_embedding(record.embedding), embedder.embed(["Beach Sunset", "Dog"]))


def test_unlabeled_image_stores_empty_record(store, embedder, clock):
    list(build_pipeline(store, embedder, clock).run())

    record = store.get(IDS[1])
    assert record.labels == ""
    assert record.confidence == 0.0
    assert not decode_embedding(record.embedding).any()


def test_removed_images_are_pruned(store, embedder, clock):
    store.upsert(make_record("content://media/gone", labels="Old"))

    list(build_pipeline(store, embedder, clock).run())

    assert store.get("content://media/gone") is None
    assert store.count_all() == 3


def test_fresh_records_are_skipped(store, embedder, clock):
    store.upsert(make_record(IDS[0], labels="Kept", last_indexed=NOW_MS - DAY_MS))
    labeler = FakeLabeler()

    list(build_pipeline(store, embedder, clock, labeler=labeler).run())

    assert IDS[0] not in labeler.calls
    assert store.get(IDS[0]).labels == "Kept"


def test_stale_records_are_reanalyzed(store, embedder, clock):
    store.upsert(make_record(IDS[0], labels="Old", last_indexed=NOW_MS - 7 * DAY_MS))
    labeler = FakeLabeler({IDS[0]: [("new", 0.9)]})

    list(build_pipeline(store, embedder, clock, labeler=labeler).run())

    record = store.get(IDS[0])
    assert record.labels == "New"
    assert record.last_indexed == NOW_MS


def test_last_indexed_strictly_advances(store, embedder, clock):
    store.upsert(make_record(IDS[0], labels="Old", last_indexed=NOW_MS))

    list(build_pipeline(store, embedder, clock, staleness_days=0).run())

    assert store.get(IDS[0]).last_indexed == NOW_MS + 1


def test_labeler_failure_degrades_to_no_labels(store, embedder, clock):
    labeler = FakeLabeler({IDS[1]: [("cat", 1.0)]}, failing=[IDS[0]])

    events = list(build_pipeline(store, embedder, clock, labeler=labeler).run())

    assert store.get(IDS[0]).labels == ""
    assert store.get(IDS[1]).labels == "Cat"
    assert events[-1].is_complete


def test_metadata_failure_skips_image(store, embedder, clock):
    source = FakeMediaSource(IDS, broken=[IDS[1]])

    events = list(build_pipeline(store, embedder, clock, source=source).run())

    assert store.get(IDS[1]) is None
    assert store.count_all() == 2
    assert events[-1] == IndexingProgress(3, 3, "Indexing complete!")


def test_enumeration_failure_leaves_store_untouched(store, embedder, clock):
    class BrokenSource(FakeMediaSource):
        def enumerate(self):
            raise PermissionError("no media permission")

    store.upsert(make_record("content://media/9"))

    events = list(build_pipeline(store, embedder, clock, source=BrokenSource([])).run())

    assert [event.total for event in events] == [0, 0]
    assert store.count_all() == 1


def test_cancellation_stops_between_batches(store, embedder, clock):
    token = CancellationToken()
    pipeline = build_pipeline(store, embedder, clock, batch_size=1)
    seen = []

    def on_progress(progress):
        seen.append(progress)
        if progress.processed == 1:
            token.cancel()

    last = pipeline.run_with_callback(on_progress, cancel_token=token)

    assert [event.processed for event in seen] == [0, 1]
    assert last == seen[-1]
    assert store.count_all() == 1


def test_worker_pool_preserves_enumeration_order(store, embedder, clock):
    ids = [f"content://media/{index}" for index in range(10)]
    pipeline = build_pipeline(
        store, embedder, clock, source=FakeMediaSource(ids), batch_size=3, max_workers=4
    )

    events = list(pipeline.run())

    assert [event.processed for event in events[1:-1]] == list(range(1, 11))
    assert [event.message for event in events[1:-1]] == [f"Processing: {index}" for index in range(10)]
    assert store.count_all() == 10


def test_cache_receives_fresh_embeddings(store, embedder, clock):
    cache = EmbeddingCache(capacity=10, evict_count=1)
    labeler = FakeLabeler({IDS[0]: [("dog", 1.0)]})

    list(build_pipeline(store, embedder, clock, labeler=labeler, cache=cache).run())

    assert np.array_equal(cache.get(IDS[0]), embedder.embed(["Dog"]))


def test_pending_images(store, embedder, clock):
    store.upsert(make_record(IDS[0], last_indexed=NOW_MS))
    pipeline = build_pipeline(store, embedder, clock)

    assert pending_images(pipeline, IDS) == IDS[1:]


def test_progress_fraction():
    assert IndexingProgress(1, 4, "").fraction == 0.25
    assert IndexingProgress(0, 0, "").fraction == 0.0
    assert not IndexingProgress(0, 0, "").is_complete


@pytest.mark.parametrize(
    "raw, expected",
    [("  beach   SUNSET ", "Beach Sunset"), ("dog", "Dog"), ("", "")],
)
def test_normalize_label(raw, expected):
    assert normalize_label(raw) == expected


def _save_image(path, mtime, fmt="PNG"):
    Image.new("RGB", (4, 4), color=(200, 120, 40)).save(path, format=fmt)
    os.utime(path, (mtime, mtime))


def test_image_scanner(tmp_path):
    _save_image(tmp_path / "old_dog.png", 1_000_000)
    nested = tmp_path / "trip"
    nested.mkdir()
    _save_image(nested / "beach_sunset-01.jpg", 2_000_000, fmt="JPEG")
    (tmp_path / "notes.txt").write_text("not an image")

    scanner = ImageScanner(tmp_path)
    image_ids = scanner.enumerate()

    assert [image_id.rsplit("/", 1)[-1] for image_id in image_ids] == ["beach_sunset-01.jpg", "old_dog.png"]
    metadata = scanner.metadata(image_ids[0])
    assert metadata.file_name == "beach_sunset-01.jpg"
    assert metadata.mime_type == "image/jpeg"
    assert metadata.date_added == 2_000_000_000
    assert PathLabeler().analyze(image_ids[0]) == [("beach", 1.0), ("sunset", 1.0)]


def test_scanner_missing_root(tmp_path):
    assert ImageScanner(tmp_path / "missing").enumerate() == []
