# Path: gallery_search/store/memory_store.py
# Purpose: Provide an in-memory record store.
# Layer: gallery_search/store.
# Details: Backs tests and demos with the same contract as the SQLite store.

from __future__ import annotations

import dataclasses
import threading
from typing import Dict, Iterable, List, Optional

from gallery_search.models.domain import ImageRecord
from .base import RecordStore, like_to_regex


class InMemoryRecordStore(RecordStore):
    """Dictionary-backed store keyed by image id.

    Records are copied on the way in and out so callers cannot mutate stored state.
    """

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self._records: Dict[str, ImageRecord] = {}
        self._lock = threading.Lock()

    def get(self, image_id: str) -> Optional[ImageRecord]:
        with self._lock:
            record = self._records.get(image_id)
            return dataclasses.replace(record) if record is not None else None

    def upsert(self, record: ImageRecord) -> None:
        with self._lock:
            self._records[record.id] = dataclasses.replace(record)

    def delete_where_id_not_in(self, image_ids: Iterable[str]) -> int:
        keep = set(image_ids)
        with self._lock:
            stale = [image_id for image_id in self._records if image_id not in keep]
            for image_id in stale:
                del self._records[image_id]
        return len(stale)

    def all_records(self) -> List[ImageRecord]:
        with self._lock:
            return [dataclasses.replace(record) for record in self._records.values()]

    def all_with_embedding(self) -> List[ImageRecord]:
        return [record for record in self.all_records() if record.embedding is not None]

    def count_all(self) -> int:
        with self._lock:
            return len(self._records)

    def search_labels(self, pattern: str) -> List[ImageRecord]:
        matcher = like_to_regex(pattern)
        return [record for record in self.all_records() if matcher.fullmatch(record.labels or "")]
