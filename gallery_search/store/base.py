# Path: gallery_search/store/base.py
# Purpose: Define the RecordStore interface for persisting indexed image records.
# Layer: gallery_search/store.
# Details: Provides abstract methods for upsert, lookup, pruning, and label pattern queries.

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Pattern

from gallery_search.models.domain import ImageRecord


def like_to_regex(pattern: str) -> Pattern[str]:
    """Translate a SQL ``LIKE`` pattern into a case-insensitive regular expression."""

    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class RecordStore(ABC):
    """Abstract base class for pluggable record store backends.

    Implementations return records in insertion order and serialize conflicting writes.
    """

    name: str

    @abstractmethod
    def get(self, image_id: str) -> Optional[ImageRecord]:
        """Return the record for ``image_id`` if present."""

    @abstractmethod
    def upsert(self, record: ImageRecord) -> None:
        """Insert a record or replace the existing record with the same id."""

    @abstractmethod
    def delete_where_id_not_in(self, image_ids: Iterable[str]) -> int:
        """Remove every record whose id is absent from ``image_ids``; return the number removed."""

    @abstractmethod
    def all_records(self) -> List[ImageRecord]:
        """Return every stored record."""

    @abstractmethod
    def all_with_embedding(self) -> List[ImageRecord]:
        """Return records that carry an embedding."""

    @abstractmethod
    def count_all(self) -> int:
        """Return the number of stored records."""

    @abstractmethod
    def search_labels(self, pattern: str) -> List[ImageRecord]:
        """Return records whose label text matches a case-insensitive ``LIKE`` pattern."""
