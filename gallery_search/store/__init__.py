# Path: gallery_search/store/__init__.py
# Purpose: Package initializer for record store interfaces and implementations.
# Layer: gallery_search/store.
# Details: Exposes the base store contract plus SQLite and in-memory backends.

from .base import RecordStore, like_to_regex
from .memory_store import InMemoryRecordStore
from .sqlite_store import SqliteRecordStore

__all__ = ["RecordStore", "InMemoryRecordStore", "SqliteRecordStore", "like_to_regex"]
