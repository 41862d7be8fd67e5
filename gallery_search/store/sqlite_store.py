# Path: gallery_search/store/sqlite_store.py
# Purpose: Persist image records in a local SQLite database.
# Layer: gallery_search/store.
# Details: Production RecordStore; embeddings are stored as raw little-endian float32 BLOBs.

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from gallery_search.models.domain import ImageRecord
from .base import RecordStore

_COLUMNS = "id, file_name, date_added, size_bytes, mime_type, embedding, labels, confidence, last_indexed"


class SqliteRecordStore(RecordStore):
    """RecordStore backed by a single ``gallery_images`` table.

    One connection is shared across threads; a lock serializes every statement.
    """

    def __init__(self, path: Path | str = ":memory:", name: str = "sqlite") -> None:
        self.name = name
        self.path = str(path)
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        """Create the records table and label index if missing."""

        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS gallery_images (
                    id TEXT PRIMARY KEY,
                    file_name TEXT NOT NULL DEFAULT '',
                    date_added INTEGER NOT NULL DEFAULT 0,
                    size_bytes INTEGER NOT NULL DEFAULT 0,
                    mime_type TEXT NOT NULL DEFAULT '',
                    embedding BLOB,
                    labels TEXT NOT NULL DEFAULT '',
                    confidence REAL NOT NULL DEFAULT 0,
                    last_indexed INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            self._conn.commit()

    @staticmethod
    def _to_record(row: tuple) -> ImageRecord:
        embedding = row[5]
        return ImageRecord(
            id=row[0],
            file_name=row[1],
            date_added=int(row[2]),
            size_bytes=int(row[3]),
            mime_type=row[4],
            embedding=bytes(embedding) if embedding is not None else None,
            labels=row[6] or "",
            confidence=float(row[7]),
            last_indexed=int(row[8]),
        )

    def _query(self, sql: str, params: tuple = ()) -> List[ImageRecord]:
        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [self._to_record(row) for row in rows]

    def get(self, image_id: str) -> Optional[ImageRecord]:
        records = self._query(f"SELECT {_COLUMNS} FROM gallery_images WHERE id = ?", (image_id,))
        return records[0] if records else None

    def upsert(self, record: ImageRecord) -> None:
        with self._lock:
            self._conn.execute(
                f"""
                INSERT INTO gallery_images ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    file_name = excluded.file_name,
                    date_added = excluded.date_added,
                    size_bytes = excluded.size_bytes,
                    mime_type = excluded.mime_type,
                    embedding = excluded.embedding,
                    labels = excluded.labels,
                    confidence = excluded.confidence,
                    last_indexed = excluded.last_indexed
                """,
                (
                    record.id,
                    record.file_name,
                    record.date_added,
                    record.size_bytes,
                    record.mime_type,
                    record.embedding,
                    record.labels or "",
                    record.confidence,
                    record.last_indexed,
                ),
            )
            self._conn.commit()

    def delete_where_id_not_in(self, image_ids: Iterable[str]) -> int:
        # A temp table sidesteps SQLite's bound-parameter limit for large libraries.
        keep = [(image_id,) for image_id in set(image_ids)]
        with self._lock:
            self._conn.execute("CREATE TEMP TABLE IF NOT EXISTS keep_ids (id TEXT PRIMARY KEY)")
            self._conn.execute("DELETE FROM keep_ids")
            self._conn.executemany("INSERT INTO keep_ids (id) VALUES (?)", keep)
            cursor = self._conn.execute("DELETE FROM gallery_images WHERE id NOT IN (SELECT id FROM keep_ids)")
            self._conn.execute("DELETE FROM keep_ids")
            self._conn.commit()
            return cursor.rowcount

    def all_records(self) -> List[ImageRecord]:
        return self._query(f"SELECT {_COLUMNS} FROM gallery_images ORDER BY rowid")

    def all_with_embedding(self) -> List[ImageRecord]:
        return self._query(f"SELECT {_COLUMNS} FROM gallery_images WHERE embedding IS NOT NULL ORDER BY rowid")

    def count_all(self) -> int:
        with self._lock:
            (count,) = self._conn.execute("SELECT COUNT(*) FROM gallery_images").fetchone()
        return int(count)

    def search_labels(self, pattern: str) -> List[ImageRecord]:
        return self._query(
            f"SELECT {_COLUMNS} FROM gallery_images WHERE LOWER(labels) LIKE LOWER(?) ORDER BY rowid",
            (pattern,),
        )

    def close(self) -> None:
        with self._lock:
            self._conn.close()
