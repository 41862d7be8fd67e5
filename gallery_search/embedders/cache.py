# Path: gallery_search/embedders/cache.py
# Purpose: Keep recently produced image embeddings in memory.
# Layer: gallery_search/embedders.
# Details: Bounded FIFO mapping; a full cache drops its oldest-inserted block before inserting.

from __future__ import annotations

import threading
from typing import Dict, Optional

import numpy as np


class EmbeddingCache:
    """Thread-safe, insertion-ordered cache from image id to embedding.

    Eviction follows insertion order only; reads never refresh an entry.
    """

    def __init__(self, capacity: int = 1000, evict_count: int = 100) -> None:
        if capacity <= 0:
            raise ValueError("Cache capacity must be positive.")
        if not 0 < evict_count <= capacity:
            raise ValueError("Eviction count must be between 1 and the cache capacity.")
        self.capacity = capacity
        self.evict_count = evict_count
        self._entries: Dict[str, np.ndarray] = {}
        self._lock = threading.Lock()

    def get(self, image_id: str) -> Optional[np.ndarray]:
        with self._lock:
            return self._entries.get(image_id)

    def put(self, image_id: str, embedding: np.ndarray) -> None:
        with self._lock:
            if len(self._entries) >= self.capacity:
                for key in list(self._entries)[: self.evict_count]:
                    del self._entries[key]
            self._entries[image_id] = embedding

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, image_id: object) -> bool:
        with self._lock:
            return image_id in self._entries
