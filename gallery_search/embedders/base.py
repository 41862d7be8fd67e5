# Path: gallery_search/embedders/base.py
# Purpose: Define the Embedder interface for label and query embeddings.
# Layer: gallery_search/embedders.
# Details: Provides abstract methods to ensure pluggable embedder implementations.

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import List, Sequence

import numpy as np

_WHITESPACE = re.compile(r"\s+")


def tokenize(text: str) -> List[str]:
    """Lowercase, trim, and split text on whitespace runs, dropping empty pieces."""

    return [token for token in _WHITESPACE.split(text.strip().lower()) if token]


class Embedder(ABC):
    """Abstract base class for all embedders used by indexing and search."""

    name: str
    dim: int

    @abstractmethod
    def embed(self, tokens: Sequence[str]) -> np.ndarray:
        """Return a fixed-length embedding for an ordered sequence of tokens."""

    def embed_query(self, text: str) -> np.ndarray:
        """Return an embedding for a free-text query."""

        return self.embed(tokenize(text))

    @staticmethod
    def _normalize(vector: np.ndarray) -> np.ndarray:
        """Normalize embedding vectors to unit length to simplify similarity comparisons."""

        norm = np.linalg.norm(vector)
        if norm == 0:
            return vector.astype(np.float32)
        return (vector / norm).astype(np.float32)
