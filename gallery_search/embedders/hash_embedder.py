# Path: gallery_search/embedders/hash_embedder.py
# Purpose: Provide the deterministic hash-based bag-of-tokens embedder.
# Layer: gallery_search/embedders.
# Details: Placeholder for a learned model; vectors only reflect token identity and position.

from __future__ import annotations

from typing import Sequence

import numpy as np

from .base import Embedder

_INT32_SPAN = 1 << 32
_INT32_OFFSET = 1 << 31
_SCALE = np.float32(1_000_000.0)


def _wrap_int32(value: np.ndarray | int) -> np.ndarray | int:
    """Wrap integers to signed 32-bit two's complement."""

    return (value + _INT32_OFFSET) % _INT32_SPAN - _INT32_OFFSET


def java_string_hash(text: str) -> int:
    """Return the 32-bit ``31*h + c`` string hash over UTF-16 code units.

    Stable across processes, unlike the salted built-in ``hash``.
    """

    units = np.frombuffer(text.encode("utf-16-le"), dtype="<u2")
    value = 0
    for unit in units:
        value = (31 * value + int(unit)) & 0xFFFFFFFF
    return int(_wrap_int32(value))


class HashEmbedder(Embedder):
    """Deterministic, seed-free token embedder.

    Each non-empty token at position ``i`` adds ``sin(hash * (i + 1) * (d + 1) / 1e6)`` to
    dimension ``d``; the sum is L2-normalized. This is not a semantic model: similar words
    do not land near each other, and it must stay this way so stored vectors keep matching
    freshly computed query vectors.
    """

    def __init__(self, dim: int = 128, name: str = "hash") -> None:
        self.dim = dim
        self.name = name
        self._dimensions = np.arange(1, dim + 1, dtype=np.int64)

    def embed(self, tokens: Sequence[str]) -> np.ndarray:
        """Embed tokens in order; returns the zero vector when no token survives cleaning."""

        embedding = np.zeros(self.dim, dtype=np.float32)
        for index, token in enumerate(tokens):
            clean = token.lower().strip()
            if not clean:
                continue
            base = _wrap_int32(java_string_hash(clean) * (index + 1))
            products = _wrap_int32(base * self._dimensions).astype(np.float32)
            embedding += np.sin((products / _SCALE).astype(np.float64)).astype(np.float32)
        return self._normalize(embedding)


__all__ = ["HashEmbedder", "java_string_hash"]
