# Path: gallery_search/embedders/codec.py
# Purpose: Convert embedding vectors to and from their persisted byte layout.
# Layer: gallery_search/embedders.
# Details: Little-endian IEEE-754 float32, four bytes per element; decoding degrades instead of raising.

from __future__ import annotations

import logging
import struct
from typing import Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)

FLOAT_DTYPE = np.dtype("<f4")
BYTES_PER_FLOAT = FLOAT_DTYPE.itemsize
_FLOAT = struct.Struct("<f")

VectorLike = Union[np.ndarray, Sequence[float]]


def encode_embedding(vector: VectorLike) -> bytes:
    """Serialize a vector as little-endian float32 bytes."""

    return np.asarray(vector, dtype=FLOAT_DTYPE).tobytes()


def _decode_element(data: bytes, offset: int) -> float:
    return _FLOAT.unpack_from(data, offset)[0]


def decode_embedding(data: bytes) -> np.ndarray:
    """Decode bytes produced by :func:`encode_embedding`.

    Returns an empty vector when the length is not a multiple of four. Each element is
    decoded on its own; one that fails is replaced by 0.0 so corruption stays local to the
    affected floats.
    """

    if len(data) % BYTES_PER_FLOAT != 0:
        logger.warning("Embedding byte length %d is not divisible by %d", len(data), BYTES_PER_FLOAT)
        return np.zeros(0, dtype=np.float32)

    count = len(data) // BYTES_PER_FLOAT
    values = np.zeros(count, dtype=np.float32)
    for index in range(count):
        try:
            values[index] = _decode_element(data, index * BYTES_PER_FLOAT)
        except (struct.error, TypeError, ValueError) as exc:
            logger.warning("Error converting bytes at index %d: %s", index, exc)
    return values


__all__ = ["BYTES_PER_FLOAT", "decode_embedding", "encode_embedding"]
