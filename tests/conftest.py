# tests/conftest.py

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pytest

from gallery_search.embedders import HashEmbedder, encode_embedding
from gallery_search.models import ImageMetadata, ImageRecord
from gallery_search.store import InMemoryRecordStore

NOW_MS = 1_700_000_000_000


class FakeLabeler:
    """Labeler returning canned labels per image id; ids listed in ``failing`` raise."""

    def __init__(self, labels: Optional[Dict[str, Sequence[Tuple[str, float]]]] = None, failing=()):
        self.labels = labels or {}
        self.failing = set(failing)
        self.calls: List[str] = []

    def analyze(self, image_id):
        self.calls.append(image_id)
        if image_id in self.failing:
            raise RuntimeError(f"classifier crashed on {image_id}")
        return list(self.labels.get(image_id, []))


class FakeMediaSource:
    """Media source over a fixed id list; ids listed in ``broken`` fail metadata lookups."""

    def __init__(self, image_ids: Sequence[str], broken=()):
        self.image_ids = list(image_ids)
        self.broken = set(broken)

    def enumerate(self):
        return list(self.image_ids)

    def metadata(self, image_id):
        if image_id in self.broken:
            raise OSError(f"cannot stat {image_id}")
        name = image_id.rsplit("/", 1)[-1]
        return ImageMetadata(file_name=name, size_bytes=1024, date_added=NOW_MS - 5000, mime_type="image/jpeg")


class FixedClock:
    def __init__(self, now: int = NOW_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now


def make_record(image_id: str, labels: str = "", embedding=None, last_indexed: int = NOW_MS) -> ImageRecord:
    """Build a record; ``embedding`` may be a vector (encoded here) or raw bytes."""

    if embedding is not None and not isinstance(embedding, (bytes, bytearray)):
        embedding = encode_embedding(embedding)
    return ImageRecord(
        id=image_id,
        file_name=image_id.rsplit("/", 1)[-1],
        labels=labels,
        embedding=embedding,
        confidence=0.9,
        last_indexed=last_indexed,
    )


def vector_with_cosine(reference: np.ndarray, cosine: float, seed: int = 7) -> np.ndarray:
    """Return a unit vector whose cosine similarity to unit ``reference`` equals ``cosine``."""

    reference = np.asarray(reference, dtype=np.float64)
    reference = reference / np.linalg.norm(reference)
    rng = np.random.default_rng(seed)
    other = rng.normal(size=reference.shape)
    other -= np.dot(other, reference) * reference
    other /= np.linalg.norm(other)
    return (cosine * reference + np.sqrt(1.0 - cosine**2) * other).astype(np.float32)


@pytest.fixture
def embedder():
    return HashEmbedder(dim=128)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def clock():
    return FixedClock()
