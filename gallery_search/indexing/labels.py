# Path: gallery_search/indexing/labels.py
# Purpose: Wrap an image labeler and turn its output into analysis results.
# Layer: gallery_search/indexing.
# Details: Normalizes label text, averages confidences, and embeds labels; labeler failures degrade to empty results.

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Protocol, Sequence, Tuple
from urllib.parse import unquote, urlparse

import numpy as np

from gallery_search.embedders.base import Embedder
from gallery_search.models.domain import AnalysisResult

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


class Labeler(Protocol):
    """Image classifier returning ``(label, confidence)`` pairs."""

    def analyze(self, image_id: str) -> Sequence[Tuple[str, float]]:
        """Classify the image identified by ``image_id``."""


def normalize_label(text: str) -> str:
    """Trim, collapse whitespace, lowercase, and capitalize each word (``"  beach   SUNSET"`` -> ``"Beach Sunset"``)."""

    words = _WHITESPACE.sub(" ", text.strip()).lower().split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


class LabelAnalyzer:
    """Produce an :class:`AnalysisResult` for one image."""

    def __init__(self, labeler: Labeler, embedder: Embedder) -> None:
        self.labeler = labeler
        self.embedder = embedder

    def analyze(self, image_id: str) -> AnalysisResult:
        """
        Label and embed an image.

        External calls:
        - Labeler.analyze - classifies the image.
        - gallery_search/embedders/hash_embedder.py::HashEmbedder.embed - embeds the labels.
        """

        try:
            raw = list(self.labeler.analyze(image_id))
        except Exception:  # noqa: BLE001 - classifier errors count as an unlabeled image
            logger.exception("Error analyzing image %s", image_id)
            return AnalysisResult(labels=[], confidence=0.0, embedding=np.zeros(self.embedder.dim, dtype=np.float32))

        labels: List[str] = []
        for text, _ in raw:
            label = normalize_label(text)
            if label and label not in labels:
                labels.append(label)
        confidence = float(np.mean([score for _, score in raw])) if raw else 0.0
        return AnalysisResult(labels=labels, confidence=confidence, embedding=self.embedder.embed(labels))


def id_to_path(image_id: str) -> Path:
    """Resolve a ``file://`` URI (or plain path) to a filesystem path."""

    parsed = urlparse(image_id)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(image_id)


class PathLabeler:
    """Placeholder labeler that reads labels from the words of an image's file name.

    ``beach_sunset-01.jpg`` yields ``[("beach", 1.0), ("sunset", 1.0)]``; digits-only words
    are dropped.
    """

    def __init__(self, confidence: float = 1.0) -> None:
        self.confidence = confidence

    def analyze(self, image_id: str) -> List[Tuple[str, float]]:
        stem = id_to_path(image_id).stem
        words = [word for word in _WORD_SPLIT.split(stem) if word and not word.isdigit()]
        return [(word, self.confidence) for word in words]


__all__ = ["LabelAnalyzer", "Labeler", "PathLabeler", "id_to_path", "normalize_label"]
