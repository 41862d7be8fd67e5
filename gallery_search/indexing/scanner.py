# Path: gallery_search/indexing/scanner.py
# Purpose: Scan folders and expose image files as a media source.
# Layer: gallery_search/indexing.
# Details: Image ids are file:// URIs ordered newest first; metadata comes from the filesystem and Pillow.

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List, Protocol

from PIL import Image, UnidentifiedImageError

from gallery_search.models.domain import ImageMetadata
from .labels import id_to_path

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp"}


class MediaSource(Protocol):
    """Source of image identifiers and their file metadata."""

    def enumerate(self) -> List[str]:
        """Return image ids, most recently added first."""

    def metadata(self, image_id: str) -> ImageMetadata:
        """Return file metadata for ``image_id``."""


class ImageScanner:
    """Scan filesystem paths for supported image files."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def enumerate(self) -> List[str]:
        """Return ``file://`` URIs of discovered images, newest modification time first."""

        paths = sorted(self._iter_image_files(), key=lambda path: path.stat().st_mtime, reverse=True)
        return [path.resolve().as_uri() for path in paths]

    def metadata(self, image_id: str) -> ImageMetadata:
        """Return name, size, timestamp (epoch milliseconds), and MIME type for an image."""

        path = id_to_path(image_id)
        stat = path.stat()
        return ImageMetadata(
            file_name=path.name,
            size_bytes=stat.st_size,
            date_added=int(stat.st_mtime * 1000),
            mime_type=self._mime_type(path),
        )

    @staticmethod
    def _mime_type(path: Path) -> str:
        """Prefer the format Pillow detects; fall back to the file extension."""

        try:
            with Image.open(path) as image:
                mime = Image.MIME.get(image.format or "")
        except (OSError, UnidentifiedImageError):
            logger.debug("Pillow could not identify %s", path)
            mime = None
        return mime or mimetypes.guess_type(path.name)[0] or ""

    def _iter_image_files(self) -> Iterable[Path]:
        """Yield image files under the root directory."""

        if not self.root.exists():
            return
        for path in self.root.rglob("*"):
            if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS:
                yield path


__all__ = ["ImageScanner", "MediaSource", "SUPPORTED_EXTENSIONS"]
