# Path: gallery_search/logging_config.py
# Purpose: Configure console logging for scripts and the HTTP app.
# Layer: gallery_search.
# Details: Library modules only create named loggers; entrypoints call configure_logging once.

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single console handler to the package logger and set its level."""

    logger = logging.getLogger("gallery_search")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(getattr(handler, "_gallery_search", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._gallery_search = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
