# Path: gallery_config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes settings for embeddings, caching, search scoring, indexing, paths, and logging.

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "GALLERY_SEARCH_"


class EmbedderSettings(BaseModel):
    """Settings describing the placeholder embedder and its cache."""

    dim: int = Field(default=128, description="Fixed embedding dimensionality.")
    cache_capacity: int = Field(default=1000, description="Maximum number of cached image embeddings.")
    cache_evict_count: int = Field(default=100, description="Entries evicted (oldest first) when the cache is full.")


class SearchSettings(BaseModel):
    """Settings controlling lexical/vector fusion and result limits."""

    text_weight: float = Field(default=0.6, description="Weight of the lexical score in fuzzy mode.")
    semantic_weight: float = Field(default=0.4, description="Weight of the cosine score in fuzzy mode.")
    fusion_threshold: float = Field(default=0.1, description="Combined score a fuzzy result must exceed.")
    result_limit: int = Field(default=100, description="Maximum number of results returned per query.")
    vector_threshold: float = Field(default=0.2, description="Minimum cosine similarity for vector-only search.")
    vector_top_k: int = Field(default=50, description="Maximum number of vector-only results.")
    min_query_length: int = Field(default=2, description="Shortest trimmed query a search session will run.")
    default_mode: str = Field(default="fuzzy", description="Search mode used when callers do not pick one.")


class IndexingSettings(BaseModel):
    """Settings controlling incremental re-indexing and worker fan-out."""

    staleness_days: int = Field(default=7, description="Age after which an indexed record is analyzed again.")
    batch_size: int = Field(default=10, description="Images processed per worker-pool barrier.")
    max_workers: Optional[int] = Field(default=None, description="Worker pool size, defaults to the CPU count.")


class AppSettings(BaseModel):
    """Top-level application settings shared across services and interfaces."""

    image_folder: Path = Field(default=Path("storage/images"), description="Root folder containing user images.")
    database_path: Path = Field(default=Path("storage/db/gallery_search.sqlite3"), description="Path to the record database.")
    embedder: EmbedderSettings = Field(default_factory=EmbedderSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    indexing: IndexingSettings = Field(default_factory=IndexingSettings)
    api_enabled: bool = Field(default=False, description="Flag indicating if the HTTP API should be initialized.")
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Instantiate settings, applying ``GALLERY_SEARCH_*`` environment overrides when present."""

        overrides = {}
        for field_name in ("image_folder", "database_path", "log_level", "api_enabled"):
            value = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
            if value is not None:
                overrides[field_name] = value
        return cls.model_validate(overrides)


__all__ = ["AppSettings", "EmbedderSettings", "IndexingSettings", "SearchSettings"]
