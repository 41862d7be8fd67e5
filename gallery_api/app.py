# Path: gallery_api/app.py
# Purpose: Expose a FastAPI application for gallery search operations.
# Layer: gallery_api.
# Details: Provides health checks, a search endpoint, and an indexing trigger delegating to the core services.

from __future__ import annotations

from typing import Any, Dict, Optional

from gallery_search.models.domain import SearchMode, SearchResult
from gallery_search.services import GalleryServices


def _serialize(result: SearchResult) -> Dict[str, Any]:
    record = result.record
    return {
        "id": record.id,
        "file_name": record.file_name,
        "labels": [part.strip() for part in record.labels.split(",") if part.strip()],
        "confidence": record.confidence,
        "score": result.relevance_score,
    }


def create_app(services: Optional[GalleryServices] = None):  # type: ignore[override]
    """Create a FastAPI app instance configured with the provided services."""

    from fastapi import FastAPI, HTTPException

    app = FastAPI(title="Gallery Search API", version="0.1.0")

    @app.get("/health")
    def health() -> Dict[str, Any]:
        """Return a simple health status payload."""

        payload: Dict[str, Any] = {"status": "ok"}
        if services is not None:
            payload["indexed_images"] = services.store.count_all()
        return payload

    @app.post("/search")
    def search(payload: Dict[str, Any]):
        """Run a search query using the configured ranker."""

        if services is None:
            raise HTTPException(status_code=500, detail="Search services are not configured.")

        try:
            mode = SearchMode.parse(payload.get("mode", services.settings.search.default_mode))
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        results = services.ranker.search(str(payload.get("text") or ""), mode)
        limit = int(payload.get("k", len(results)))
        return {"mode": mode.value, "results": [_serialize(result) for result in results[:limit]]}

    @app.post("/index")
    def index():
        """Run the indexing pipeline to completion and report the final progress event."""

        if services is None:
            raise HTTPException(status_code=500, detail="Search services are not configured.")

        last = services.indexer.run_with_callback(lambda progress: None)
        if last is None:
            return {"processed": 0, "total": 0, "message": ""}
        return {"processed": last.processed, "total": last.total, "message": last.message}

    return app
