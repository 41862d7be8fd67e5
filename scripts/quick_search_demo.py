# Path: scripts/quick_search_demo.py
# Purpose: Simple CLI to run a search query against the gallery database.
# Layer: scripts.
# Details: Demonstrates text search by loading the record store and hybrid ranker.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gallery_config import AppSettings
from gallery_search.logging_config import configure_logging
from gallery_search.models.domain import SearchMode
from gallery_search.services import create_services


def main() -> None:
    """Execute a quick search from the command line."""

    parser = argparse.ArgumentParser(description="Run a quick search against the gallery database")
    parser.add_argument("--text", type=str, required=True, help="Text query to search for")
    parser.add_argument("--mode", choices=[mode.value for mode in SearchMode], default=None, help="Label matching mode")
    parser.add_argument("--k", type=int, default=5, help="Number of results to return")
    parser.add_argument("--semantic", action="store_true", help="Rank by embedding similarity only")
    args = parser.parse_args()

    settings = AppSettings.from_env()
    configure_logging(settings.log_level)
    services = create_services(settings)

    if args.semantic:
        results = services.ranker.semantic_search(args.text, top_k=args.k)
    else:
        mode = SearchMode.parse(args.mode or settings.search.default_mode)
        results = services.ranker.search(args.text, mode)[: args.k]

    if not results:
        print("No matching images found")
    for result in results:
        record = result.record
        print(f"score={result.relevance_score:.4f} file={record.file_name or record.id} labels={record.labels}")


if __name__ == "__main__":
    main()
