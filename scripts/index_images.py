# Path: scripts/index_images.py
# Purpose: CLI tool to scan an image folder and refresh the gallery search database.
# Layer: scripts.
# Details: Demonstrates how to wire the scanner, labeler, embedder, and record store together.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tqdm import tqdm

from gallery_config import AppSettings
from gallery_search.indexing.index_builder import pending_images
from gallery_search.logging_config import configure_logging
from gallery_search.services import create_services


def main() -> None:
    """Run indexing over a folder of images."""

    parser = argparse.ArgumentParser(description="Index images for gallery search")
    parser.add_argument("--folder", type=Path, default=None, help="Folder containing images to index")
    parser.add_argument("--db", type=Path, default=None, help="Path of the SQLite record database")
    parser.add_argument("--batch-size", type=int, default=None, help="Images processed per worker batch")
    parser.add_argument("--dry-run", action="store_true", help="Only report how many images need analysis")
    args = parser.parse_args()

    settings = AppSettings.from_env()
    if args.folder is not None:
        settings.image_folder = args.folder
    if args.db is not None:
        settings.database_path = args.db
    if args.batch_size is not None:
        settings.indexing.batch_size = args.batch_size
    configure_logging(settings.log_level)

    services = create_services(settings)
    if args.dry_run:
        image_ids = services.indexer.media_source.enumerate()
        pending = pending_images(services.indexer, image_ids)
        print(f"{len(pending)} of {len(image_ids)} images need analysis")
        return

    with tqdm(desc="Indexing images", unit="img") as bar:
        for progress in services.indexer.run():
            if progress.total and bar.total != progress.total:
                bar.total = progress.total
                bar.refresh()
            bar.n = progress.processed
            bar.set_postfix_str(progress.message, refresh=True)

    print(f"Indexed {services.store.count_all()} images into {settings.database_path}")


if __name__ == "__main__":
    main()
