#!/usr/bin/env python3
"""Back up or restore a book as a single JSON snapshot.

    python scripts/export_book.py export backup.json
    python scripts/export_book.py import backup.json

Import replaces the whole book; collections missing from the file end up
empty.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from microlend.config import MicrolendConfig
from microlend.exceptions import MicrolendError
from microlend.logging import setup_logging
from microlend.store import Book, open_store

logger = logging.getLogger(__name__)


def export_book(book: Book, path: Path, indent: int | None) -> None:
    snapshot = book.export_snapshot()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot, f, indent=indent, ensure_ascii=False)
    logger.info("Exported %s to %s", book.summary(), path)


def import_book(book: Book, path: Path) -> None:
    with open(path, encoding="utf-8") as f:
        snapshot = json.load(f)
    book.import_snapshot(snapshot)
    logger.info("Imported %s from %s", book.summary(), path)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Export or import a book snapshot")
    parser.add_argument(
        "action",
        choices=("export", "import"),
        help="Direction of the transfer",
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Snapshot JSON file",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation for export (default: 2)",
    )
    args = parser.parse_args()

    config = MicrolendConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    store = open_store(config)
    try:
        book = Book.open(
            store,
            admin_name=config.lending.admin_name,
            admin_area=config.lending.admin_area,
        )
        if args.action == "export":
            export_book(book, args.path, args.indent)
        else:
            import_book(book, args.path)
    except (MicrolendError, OSError, json.JSONDecodeError) as e:
        logger.error("%s failed: %s", args.action.capitalize(), e)
        sys.exit(1)
    finally:
        store.close()


if __name__ == "__main__":
    main()
