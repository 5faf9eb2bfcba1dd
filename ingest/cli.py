"""Command-line interface for catalog imports."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path to allow imports when run as script
sys.path.insert(0, str(Path(__file__).parent.parent))

__all__ = ["main", "parse_args", "run_import", "show_stats"]

from ingest.config import DB_PATH, SUPPORTED_EXTENSIONS
from ingest.csv_utils import export_products_to_csv
from ingest.db import CatalogStore
from ingest.errors import CatalogImportError, StoreError
from ingest.importer import import_file
from ingest.logging_config import setup_logging
from ingest.models import Condition


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Bulk product import and catalog maintenance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import products from a spreadsheet
  python -m ingest.cli --import data/stock.xlsx

  # Import into a different database
  python -m ingest.cli --import products.csv --db /tmp/catalog.db

  # Export refurbished products to CSV
  python -m ingest.cli --export-csv data/refurbished.csv --condition refurbished

  # Show database statistics
  python -m ingest.cli --stats
        """,
    )

    parser.add_argument(
        "--import",
        dest="import_path",
        metavar="FILE",
        help=f"Import products from a file ({', '.join(sorted(SUPPORTED_EXTENSIONS))})",
    )

    # Database options
    parser.add_argument(
        "--db",
        default=DB_PATH,
        help=f"SQLite database path (default: {DB_PATH})",
    )

    # Export options
    parser.add_argument(
        "--export-csv",
        metavar="PATH",
        help="Export products to CSV file",
    )
    parser.add_argument(
        "--condition",
        choices=[c.value for c in Condition],
        help="Export only products in this condition (use with --export-csv)",
    )

    # Info commands
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show database statistics and exit",
    )
    parser.add_argument(
        "--list-categories",
        action="store_true",
        help="List categories and exit",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output (phase transitions, skipped rows)",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Don't write JSONL logs",
    )

    return parser.parse_args(argv)


def show_stats(store: CatalogStore) -> None:
    """Display database statistics."""
    print(f"\n{'='*50}")
    print(f"Database: {store.db_path}")
    print(f"{'='*50}")
    print(f"\nTotal products: {store.get_product_count()}")
    print(f"Total categories: {store.get_category_count()}")

    products = store.list_products()
    without_image = sum(1 for p in products if not p.has_image)
    refurbished = sum(1 for p in products if p.condition is Condition.REFURBISHED)
    print(f"  refurbished: {refurbished}")
    print(f"  awaiting image (hidden from browsing): {without_image}")
    print()


def run_import(store: CatalogStore, path: str) -> int:
    """Import one file, print the outcome and return an exit code."""
    file_path = Path(path)
    try:
        file_bytes = file_path.read_bytes()
    except OSError as exc:
        print(f"Failed to import: cannot read {path}: {exc}", file=sys.stderr)
        return 1

    try:
        summary = import_file(file_bytes, file_path.suffix, store)
    except CatalogImportError as exc:
        print(exc.user_message, file=sys.stderr)
        return 1

    print(summary.describe())
    for error in summary.errors:
        print(f"  row {error.row_number}: {error.field}: {error.message}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_file=not args.no_log_file,
    )

    try:
        store = CatalogStore(args.db)

        if args.list_categories:
            categories = store.list_categories()
            if not categories:
                print("No categories added yet.")
            for category in categories:
                print(f"  {category.id}: {category.name}")
            return 0

        if args.stats:
            show_stats(store)
            return 0

        if args.export_csv:
            condition = Condition(args.condition) if args.condition else None
            count = export_products_to_csv(store, args.export_csv, condition=condition)
            print(f"Exported {count} products to {args.export_csv}")
            return 0

        if args.import_path:
            return run_import(store, args.import_path)
    except StoreError as exc:
        print(f"Database error: {exc}", file=sys.stderr)
        return 1

    print("Nothing to do. Use --import, --export-csv, --stats or --list-categories.")
    return 2


if __name__ == "__main__":
    sys.exit(main())
