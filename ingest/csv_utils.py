"""CSV export of the catalog.

The exported columns match the import format, so an export can be edited
and imported into another catalog.
"""

import csv
import os
from typing import Any, Dict, List, Optional

from ingest.db import CatalogStore
from ingest.logging_config import get_logger
from ingest.models import Condition, Product

__all__ = ["EXPORT_FIELDS", "product_to_row", "export_products_to_csv"]

logger = get_logger(__name__)

EXPORT_FIELDS = ["name", "specs", "price", "condition", "category", "image_url", "created_at"]


def product_to_row(product: Product) -> Dict[str, Any]:
    """Convert a Product into a CSV-ready row using import column names."""
    return {
        "name": product.name,
        "specs": product.specs.markup,
        "price": str(product.price) if product.price is not None else "",
        "condition": product.condition.value,
        "category": product.category_name or "",
        "image_url": product.image_url or "",
        "created_at": product.created_at or "",
    }


def export_products_to_csv(
    store: CatalogStore,
    csv_path: str,
    condition: Optional[Condition] = None,
) -> int:
    """Export products to CSV.

    Args:
        store: Catalog store to read from
        csv_path: Path for the output CSV file
        condition: Optional condition filter

    Returns:
        Number of products exported
    """
    products = store.list_products(condition=condition)
    if not products:
        logger.info("No products to export.")
        return 0

    rows: List[Dict[str, Any]] = [product_to_row(p) for p in products]

    os.makedirs(os.path.dirname(csv_path) or ".", exist_ok=True)
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=EXPORT_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

    logger.info("Exported %d products to %s", len(rows), csv_path)
    return len(rows)
