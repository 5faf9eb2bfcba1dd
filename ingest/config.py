"""Configuration and constants for catalog ingestion."""

import os
from pathlib import Path
from typing import Dict, Tuple

__all__ = [
    "DB_PATH",
    "LOG_DIR",
    "SUPPORTED_EXTENSIONS",
    "RECOGNIZED_COLUMNS",
    "OTHERS_BUCKET",
    "PRICE_SYMBOL",
    "SPEC_PREVIEW_CHARS",
]

_PROJECT_ROOT = Path(__file__).parent.parent

# Same database the web app reads (see web/config.py)
DB_PATH = os.getenv("CATALOG_DB_PATH", str(_PROJECT_ROOT / "data" / "catalog.db"))

# Log directory
LOG_DIR = _PROJECT_ROOT / "logs"

# Extension -> file format key. See ingest.decoders.FileFormat.
SUPPORTED_EXTENSIONS: Dict[str, str] = {
    "csv": "tabular_text",
    "json": "object_array",
    "xlsx": "spreadsheet",
    "xls": "spreadsheet",
}

# Columns read from import files (case-sensitive); everything else is ignored
RECOGNIZED_COLUMNS: Tuple[str, ...] = (
    "name",
    "specs",
    "price",
    "condition",
    "category",
    "image_url",
)
# Browsing
OTHERS_BUCKET = "Others"

# Presentation of prices and inquiry previews
PRICE_SYMBOL = "₹"
SPEC_PREVIEW_CHARS = 50
