"""Centralized configuration for the catalog web app."""

import os
from pathlib import Path

# Determine project root (parent of 'web' directory)
_THIS_DIR = Path(__file__).parent
_PROJECT_ROOT = _THIS_DIR.parent

# Data - use absolute path for consistent loading
DB_PATH = os.getenv("CATALOG_DB_PATH", str(_PROJECT_ROOT / "data" / "catalog.db"))

# Search: minimum fuzzy score (0-100) for a product to match a query
SEARCH_SCORE_CUTOFF = float(os.getenv("SEARCH_SCORE_CUTOFF", "70"))

# Shop contact address used for "Contact for Price" inquiry links
SHOP_EMAIL = os.getenv("SHOP_EMAIL", "")

# Upload limit for import files
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# Flask app settings (allow env overrides; default debug off for safety)
FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", os.getenv("PORT", "5000")))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"
