"""Bulk catalog import pipeline."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from ingest.config import DB_PATH, SUPPORTED_EXTENSIONS
from ingest.db import CatalogStore, init_db
from ingest.decoders import FileFormat, decode
from ingest.errors import (
    CatalogImportError,
    EmptyDataset,
    MalformedInput,
    PersistenceFailure,
    ReconciliationFailure,
    StoreError,
    UnsupportedFormat,
)
from ingest.importer import CatalogImporter, ImportPhase, import_file
from ingest.models import (
    Category,
    Condition,
    ImportSummary,
    MissingRequiredField,
    Product,
    ProductDraft,
    RichText,
    RowError,
)
from ingest.normalize import normalize
from ingest.reconcile import reconcile

__all__ = [
    # Version
    "__version__",
    # Config
    "DB_PATH",
    "SUPPORTED_EXTENSIONS",
    # Models
    "Category",
    "Condition",
    "ImportSummary",
    "MissingRequiredField",
    "Product",
    "ProductDraft",
    "RichText",
    "RowError",
    # Errors
    "CatalogImportError",
    "EmptyDataset",
    "MalformedInput",
    "PersistenceFailure",
    "ReconciliationFailure",
    "StoreError",
    "UnsupportedFormat",
    # Core functions
    "CatalogStore",
    "CatalogImporter",
    "FileFormat",
    "ImportPhase",
    "decode",
    "import_file",
    "init_db",
    "normalize",
    "reconcile",
]
