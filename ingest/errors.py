"""Exceptions raised by the import pipeline and the catalog store."""

from typing import Optional

__all__ = [
    "CatalogImportError",
    "UnsupportedFormat",
    "MalformedInput",
    "EmptyDataset",
    "ReconciliationFailure",
    "PersistenceFailure",
    "StoreError",
]


class CatalogImportError(Exception):
    """Base class for errors that abort a whole import.

    ``phase`` is filled in by the importer with the name of the phase that
    failed, so callers can report where the batch stopped.
    """

    def __init__(self, message: str, phase: Optional[str] = None):
        super().__init__(message)
        self.phase = phase

    @property
    def user_message(self) -> str:
        return f"Failed to import: {self}"


class UnsupportedFormat(CatalogImportError):
    """The file extension is not one of the recognized import formats."""


class MalformedInput(CatalogImportError):
    """The file content could not be parsed as its declared format."""


class EmptyDataset(CatalogImportError):
    """The file parsed correctly but contained no data rows."""


class ReconciliationFailure(CatalogImportError):
    """Categories referenced by the batch could not be created or resolved."""


class PersistenceFailure(CatalogImportError):
    """Validated products could not be written to the store."""


class StoreError(Exception):
    """A catalog store operation failed."""
