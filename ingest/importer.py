"""Import orchestration: decode -> reconcile -> normalize -> persist.

Phases run strictly in order. Decoding, reconciling and persisting can fail
the whole import; normalizing only collects per-row errors. Nothing is
rolled back: categories created before a persistence failure stay.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence

from ingest.decoders import decode
from ingest.errors import (
    CatalogImportError,
    PersistenceFailure,
    ReconciliationFailure,
    StoreError,
)
from ingest.logging_config import get_logger, log_import_event
from ingest.models import Category, ImportSummary
from ingest.normalize import normalize_rows
from ingest.reconcile import reconcile

__all__ = ["ImportPhase", "CatalogImporter", "import_file"]

logger = get_logger(__name__)


class ImportPhase(str, Enum):
    IDLE = "idle"
    DECODING = "decoding"
    RECONCILING = "reconciling"
    NORMALIZING = "normalizing"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class CatalogImporter:
    """Runs one import against a store.

    The store must provide ``list_categories``, ``insert_categories`` and
    ``insert_products``. An importer instance is single-use.
    """

    def __init__(self, store):
        self.store = store
        self.phase = ImportPhase.IDLE
        self.history: List[ImportPhase] = [ImportPhase.IDLE]

    def _enter(self, phase: ImportPhase) -> None:
        self.phase = phase
        self.history.append(phase)
        log_import_event(
            "phase_changed",
            {"message": f"Import phase: {phase.value}", "phase": phase.value},
            level=logging.DEBUG,
        )

    def _fail(self, error: CatalogImportError) -> None:
        error.phase = self.phase.value
        self._enter(ImportPhase.FAILED)
        log_import_event(
            "import_failed",
            {
                "message": error.user_message,
                "phase": error.phase,
                "error_type": type(error).__name__,
            },
            level=logging.ERROR,
        )

    def run(
        self,
        file_bytes: bytes,
        extension: str,
        existing_categories: Optional[Sequence[Category]] = None,
    ) -> ImportSummary:
        """Import one file and return its summary.

        Args:
            file_bytes: Uploaded file content
            extension: Declared file extension (selects the decoder)
            existing_categories: Category snapshot; read from the store when None

        Raises:
            CatalogImportError: a fatal phase failed; ``phase`` says which
        """
        if self.phase is not ImportPhase.IDLE:
            raise RuntimeError("CatalogImporter instances can only run once")

        try:
            self._enter(ImportPhase.DECODING)
            rows = decode(file_bytes, extension)

            self._enter(ImportPhase.RECONCILING)
            if existing_categories is None:
                try:
                    existing_categories = self.store.list_categories()
                except StoreError as exc:
                    raise ReconciliationFailure(str(exc)) from exc
            reconciled = reconcile(rows, existing_categories, self.store)

            self._enter(ImportPhase.NORMALIZING)
            drafts, errors = normalize_rows(rows, reconciled.name_to_id)
            for error in errors:
                log_import_event(
                    "row_skipped",
                    {"message": f"Skipped row {error.row_number}", **error.to_dict()},
                    level=logging.DEBUG,
                )

            self._enter(ImportPhase.PERSISTING)
            imported = 0
            if drafts:
                try:
                    imported = self.store.insert_products(drafts)
                except StoreError as exc:
                    raise PersistenceFailure(str(exc)) from exc
        except CatalogImportError as error:
            self._fail(error)
            raise

        summary = ImportSummary(
            imported_count=imported,
            categories_created_count=len(reconciled.created),
            skipped_count=len(errors),
            errors=errors,
            created_categories=reconciled.created,
        )
        self._enter(ImportPhase.DONE)
        log_import_event(
            "import_completed",
            {
                "message": summary.describe(),
                "rows": len(rows),
                "imported_count": summary.imported_count,
                "categories_created_count": summary.categories_created_count,
                "skipped_count": summary.skipped_count,
            },
        )
        return summary


def import_file(
    file_bytes: bytes,
    extension: str,
    store,
    existing_categories: Optional[Sequence[Category]] = None,
) -> ImportSummary:
    """Run a complete import of one file. See CatalogImporter.run."""
    return CatalogImporter(store).run(file_bytes, extension, existing_categories)
