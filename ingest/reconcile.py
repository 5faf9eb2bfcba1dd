"""Reconciliation of free-text category names against the category set."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ingest.errors import ReconciliationFailure, StoreError
from ingest.logging_config import get_logger, log_import_event
from ingest.models import Category, RawImportRow

__all__ = [
    "ReconcileResult",
    "category_key",
    "extract_category_names",
    "find_missing_categories",
    "build_name_index",
    "reconcile",
]

logger = get_logger(__name__)


def category_key(name: str) -> str:
    """Comparison key for category names: trimmed and case-folded."""
    return name.strip().casefold()


@dataclass
class ReconcileResult:
    # category_key(name) -> category id
    name_to_id: Dict[str, int] = field(default_factory=dict)
    created: List[Category] = field(default_factory=list)

    def resolve(self, name: Optional[str]) -> Optional[int]:
        if not name or not name.strip():
            return None
        return self.name_to_id.get(category_key(name))


def extract_category_names(rows: Iterable[RawImportRow]) -> List[str]:
    """Distinct, trimmed, non-empty category values in first-seen order.

    Values differing only by case are kept apart here; they are merged when
    deciding what to create.
    """
    seen = set()
    names: List[str] = []
    for row in rows:
        value = row.get("category")
        if not isinstance(value, str):
            continue
        name = value.strip()
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    return names


def find_missing_categories(names: Iterable[str], existing: Iterable[Category]) -> List[str]:
    """Names with no case-insensitive match in ``existing``, deduplicated.

    The first spelling of each name wins.
    """
    known = {category_key(c.name) for c in existing}
    missing: List[str] = []
    for name in names:
        key = category_key(name)
        if key in known:
            continue
        known.add(key)
        missing.append(name)
    return missing


def build_name_index(categories: Iterable[Category]) -> Dict[str, int]:
    """Map category keys to ids; the lowest id wins for case-variant duplicates."""
    index: Dict[str, int] = {}
    for category in sorted(categories, key=lambda c: c.id):
        index.setdefault(category_key(category.name), category.id)
    return index


def reconcile(
    rows: Sequence[RawImportRow],
    existing_categories: Sequence[Category],
    store,
) -> ReconcileResult:
    """Resolve every category referenced by ``rows`` to a category id.

    Missing names are created in a single ``store.insert_categories`` call,
    after which the whole category set is re-read so both old and new
    categories resolve.

    Args:
        rows: Decoded import rows
        existing_categories: Category snapshot taken at the start of the import
        store: Object providing ``insert_categories`` and ``list_categories``

    Raises:
        ReconciliationFailure: categories could not be created or re-read,
            or a referenced name is still unresolved afterwards
    """
    names = extract_category_names(rows)
    missing = find_missing_categories(names, existing_categories)

    if not missing:
        return ReconcileResult(name_to_id=build_name_index(existing_categories))

    logger.info("Creating %d new categories", len(missing))
    try:
        created = store.insert_categories(missing)
        categories = store.list_categories()
    except StoreError as exc:
        raise ReconciliationFailure(str(exc)) from exc

    result = ReconcileResult(name_to_id=build_name_index(categories), created=list(created))

    unresolved = [name for name in names if result.resolve(name) is None]
    if unresolved:
        raise ReconciliationFailure(
            f"Categories could not be resolved after creation: {', '.join(unresolved)}"
        )

    if len(result.created) < len(missing):
        # Another import created some of these between our snapshot and insert
        logger.warning(
            "%d of %d new categories already existed at insert time",
            len(missing) - len(result.created),
            len(missing),
        )

    log_import_event(
        "categories_created",
        {
            "message": f"Created {len(result.created)} categories",
            "categories": [c.name for c in result.created],
        },
    )
    return result
