"""Row normalization: raw import rows -> validated product drafts."""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ingest.logging_config import get_logger
from ingest.models import (
    Condition,
    MissingRequiredField,
    ProductDraft,
    RawImportRow,
    RichText,
    RowError,
)
from ingest.reconcile import category_key

__all__ = ["parse_price", "normalize", "normalize_rows"]

logger = get_logger(__name__)


def _text(value: Any) -> Optional[str]:
    """Trimmed string value, or None for missing/blank cells."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_price(value: Any) -> Optional[Decimal]:
    """Parse a price cell into a non-negative Decimal.

    Accepts thousands separators ("45,000"). Returns None for absent,
    unparsable, non-finite or negative values.
    """
    text = _text(value)
    if text is None:
        return None
    try:
        price = Decimal(text.replace(",", ""))
    except InvalidOperation:
        return None
    if not price.is_finite() or price < 0:
        return None
    return price


def normalize(
    row: RawImportRow,
    name_to_id: Dict[str, int],
    row_number: Optional[int] = None,
) -> Union[ProductDraft, RowError]:
    """Map one raw row to a product draft, or a RowError if it must be skipped.

    Args:
        row: Decoded row (column name -> cell text)
        name_to_id: Reconciled category keys -> ids
        row_number: 1-based data row position, used in error reports
    """
    name = _text(row.get("name"))
    if name is None:
        return MissingRequiredField(row_number=row_number, field="name")

    category_id = None
    category = _text(row.get("category"))
    if category is not None:
        category_id = name_to_id.get(category_key(category))

    return ProductDraft(
        name=name,
        specs=RichText(row.get("specs") or ""),
        price=parse_price(row.get("price")),
        condition=Condition.from_text(row.get("condition")),
        category_id=category_id,
        image_url=_text(row.get("image_url")),
    )


def normalize_rows(
    rows: Sequence[RawImportRow],
    name_to_id: Dict[str, int],
) -> Tuple[List[ProductDraft], List[RowError]]:
    """Normalize a batch; invalid rows are collected, never raised."""
    drafts: List[ProductDraft] = []
    errors: List[RowError] = []
    for row_number, row in enumerate(rows, start=1):
        result = normalize(row, name_to_id, row_number=row_number)
        if isinstance(result, RowError):
            logger.debug("Skipping row %d: %s (%s)", row_number, result.message, result.field)
            errors.append(result)
        else:
            drafts.append(result)
    return drafts, errors
