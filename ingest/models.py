"""Data models for categories, products and import results."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

__all__ = [
    "Condition",
    "RichText",
    "Category",
    "Product",
    "ProductDraft",
    "RawImportRow",
    "RowError",
    "MissingRequiredField",
    "ImportSummary",
    "strip_markup",
]

# One decoded row of an import file: column name -> cell text
RawImportRow = Dict[str, str]


def strip_markup(markup: Optional[str]) -> str:
    """Return the visible text of an HTML fragment with whitespace collapsed."""
    if not markup:
        return ""
    if "<" not in markup and "&" not in markup:
        return " ".join(markup.split())
    text = BeautifulSoup(markup, "html.parser").get_text(" ")
    return " ".join(text.split())


class Condition(str, Enum):
    NEW = "new"
    REFURBISHED = "refurbished"

    @classmethod
    def from_text(cls, value: Optional[str]) -> "Condition":
        """Parse free text; anything other than 'refurbished' is NEW."""
        if isinstance(value, str) and value.strip().lower() == cls.REFURBISHED.value:
            return cls.REFURBISHED
        return cls.NEW


@dataclass(frozen=True)
class RichText:
    """Product specs as stored (raw markup from the editor) plus plain text.

    The plain-text projection is computed once here and reused by search
    indexing and inquiry previews.
    """

    markup: str = ""
    plain: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "plain", strip_markup(self.markup))

    def preview(self, length: int) -> str:
        """First ``length`` characters of the plain text."""
        return self.plain[:length]


@dataclass
class Category:
    id: int
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass
class ProductDraft:
    """A normalized product row that has not been persisted yet."""

    name: str
    specs: RichText = field(default_factory=RichText)
    price: Optional[Decimal] = None
    condition: Condition = Condition.NEW
    category_id: Optional[int] = None
    image_url: Optional[str] = None


@dataclass
class Product:
    """A persisted catalog product.

    ``category_name`` is resolved by the store when listing and is None for
    uncategorized products or when the category has been deleted.
    """

    # Required fields
    name: str

    # Optional fields
    specs: RichText = field(default_factory=RichText)
    price: Optional[Decimal] = None  # None means "Contact for Price"
    condition: Condition = Condition.NEW
    category_id: Optional[int] = None
    image_url: Optional[str] = None

    # Read-only, filled by the store
    category_name: Optional[str] = None
    created_at: Optional[str] = None
    id: Optional[int] = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "specs": self.specs.markup,
            "specs_plain": self.specs.plain,
            "price": str(self.price) if self.price is not None else None,
            "condition": self.condition.value,
            "category_id": self.category_id,
            "category_name": self.category_name,
            "image_url": self.image_url,
            "created_at": self.created_at,
        }


@dataclass
class RowError:
    """A row that was skipped during normalization.

    ``row_number`` is the 1-based position of the row among the decoded data
    rows (header excluded).
    """

    row_number: Optional[int]
    field: str
    message: str

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "row_number": self.row_number,
            "field": self.field,
            "message": self.message,
        }


@dataclass
class MissingRequiredField(RowError):
    message: str = "required field is missing or blank"


@dataclass
class ImportSummary:
    """Outcome of one import, handed back to the caller and never persisted."""

    imported_count: int = 0
    categories_created_count: int = 0
    skipped_count: int = 0
    errors: List[RowError] = field(default_factory=list)
    created_categories: List[Category] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "imported_count": self.imported_count,
            "categories_created_count": self.categories_created_count,
            "skipped_count": self.skipped_count,
            "errors": [e.to_dict() for e in self.errors],
            "created_categories": [c.to_dict() for c in self.created_categories],
        }

    def describe(self) -> str:
        """One-line message for the operator."""
        message = (
            f"Successfully imported {self.imported_count} products "
            f"(and created {self.categories_created_count} new categories)"
        )
        if self.skipped_count:
            message += f", skipped {self.skipped_count} invalid rows"
        return message + "."
