"""Browsing layout for the public product pages.

Turns the product collection into either category buckets (default
browsing) or one ranked list (search or condition filter active). Only
products with an image are shown publicly; products still waiting for an
image upload stay visible in the admin search only.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

from ingest.config import OTHERS_BUCKET
from ingest.models import Category, Condition, Product

from .catalog import search

__all__ = [
    "BrowseFilter",
    "ProductGroup",
    "GroupedView",
    "FlatView",
    "eligible_products",
    "layout",
]


class BrowseFilter(str, Enum):
    ALL = "all"
    NEW = "new"
    REFURBISHED = "refurbished"

    @classmethod
    def parse(cls, value: Union[str, "BrowseFilter", None]) -> "BrowseFilter":
        """Parse a filter value; None/blank means ALL, unknown raises ValueError."""
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            return cls.ALL
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown filter '{value}'. Choices: {choices}") from None

    def matches(self, product: Product) -> bool:
        if self is BrowseFilter.ALL:
            return True
        return product.condition is Condition(self.value)


@dataclass
class ProductGroup:
    name: str
    products: List[Product] = field(default_factory=list)
    category_id: Optional[int] = None


@dataclass
class GroupedView:
    groups: List[ProductGroup] = field(default_factory=list)
    kind: str = field(default="grouped", init=False)

    @property
    def products(self) -> List[Product]:
        return [p for group in self.groups for p in group.products]


@dataclass
class FlatView:
    products: List[Product] = field(default_factory=list)
    query: str = ""
    filter: BrowseFilter = BrowseFilter.ALL
    kind: str = field(default="flat", init=False)


def eligible_products(corpus: Sequence[Product]) -> List[Product]:
    """Products that can be shown publicly (those with an image)."""
    return [p for p in corpus if p.has_image]


def _group_by_category(products: Sequence[Product], categories: Sequence[Category]) -> List[ProductGroup]:
    groups = [ProductGroup(name=c.name, category_id=c.id) for c in categories]
    by_id = {group.category_id: group for group in groups}
    others = ProductGroup(name=OTHERS_BUCKET)

    for product in products:
        by_id.get(product.category_id, others).products.append(product)

    return [group for group in groups + [others] if group.products]


def layout(
    corpus: Sequence[Product],
    active_filter: Union[str, BrowseFilter, None] = BrowseFilter.ALL,
    active_query: Optional[str] = "",
    categories: Sequence[Category] = (),
    score_cutoff: Optional[float] = None,
) -> Union[GroupedView, FlatView]:
    """Lay out the corpus for browsing.

    Args:
        corpus: Products, most recently created first
        active_filter: 'all', 'new' or 'refurbished'
        active_query: Search text; blank means no search
        categories: Known categories in catalog order (one bucket each)
        score_cutoff: Optional search cutoff override

    Returns:
        FlatView when a query is present or the filter is not 'all',
        otherwise GroupedView with a trailing 'Others' bucket.

    Raises:
        ValueError: unknown filter value
    """
    condition_filter = BrowseFilter.parse(active_filter)
    query = (active_query or "").strip()

    products = [p for p in eligible_products(corpus) if condition_filter.matches(p)]

    if query or condition_filter is not BrowseFilter.ALL:
        if query:
            products = search(query, products, score_cutoff=score_cutoff)
        return FlatView(products=products, query=query, filter=condition_filter)

    return GroupedView(groups=_group_by_category(products, categories))
