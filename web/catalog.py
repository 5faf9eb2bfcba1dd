"""Fuzzy product search over an in-memory catalog.

Each product is indexed on the words of three fields: its name, the plain
text of its specs (markup removed) and its category name. Every query word
is scored against its closest product word with rapidfuzz's ``ratio``,
also comparing against the word's prefix so partly typed words still
match. A product's score is the mean over query words (0-100), so a
product has to account for the whole query and not just one word of it.
Equal scores are ordered by how closely the whole name matches the query,
then by corpus order.

The index is rebuilt from the full corpus on every search. Catalogs here
hold at most a few thousand products; beyond that, keep a built index
around and rebuild it when products change.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz, utils

from ingest.models import Product

__all__ = ["SEARCH_FIELDS", "SearchHit", "CatalogIndex", "word_score", "rank", "search"]

SEARCH_FIELDS = ("name", "specs", "category")

DEFAULT_SCORE_CUTOFF = 70.0

# Shortest query word that is also matched against word prefixes
MIN_PREFIX_CHARS = 2


def _field_text(product: Product, field_name: str) -> str:
    if field_name == "name":
        return product.name or ""
    if field_name == "specs":
        return product.specs.plain
    if field_name == "category":
        return product.category_name or ""
    raise ValueError(f"Unknown search field: {field_name}")


def word_score(query_word: str, word: str) -> float:
    """Similarity of two processed words, allowing ``query_word`` to be a prefix."""
    score = fuzz.ratio(query_word, word)
    if MIN_PREFIX_CHARS <= len(query_word) < len(word):
        score = max(score, fuzz.ratio(query_word, word[: len(query_word)]))
    return score


@dataclass
class SearchHit:
    product: Product
    score: float
    position: int  # index in the searched corpus
    matched_field: str
    name_score: float = 0.0  # whole-name similarity, breaks score ties


class CatalogIndex:
    """Search index over one snapshot of the product collection."""

    def __init__(self, products: Sequence[Product]):
        self.products = list(products)
        self._names = [utils.default_process(p.name or "") for p in self.products]
        # per product: distinct processed word -> first field it appears in
        self._words: List[Dict[str, str]] = []
        for product in self.products:
            words: Dict[str, str] = {}
            for field_name in SEARCH_FIELDS:
                for word in utils.default_process(_field_text(product, field_name)).split():
                    words.setdefault(word, field_name)
            self._words.append(words)

    @classmethod
    def build(cls, corpus: Sequence[Product]) -> "CatalogIndex":
        return cls(corpus)

    def _score(self, query_words: Sequence[str], position: int) -> Tuple[float, str]:
        words = self._words[position]
        if not words:
            return 0.0, SEARCH_FIELDS[0]

        total = 0.0
        field_points = dict.fromkeys(SEARCH_FIELDS, 0.0)
        for query_word in query_words:
            best_word = max(words, key=lambda w: word_score(query_word, w))
            best = word_score(query_word, best_word)
            total += best
            field_points[words[best_word]] += best

        matched_field = max(SEARCH_FIELDS, key=lambda f: field_points[f])
        return total / len(query_words), matched_field

    def rank(self, query: str, score_cutoff: float = DEFAULT_SCORE_CUTOFF) -> List[SearchHit]:
        """Hits scoring at least ``score_cutoff``, best first.

        A blank query matches nothing here; callers wanting "no filtering"
        semantics should use ``search``.
        """
        needle = utils.default_process(query or "")
        query_words = needle.split()
        if not query_words:
            return []

        hits: List[SearchHit] = []
        for position, product in enumerate(self.products):
            score, matched_field = self._score(query_words, position)
            if score < score_cutoff:
                continue
            hits.append(
                SearchHit(
                    product=product,
                    score=score,
                    position=position,
                    matched_field=matched_field,
                    name_score=fuzz.ratio(needle, self._names[position]),
                )
            )

        return sorted(hits, key=lambda hit: (-hit.score, -hit.name_score, hit.position))

    def search(self, query: str, score_cutoff: float = DEFAULT_SCORE_CUTOFF) -> List[Product]:
        if not query or not query.strip():
            return list(self.products)
        return [hit.product for hit in self.rank(query, score_cutoff)]


def rank(
    query: str,
    corpus: Sequence[Product],
    score_cutoff: Optional[float] = None,
) -> List[SearchHit]:
    """Scored matches of ``query`` in ``corpus``, best first."""
    cutoff = DEFAULT_SCORE_CUTOFF if score_cutoff is None else score_cutoff
    return CatalogIndex.build(corpus).rank(query, cutoff)


def search(
    query: str,
    corpus: Sequence[Product],
    score_cutoff: Optional[float] = None,
) -> List[Product]:
    """Products matching ``query``, best match first.

    An empty or whitespace-only query returns the whole corpus in its
    original order.
    """
    if not query or not query.strip():
        return list(corpus)
    cutoff = DEFAULT_SCORE_CUTOFF if score_cutoff is None else score_cutoff
    return CatalogIndex.build(corpus).search(query, cutoff)
