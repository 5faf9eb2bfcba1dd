"""Tests for fuzzy catalog search."""

import pytest

from ingest.models import Category
from web.catalog import CatalogIndex, rank, search, word_score


@pytest.fixture
def corpus(make_product):
    laptops = Category(id=1, name="Laptops")
    return [
        make_product("Dell Inspiron", specs="<p>Intel i5, 8GB RAM</p>", category=laptops),
        make_product("HP Pavilion", specs="Ryzen 5, 16GB", category=laptops),
        make_product("Canon PIXMA G3000", specs="<ul><li>Ink tank</li><li>Wireless</li></ul>"),
    ]


def test_query_matches_only_relevant_product(make_product):
    corpus = [make_product("Dell Inspiron"), make_product("HP Pavilion")]
    assert [p.name for p in search("dell", corpus)] == ["Dell Inspiron"]


@pytest.mark.parametrize("query", ["", "   ", None])
def test_blank_query_returns_corpus_unchanged(corpus, query):
    assert search(query, corpus) == corpus


def test_matching_ignores_case(corpus):
    assert [p.name for p in search("INSPIRON", corpus)] == ["Dell Inspiron"]


def test_typo_still_matches_with_lower_score(corpus):
    exact = rank("Inspiron", corpus)
    typo = rank("Inspron", corpus)

    assert exact[0].product.name == "Dell Inspiron"
    assert typo[0].product.name == "Dell Inspiron"
    assert exact[0].score == 100
    assert 60 <= typo[0].score < exact[0].score


def test_specs_are_searched_as_plain_text(corpus):
    hits = rank("ink tank", corpus)
    assert [h.product.name for h in hits] == ["Canon PIXMA G3000"]
    assert hits[0].matched_field == "specs"


def test_category_name_is_searched(corpus):
    names = [p.name for p in search("laptops", corpus)]
    assert sorted(names) == ["Dell Inspiron", "HP Pavilion"]


def test_equal_scores_keep_corpus_order(make_product):
    monitors = Category(id=2, name="Monitors")
    corpus = [make_product("Stand B", category=monitors), make_product("Stand A", category=monitors)]
    hits = rank("monitors", corpus)
    assert [h.position for h in hits] == [0, 1]
    assert all(h.matched_field == "category" for h in hits)


def test_exact_name_ranks_first(make_product):
    corpus = [make_product("Monitor stand"), make_product("Monitor")]
    hits = rank("monitor", corpus)
    assert [h.product.name for h in hits] == ["Monitor", "Monitor stand"]


def test_full_name_query_prefers_full_name(make_product):
    corpus = [make_product("Dell"), make_product("Dell Inspiron 15")]
    assert [p.name for p in search("Dell Inspiron 15", corpus)] == ["Dell Inspiron 15"]


def test_one_matching_word_is_not_enough(make_product):
    """Sharing only the brand category does not make a product relevant."""
    hp = Category(id=7, name="HP")
    corpus = [make_product("LaserJet 1020", category=hp), make_product("HP Pavilion 15")]
    hits = rank("hp pavilion 15", corpus)
    assert [h.product.name for h in hits] == ["HP Pavilion 15"]
    assert hits[0].score == 100


def test_unrelated_single_word_is_excluded(corpus):
    assert [p.name for p in search("pavilion", corpus)] == ["HP Pavilion"]
    assert [p.name for p in search("inspiron", corpus)] == ["Dell Inspiron"]


@pytest.mark.parametrize(
    "query_word,word,expected",
    [
        ("insp", "inspiron", 100),
        ("inspiron", "inspiron", 100),
        ("dell", "hp", 0),
    ],
)
def test_word_score(query_word, word, expected):
    assert word_score(query_word, word) == expected


def test_score_cutoff_controls_recall(corpus):
    assert search("Inspron", corpus, score_cutoff=99) == []
    assert search("Inspron", corpus, score_cutoff=50)


def test_index_can_be_reused(corpus):
    index = CatalogIndex(corpus)
    assert [p.name for p in index.search("pavilion")] == ["HP Pavilion"]
    assert [p.name for p in index.search("canon")] == ["Canon PIXMA G3000"]
    assert index.rank("   ") == []
