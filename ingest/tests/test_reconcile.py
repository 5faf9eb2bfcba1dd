"""Tests for category reconciliation."""

from unittest.mock import MagicMock

import pytest

from ingest.errors import ReconciliationFailure, StoreError
from ingest.models import Category
from ingest.reconcile import (
    build_name_index,
    category_key,
    extract_category_names,
    find_missing_categories,
    reconcile,
)


class TestCategoryNameExtraction:
    """Collecting category names from raw rows."""

    def test_distinct_trimmed_in_first_seen_order(self):
        rows = [
            {"category": " Laptops "},
            {"category": "Monitors"},
            {"category": "Laptops"},
            {"name": "no category"},
            {"category": "   "},
        ]
        assert extract_category_names(rows) == ["Laptops", "Monitors"]

    def test_case_variants_are_kept_for_later_merge(self):
        rows = [{"category": "Laptops"}, {"category": "laptops"}]
        assert extract_category_names(rows) == ["Laptops", "laptops"]


class TestFindMissing:
    """Deciding which names need to be created."""

    def test_existing_match_ignores_case(self):
        existing = [Category(id=1, name="Laptops")]
        assert find_missing_categories(["laptops", "LAPTOPS"], existing) == []

    def test_missing_names_deduplicated_first_spelling_wins(self):
        missing = find_missing_categories(["Monitors", "monitors", "Printers"], [])
        assert missing == ["Monitors", "Printers"]


class TestNameIndex:
    def test_keys_are_case_folded(self):
        index = build_name_index([Category(id=3, name="Laptops")])
        assert index == {"laptops": 3}
        assert category_key("  LAPTOPS ") == "laptops"

    def test_lowest_id_wins_for_duplicates(self):
        index = build_name_index([Category(id=9, name="laptops"), Category(id=4, name="Laptops")])
        assert index["laptops"] == 4


class TestReconcileWithStore:
    """reconcile() against a real SQLite store."""

    def test_creates_missing_categories_once(self, store):
        rows = [
            {"name": "A", "category": "Laptops"},
            {"name": "B", "category": "laptops"},
            {"name": "C", "category": "Monitors"},
        ]
        result = reconcile(rows, store.list_categories(), store)

        assert [c.name for c in result.created] == ["Laptops", "Monitors"]
        assert store.get_category_count() == 2
        assert result.resolve("LAPTOPS") == result.resolve("Laptops")
        assert result.resolve("monitors") is not None

    def test_existing_category_resolves_without_creation(self, store):
        """A row saying 'laptops' maps to the existing 'Laptops'."""
        (existing,) = store.insert_categories(["Laptops"])

        result = reconcile([{"name": "A", "category": "laptops"}], store.list_categories(), store)

        assert result.created == []
        assert result.resolve("laptops") == existing.id
        assert store.get_category_count() == 1

    def test_created_count_matches_new_distinct_names(self, store):
        store.insert_categories(["Laptops"])
        rows = [{"category": c} for c in ["Laptops", "Mice", "MICE", "Keyboards", "laptops"]]

        result = reconcile(rows, store.list_categories(), store)

        assert len(result.created) == 2
        assert store.get_category_count() == 3

    def test_stale_snapshot_does_not_duplicate(self, store):
        """A category created after the snapshot is reused, not duplicated."""
        snapshot = store.list_categories()
        store.insert_categories(["Laptops"])

        result = reconcile([{"category": "LAPTOPS"}], snapshot, store)

        assert result.created == []
        assert store.get_category_count() == 1
        assert result.resolve("laptops") == store.list_categories()[0].id

    def test_no_categories_does_not_touch_store(self):
        fake_store = MagicMock()
        result = reconcile([{"name": "A"}], [], fake_store)
        assert result.name_to_id == {}
        fake_store.insert_categories.assert_not_called()


class TestReconcileFailures:
    def test_insert_failure_is_fatal(self):
        fake_store = MagicMock()
        fake_store.insert_categories.side_effect = StoreError("disk full")

        with pytest.raises(ReconciliationFailure, match="disk full"):
            reconcile([{"category": "Laptops"}], [], fake_store)

    def test_unresolved_after_reread_is_fatal(self):
        fake_store = MagicMock()
        fake_store.insert_categories.return_value = [Category(id=1, name="Laptops")]
        fake_store.list_categories.return_value = []

        with pytest.raises(ReconciliationFailure, match="Laptops"):
            reconcile([{"category": "Laptops"}], [], fake_store)
