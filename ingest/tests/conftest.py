"""Shared fixtures for the ingest test suite."""

import io
import json
import tempfile
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import pytest

from ingest.db import CatalogStore


@pytest.fixture
def temp_db():
    """Create a temporary database path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    yield db_path
    # Cleanup
    Path(db_path).unlink(missing_ok=True)


@pytest.fixture
def store(temp_db):
    """A CatalogStore over a fresh temporary database."""
    return CatalogStore(temp_db)


@pytest.fixture
def make_json():
    """Build a JSON import file from a list of records."""

    def _make(rows: List[Dict[str, Any]]) -> bytes:
        return json.dumps(rows).encode("utf-8")

    return _make


@pytest.fixture
def make_xlsx():
    """Build a single-sheet Excel import file from a list of records."""

    def _make(rows: List[Dict[str, Any]], columns: List[str] = None) -> bytes:
        buffer = io.BytesIO()
        pd.DataFrame(rows, columns=columns).to_excel(buffer, index=False)
        return buffer.getvalue()

    return _make


@pytest.fixture
def scenario_a_rows():
    """One valid laptop row and one row without a name."""
    return [
        {"name": "Dell 3420", "category": "Laptops", "price": "45000"},
        {"name": "", "category": "Laptops"},
    ]
