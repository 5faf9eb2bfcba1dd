"""Shared test fixtures for the web test suite."""

import base64
import itertools
from decimal import Decimal

import pytest

from ingest.db import CatalogStore
from ingest.models import Category, Condition, Product, ProductDraft, RichText

ADMIN_USER = "admin"
ADMIN_PASS = "s3cret"


@pytest.fixture
def make_product():
    """Factory for in-memory products; products get an image unless told otherwise."""
    ids = itertools.count(1)

    def _make(name, specs="", price=None, condition=Condition.NEW,
              category=None, image_url="https://cdn.example.com/p.jpg"):
        return Product(
            id=next(ids),
            name=name,
            specs=RichText(specs),
            price=Decimal(price) if price is not None else None,
            condition=condition,
            category_id=category.id if category else None,
            category_name=category.name if category else None,
            image_url=image_url,
        )

    return _make


@pytest.fixture
def categories():
    return [
        Category(id=1, name="Laptops"),
        Category(id=2, name="Monitors"),
        Category(id=3, name="Printers"),
    ]


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "catalog.db")


@pytest.fixture
def catalog_store(db_path):
    return CatalogStore(db_path)


@pytest.fixture
def seeded_store(catalog_store):
    """Store with two categories and four products (one without an image)."""
    laptops, monitors = catalog_store.insert_categories(["Laptops", "Monitors"])
    catalog_store.insert_products([
        ProductDraft(
            name="Dell Inspiron 3520",
            specs=RichText("<p>Intel i5, 8GB RAM</p>"),
            price=Decimal("45000"),
            condition=Condition.REFURBISHED,
            category_id=laptops.id,
            image_url="https://cdn.example.com/dell.jpg",
        ),
        ProductDraft(
            name="LG 24MK600",
            specs=RichText("24 inch IPS"),
            category_id=monitors.id,
            image_url="https://cdn.example.com/lg.jpg",
        ),
        ProductDraft(
            name="HP Pavilion 15",
            condition=Condition.REFURBISHED,
            image_url="https://cdn.example.com/hp.jpg",
        ),
        ProductDraft(name="Lenovo IdeaPad", category_id=laptops.id),
    ])
    return catalog_store


@pytest.fixture
def admin_headers():
    token = base64.b64encode(f"{ADMIN_USER}:{ADMIN_PASS}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def client(db_path, monkeypatch):
    """Flask test client over a temporary catalog with admin credentials set."""
    monkeypatch.setenv("ADMIN_USER", ADMIN_USER)
    monkeypatch.setenv("ADMIN_PASS", ADMIN_PASS)

    from web.app import app
    app.config.update(
        TESTING=True,
        CATALOG_DB_PATH=db_path,
        SHOP_EMAIL="sales@example.com",
        SEARCH_SCORE_CUTOFF=70.0,
    )

    with app.test_client() as test_client:
        yield test_client
