"""Tests for price labels and inquiry links."""

from urllib.parse import parse_qs, urlsplit

import pytest

from ingest.models import Condition
from web.inquiry import build_inquiry_mailto, price_label


@pytest.mark.parametrize(
    "price,expected",
    [
        ("45000", "₹45,000"),
        ("45000.00", "₹45,000"),
        ("1299.50", "₹1,299.50"),
        ("0", "₹0"),
    ],
)
def test_price_label(make_product, price, expected):
    assert price_label(make_product("Dell 3420", price=price)) == expected


def test_missing_price_label(make_product):
    assert price_label(make_product("Dell 3420")) == "Contact for Price"


def test_mailto_contents(make_product):
    product = make_product(
        "Dell Inspiron 3520",
        specs="<p>Intel Core i5-1135G7, 8GB DDR4 RAM, 512GB NVMe SSD, 15.6 inch FHD</p>",
        condition=Condition.REFURBISHED,
    )

    url = build_inquiry_mailto(product, "sales@example.com")

    parts = urlsplit(url)
    assert parts.scheme == "mailto"
    assert parts.path == "sales@example.com"
    query = parse_qs(parts.query)
    assert query["subject"] == ["Inquiry for Product: Dell Inspiron 3520"]

    body = query["body"][0]
    assert "Name: Dell Inspiron 3520\n" in body
    assert "Condition: refurbished\n" in body
    assert "Spec Summary: Intel Core i5-1135G7, 8GB DDR4 RAM, 512GB NVMe SSD...\n" in body
    assert "<p>" not in body


def test_mailto_escapes_ampersands(make_product):
    url = build_inquiry_mailto(make_product("Cable & adapter kit"), "sales@example.com")
    query = parse_qs(urlsplit(url).query)
    assert query["subject"] == ["Inquiry for Product: Cable & adapter kit"]


@pytest.mark.parametrize("email", [None, "", "   "])
def test_no_mailto_without_shop_email(make_product, email):
    assert build_inquiry_mailto(make_product("Dell 3420"), email) is None
