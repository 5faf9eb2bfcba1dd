"""Price labels and "Contact for Price" inquiry links for product cards."""

from decimal import Decimal
from typing import Optional
from urllib.parse import quote

from ingest.config import PRICE_SYMBOL, SPEC_PREVIEW_CHARS
from ingest.models import Product

__all__ = ["price_label", "build_inquiry_mailto"]


def price_label(product: Product) -> str:
    """'₹45,000' style label, or 'Contact for Price' when no price is set."""
    if product.price is None:
        return "Contact for Price"
    price = product.price
    if price == price.to_integral_value():
        price = price.quantize(Decimal(1))
    return f"{PRICE_SYMBOL}{price:,f}"


def build_inquiry_mailto(product: Product, shop_email: Optional[str]) -> Optional[str]:
    """mailto: link asking the shop for price and availability.

    Returns None when no shop email is configured.
    """
    if not shop_email or not shop_email.strip():
        return None

    subject = f"Inquiry for Product: {product.name}"
    body = (
        "Hi,\n\n"
        "I am interested in the following product:\n\n"
        f"Name: {product.name}\n"
        f"Condition: {product.condition.value}\n"
        f"Spec Summary: {product.specs.preview(SPEC_PREVIEW_CHARS)}...\n\n"
        "Please let me know the price and availability.\n\n"
        "Thanks!"
    )
    return f"mailto:{shop_email.strip()}?subject={quote(subject)}&body={quote(body)}"
