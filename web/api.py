"""JSON API for catalog browsing, admin search and bulk import.

Public endpoints:
1. GET /api/categories - category list in catalog order
2. GET /api/products   - browsing layout (grouped by category, or a flat
   ranked list when a search query or condition filter is active)

Admin endpoints (HTTP Basic, see session.py):
3. GET /api/admin/products - fuzzy search over every product, including
   those without an image
4. POST /api/admin/import  - bulk import from a CSV, JSON or Excel upload
"""

import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from flask import Blueprint, Response, current_app, jsonify, request

from ingest.db import CatalogStore
from ingest.errors import CatalogImportError, StoreError
from ingest.importer import import_file
from ingest.models import Product

from .browse import FlatView, GroupedView, layout
from .catalog import search
from .config import DB_PATH, SEARCH_SCORE_CUTOFF, SHOP_EMAIL
from .inquiry import build_inquiry_mailto, price_label
from .session import SessionContext, admin_required

__all__ = ["api"]

logger = logging.getLogger(__name__)

# Create blueprint for API
api = Blueprint("api", __name__, url_prefix="/api")


def _get_store() -> CatalogStore:
    """Store for the configured database, schema created once per app."""
    db_path = current_app.config.get("CATALOG_DB_PATH", DB_PATH)
    store = current_app.extensions.get("catalog_store")
    if store is None or store.db_path != db_path:
        store = CatalogStore(db_path)
        current_app.extensions["catalog_store"] = store
    return store


def _product_to_dict(product: Product) -> Dict[str, Any]:
    data = product.to_dict()
    data["price_label"] = price_label(product)
    data["inquiry_url"] = None
    if product.price is None:
        shop_email = current_app.config.get("SHOP_EMAIL", SHOP_EMAIL)
        data["inquiry_url"] = build_inquiry_mailto(product, shop_email)
    return data


def _view_to_dict(view: Union[GroupedView, FlatView]) -> Dict[str, Any]:
    if isinstance(view, GroupedView):
        return {
            "kind": view.kind,
            "groups": [
                {
                    "name": group.name,
                    "category_id": group.category_id,
                    "products": [_product_to_dict(p) for p in group.products],
                }
                for group in view.groups
            ],
        }
    return {
        "kind": view.kind,
        "query": view.query,
        "filter": view.filter.value,
        "products": [_product_to_dict(p) for p in view.products],
    }


def _store_error(exc: StoreError) -> Tuple[Response, int]:
    logger.error("Catalog store error: %s", exc)
    return jsonify({"error": "Catalog is temporarily unavailable"}), 503


@api.route("/categories", methods=["GET"])
def list_categories() -> Union[Tuple[Response, int], Response]:
    """List product categories in catalog order."""
    try:
        categories = _get_store().list_categories()
    except StoreError as exc:
        return _store_error(exc)
    return jsonify({"categories": [c.to_dict() for c in categories]})


@api.route("/products", methods=["GET"])
def browse_products() -> Union[Tuple[Response, int], Response]:
    """Browsing layout.

    Query params:
        filter: 'all' (default), 'new' or 'refurbished'
        q: optional search text

    Response JSON:
        {"kind": "grouped", "groups": [{"name": ..., "products": [...]}, ...]}
        or
        {"kind": "flat", "query": ..., "filter": ..., "products": [...]}
    """
    try:
        store = _get_store()
        products = store.list_products()
        categories = store.list_categories()
    except StoreError as exc:
        return _store_error(exc)

    try:
        view = layout(
            products,
            active_filter=request.args.get("filter"),
            active_query=request.args.get("q", ""),
            categories=categories,
            score_cutoff=current_app.config.get("SEARCH_SCORE_CUTOFF", SEARCH_SCORE_CUTOFF),
        )
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(_view_to_dict(view))


@api.route("/admin/products", methods=["GET"])
@admin_required
def admin_products(session: SessionContext) -> Union[Tuple[Response, int], Response]:
    """Admin product list with fuzzy search (includes image-less products)."""
    try:
        products = _get_store().list_products()
    except StoreError as exc:
        return _store_error(exc)

    query = request.args.get("q", "")
    matches = search(
        query,
        products,
        score_cutoff=current_app.config.get("SEARCH_SCORE_CUTOFF", SEARCH_SCORE_CUTOFF),
    )
    return jsonify({
        "query": query,
        "total": len(products),
        "products": [_product_to_dict(p) for p in matches],
    })


@api.route("/admin/import", methods=["POST"])
@admin_required
def admin_import(session: SessionContext) -> Tuple[Response, int]:
    """Bulk import products from an uploaded file (multipart field 'file').

    Response JSON (201):
        {"imported_count": 1, "categories_created_count": 1,
         "skipped_count": 1, "errors": [...], "created_categories": [...],
         "message": "Successfully imported ..."}

    A fatal import error responds 422 with {"error": ..., "phase": ...}.
    """
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        return jsonify({"error": "No file uploaded"}), 400

    extension = Path(upload.filename).suffix
    file_bytes = upload.read()

    logger.info("Import of %s requested by %s", upload.filename, session.username)
    try:
        summary = import_file(file_bytes, extension, _get_store())
    except CatalogImportError as exc:
        return jsonify({"error": exc.user_message, "phase": exc.phase}), 422
    except StoreError as exc:
        return _store_error(exc)

    payload = summary.to_dict()
    payload["message"] = summary.describe()
    return jsonify(payload), 201
