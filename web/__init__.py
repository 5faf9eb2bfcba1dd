"""Catalog search, browsing layout and JSON API."""
