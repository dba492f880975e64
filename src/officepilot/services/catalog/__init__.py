"""Catalog services."""

from .service import CatalogService, get_catalog, get_catalog_service

__all__ = ["CatalogService", "get_catalog", "get_catalog_service"]
