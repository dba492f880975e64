"""
Catalog service.

This module handles loading catalog.json, which defines per Office generation:
- The numeric version tag and default product identifier
- Edition names and their product identifiers
- Service-pack levels and their build numbers
- Default language, default products and installable components

plus the table of language codes and locale identifiers.
"""

import json
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from officepilot.exceptions import CatalogLoadError
from officepilot.models.catalog import Catalog


class CatalogService:
    """Service for loading the variant catalog."""

    def __init__(self, catalog_file: Path) -> None:
        """
        Initialize catalog service.

        Args:
            catalog_file: Path to catalog.json
        """
        self.catalog_file = catalog_file
        # Import logger lazily to avoid circular imports
        from officepilot.logger import get_logger

        self._logger = get_logger(__name__)
        self._catalog: Catalog = self._load()

    def _load(self) -> Catalog:
        """Load catalog from file.

        Raises:
            CatalogLoadError: If the file is missing, unreadable or malformed
        """
        try:
            with open(self.catalog_file, encoding="utf-8") as f:
                data = json.load(f)
            catalog = Catalog(**data)
        except (OSError, json.JSONDecodeError, PydanticValidationError, TypeError) as e:
            self._logger.error(f"Failed to load catalog: {e}", path=str(self.catalog_file))
            raise CatalogLoadError(str(self.catalog_file), str(e)) from e

        self._logger.info(
            f"Loaded catalog from {self.catalog_file}",
            versions=sorted(catalog.versions),
            languages=len(catalog.languages),
        )
        return catalog

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def reload(self) -> Catalog:
        """Reload catalog from file."""
        self._catalog = self._load()
        return self._catalog


@lru_cache
def get_catalog_service() -> CatalogService:
    """Get or initialize the catalog service (singleton).

    Uses ``paths.catalog_file`` from the application config when set, otherwise
    the packaged resources/catalog.json.
    """
    from officepilot.config import get_config
    from officepilot.utils import get_default_catalog_file

    config = get_config()
    return CatalogService(config.paths.catalog_file or get_default_catalog_file())


def get_catalog() -> Catalog:
    """Get the process-wide catalog."""
    return get_catalog_service().catalog
