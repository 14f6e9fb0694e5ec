#!/usr/bin/env python3
"""
Category Catalog Loader

Loads a catalog override from YAML. The file format is::

    categories:
      - id: food
        name: Food & Groceries
        type: need
      - id: savings
        name: Savings
        type: savings

The catalog is loaded once per process and cached.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from ..core.config import get_config
from ..core.errors import CatalogError
from .models import SAVINGS_CATEGORY_ID, Category, CategoryCatalog, Classification, default_catalog

logger = logging.getLogger(__name__)

_catalog: CategoryCatalog | None = None


def parse_catalog(data: Any) -> CategoryCatalog:
    """
    Build a catalog from parsed YAML data.

    Raises:
        CatalogError: If the structure is invalid
    """
    if not isinstance(data, dict) or not isinstance(data.get("categories"), list):
        raise CatalogError("Catalog must be a mapping with a 'categories' list")

    categories = []
    for index, entry in enumerate(data["categories"]):
        if not isinstance(entry, dict):
            raise CatalogError(f"Category #{index} must be a mapping")

        category_id = str(entry.get("id", "")).strip()
        if not category_id:
            raise CatalogError(f"Category #{index} is missing an id")

        type_str = str(entry.get("type", "")).strip().lower()
        try:
            classification = Classification(type_str)
        except ValueError:
            raise CatalogError(f"Category '{category_id}' has unknown type '{type_str}'") from None

        if category_id == SAVINGS_CATEGORY_ID and classification != Classification.SAVINGS:
            raise CatalogError(f"Reserved category '{SAVINGS_CATEGORY_ID}' must have type 'savings'")

        categories.append(
            Category(
                id=category_id,
                name=str(entry.get("name") or category_id),
                classification=classification,
            )
        )

    return CategoryCatalog(categories)


def load_catalog(path: Path) -> CategoryCatalog:
    """Load a catalog from a YAML file."""
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid catalog YAML in {path}: {e}") from e

    catalog = parse_catalog(data)
    logger.info("Loaded %d categories from %s", len(catalog), path)
    return catalog


def get_catalog() -> CategoryCatalog:
    """Get the process-wide catalog (configured YAML file, else built-in)."""
    global _catalog
    if _catalog is None:
        catalog_file = get_config().catalog_file
        _catalog = load_catalog(catalog_file) if catalog_file else default_catalog()
    return _catalog


def reset_catalog() -> None:
    """Forget the cached catalog (useful for testing)."""
    global _catalog
    _catalog = None
