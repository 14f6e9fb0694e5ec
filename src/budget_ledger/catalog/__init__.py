"""
Category Catalog Package

Static category definitions and their need / want / savings classification.
"""

from .loader import get_catalog, load_catalog, parse_catalog, reset_catalog
from .models import (
    DEFAULT_CATEGORIES,
    SAVINGS_CATEGORY_ID,
    UNCATEGORIZED,
    Category,
    CategoryCatalog,
    Classification,
    default_catalog,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "SAVINGS_CATEGORY_ID",
    "UNCATEGORIZED",
    "Category",
    "CategoryCatalog",
    "Classification",
    "default_catalog",
    "get_catalog",
    "load_catalog",
    "parse_catalog",
    "reset_catalog",
]
