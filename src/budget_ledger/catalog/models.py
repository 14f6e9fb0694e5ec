#!/usr/bin/env python3
"""
Category Catalog Models

Immutable lookup table mapping category id to classification. The ledger
only cares about classification (savings spending is excluded from the
spending total); names are carried for display and AI context.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from ..core.errors import CatalogError

SAVINGS_CATEGORY_ID = "savings"
UNCATEGORIZED_ID = "uncategorized"


class Classification(Enum):
    """Static per-category tag."""

    NEED = "need"
    WANT = "want"
    SAVINGS = "savings"


@dataclass(frozen=True)
class Category:
    """A spending (or savings) category."""

    id: str
    name: str
    classification: Classification

    @property
    def is_savings(self) -> bool:
        return self.classification == Classification.SAVINGS


UNCATEGORIZED = Category(id=UNCATEGORIZED_ID, name="Uncategorized", classification=Classification.WANT)
SAVINGS = Category(id=SAVINGS_CATEGORY_ID, name="Savings", classification=Classification.SAVINGS)


class CategoryCatalog:
    """
    Read-only category lookup.

    Unknown ids are not an error: ``get`` resolves them to the synthetic
    "Uncategorized" category so that expenses referencing a removed category
    still count as spending.

    The reserved savings category is always present; it is appended when
    the given categories leave it out.
    """

    def __init__(self, categories: Iterable[Category]):
        by_id: dict[str, Category] = {}
        for category in categories:
            if category.id in by_id:
                raise CatalogError(f"Duplicate category id: {category.id}")
            by_id[category.id] = category
        if SAVINGS_CATEGORY_ID not in by_id:
            by_id[SAVINGS_CATEGORY_ID] = SAVINGS
        elif not by_id[SAVINGS_CATEGORY_ID].is_savings:
            raise CatalogError(f"Reserved category '{SAVINGS_CATEGORY_ID}' must have type 'savings'")
        self._by_id = MappingProxyType(by_id)

    def lookup(self, category_id: str) -> Category | None:
        """Return the category, or None when the id is unknown."""
        return self._by_id.get(category_id)

    def get(self, category_id: str) -> Category:
        """Return the category, falling back to "Uncategorized"."""
        return self._by_id.get(category_id, UNCATEGORIZED)

    def classification_of(self, category_id: str) -> Classification:
        return self.get(category_id).classification

    def is_savings(self, category_id: str) -> bool:
        return self.get(category_id).is_savings

    def spend_categories(self) -> list[Category]:
        """Categories that take part in budget plans (everything but savings)."""
        return [c for c in self._by_id.values() if not c.is_savings]

    def __iter__(self) -> Iterator[Category]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def __repr__(self) -> str:
        return f"CategoryCatalog({list(self._by_id)!r})"


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category("food", "Food & Groceries", Classification.NEED),
    Category("housing", "Housing", Classification.NEED),
    Category("transport", "Transport", Classification.NEED),
    Category("health", "Health", Classification.NEED),
    Category("education", "Education", Classification.NEED),
    Category("shopping", "Shopping", Classification.WANT),
    Category("entertainment", "Entertainment", Classification.WANT),
    Category("coffee", "Coffee Shops", Classification.WANT),
    SAVINGS,
)


def default_catalog() -> CategoryCatalog:
    """The built-in category set."""
    return CategoryCatalog(DEFAULT_CATEGORIES)
