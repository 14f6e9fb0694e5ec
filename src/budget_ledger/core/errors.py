#!/usr/bin/env python3
"""
Ledger Error Taxonomy

Typed rejections raised by the ledger engine. Every rejection is raised
synchronously, either before any store write or from inside an atomic unit
that is then discarded, so callers never observe a partially applied change.
"""

from typing import Any


class LedgerError(Exception):
    """Base class for all ledger errors."""

    pass


class InvalidAmountError(LedgerError, ValueError):
    """Non-positive or malformed monetary input."""

    pass


class InvalidPercentageError(InvalidAmountError):
    """A budget percentage outside 0-100, or a plan allocating more than 100%."""

    pass


class InsufficientBalanceError(LedgerError):
    """An allocation or spend would overdraw a guarded quantity."""

    def __init__(self, message: str, requested: Any = None, available: Any = None):
        super().__init__(message)
        self.requested = requested
        self.available = available


class FundTargetNotMetError(InsufficientBalanceError):
    """A sinking fund was spent before reaching its target."""

    pass


class PlanLockedError(LedgerError):
    """A non-savings category budget edit was attempted while a plan is locked."""

    pass


class StoreError(LedgerError):
    """Failure in the backing document store."""

    pass


class ConflictError(StoreError):
    """Optimistic-concurrency collision; the whole operation may be retried."""

    pass


class NotFoundError(StoreError):
    """A referenced document does not exist (or vanished before commit)."""

    def __init__(self, message: str, path: tuple[str, ...] | None = None):
        super().__init__(message)
        self.path = path


class CatalogError(LedgerError, ValueError):
    """Invalid category catalog definition."""

    pass


class EmptySuggestionError(LedgerError):
    """The suggestion service returned no usable text."""

    pass


class UnknownCategoryError(LedgerError, ValueError):
    """A category id that the operation requires to exist in the catalog."""

    pass
