"""
Core Utilities Package

Shared primitives used across the ledger.

This package provides:
- Currency handling with integer arithmetic for precision
- The Money value type
- The ledger error taxonomy
- Configuration management for environment-specific settings
"""

from .config import (
    Config,
    Environment,
    get_config,
    reload_config,
)
from .currency import (
    DEFAULT_CURRENCY_SYMBOL,
    cents_to_major_str,
    format_cents,
    parse_amount_to_cents,
    percentage_of_cents,
)
from .errors import (
    CatalogError,
    ConflictError,
    EmptySuggestionError,
    FundTargetNotMetError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidPercentageError,
    LedgerError,
    NotFoundError,
    PlanLockedError,
    StoreError,
    UnknownCategoryError,
)
from .money import Money

__all__ = [
    "DEFAULT_CURRENCY_SYMBOL",
    "CatalogError",
    # Configuration
    "Config",
    # Errors
    "ConflictError",
    "EmptySuggestionError",
    "Environment",
    "FundTargetNotMetError",
    "InsufficientBalanceError",
    "InvalidAmountError",
    "InvalidPercentageError",
    "LedgerError",
    "Money",
    "NotFoundError",
    "PlanLockedError",
    "StoreError",
    "UnknownCategoryError",
    # Currency utilities
    "cents_to_major_str",
    "format_cents",
    "get_config",
    "parse_amount_to_cents",
    "percentage_of_cents",
    "reload_config",
]
