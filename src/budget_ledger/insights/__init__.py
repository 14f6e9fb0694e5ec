"""
Insights Package

Builds the ledger summaries consumed by the external suggestion service.
"""

from .context import (
    BUDGET_ALLOCATION,
    FUND_ALLOCATION,
    AllocationContext,
    CategorySpendingSummary,
    FundSummary,
    RecentExpenseSummary,
    SuggestionContext,
    SuggestionService,
    build_allocation_context,
    build_suggestion_context,
    request_suggestion,
)

__all__ = [
    "BUDGET_ALLOCATION",
    "FUND_ALLOCATION",
    "AllocationContext",
    "CategorySpendingSummary",
    "FundSummary",
    "RecentExpenseSummary",
    "SuggestionContext",
    "SuggestionService",
    "build_allocation_context",
    "build_suggestion_context",
    "request_suggestion",
]
