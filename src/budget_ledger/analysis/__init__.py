"""
Analysis Package

Spending pace, trend series and category breakdowns over ledger snapshots.
"""

from .spending import (
    CategorySpending,
    PaceStatus,
    SpendingPace,
    analyze_pace,
    category_breakdown,
    spending_frame,
    spending_trend,
)

__all__ = [
    "CategorySpending",
    "PaceStatus",
    "SpendingPace",
    "analyze_pace",
    "category_breakdown",
    "spending_frame",
    "spending_trend",
]
