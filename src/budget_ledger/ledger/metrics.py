#!/usr/bin/env python3
"""
Derived-Metrics Calculator

Pure functions over a LedgerSnapshot. Nothing here is cached or stored:
every figure is recomputed from the raw collections, so the conservation
identity

    remaining = allowance - total_spent - savings_budget - sinking_allocated

holds by construction for whatever snapshot is passed in.

Runway uses a fixed 30-day month when normalising a monthly target; this is
an approximation, not calendar arithmetic.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..catalog import SAVINGS_CATEGORY_ID, CategoryCatalog
from ..core.models import Expense, LedgerSnapshot
from ..core.money import Money


def spending_expenses(snapshot: LedgerSnapshot, catalog: CategoryCatalog) -> list[Expense]:
    """Expenses that count as spending (category classification is not savings)."""
    return [e for e in snapshot.expenses if not catalog.is_savings(e.category_id)]


def total_spent(snapshot: LedgerSnapshot, catalog: CategoryCatalog) -> Money:
    return Money.total(e.amount for e in spending_expenses(snapshot, catalog))


def total_savings_budget(snapshot: LedgerSnapshot) -> Money:
    budget = snapshot.budget_for(SAVINGS_CATEGORY_ID)
    return budget.amount if budget is not None else Money.zero()


def total_sinking_allocated(snapshot: LedgerSnapshot) -> Money:
    return Money.total(f.current_amount for f in snapshot.sinking_funds)


def remaining_balance(snapshot: LedgerSnapshot, catalog: CategoryCatalog) -> Money:
    """
    Spendable money left. May be negative (overdrawn); never clamped.
    """
    return (
        snapshot.settings.allowance
        - total_spent(snapshot, catalog)
        - total_savings_budget(snapshot)
        - total_sinking_allocated(snapshot)
    )


def daily_average_cents(snapshot: LedgerSnapshot, catalog: CategoryCatalog, now: datetime) -> float:
    """
    Average spending per day in cents.

    Days are counted from the earliest spending expense to ``now``,
    inclusive, with a minimum of one day. Zero when nothing was spent.
    """
    expenses = spending_expenses(snapshot, catalog)
    if not expenses:
        return 0.0

    earliest = min(e.date for e in expenses)
    days = max(1, (now - earliest).days + 1)
    return total_spent(snapshot, catalog).to_cents() / days


def daily_average(snapshot: LedgerSnapshot, catalog: CategoryCatalog, now: datetime) -> Money:
    """Daily average spend rounded to the cent (for display)."""
    return Money.from_cents(round(daily_average_cents(snapshot, catalog, now)))


def spend_rate_cents(snapshot: LedgerSnapshot, catalog: CategoryCatalog, now: datetime) -> float:
    """Effective daily spend rate: the budget target if set, else the daily average."""
    target_rate = snapshot.settings.budget_target.daily_rate_cents()
    if target_rate > 0:
        return target_rate
    return daily_average_cents(snapshot, catalog, now)


def survival_days(snapshot: LedgerSnapshot, catalog: CategoryCatalog, now: datetime) -> float:
    """
    Runway in days.

    Returns 0.0 when the remaining balance is not positive and ``math.inf``
    when the effective spend rate is zero.
    """
    remaining = remaining_balance(snapshot, catalog)
    if not remaining.is_positive():
        return 0.0

    rate = spend_rate_cents(snapshot, catalog, now)
    if rate <= 0:
        return math.inf
    return remaining.to_cents() / rate


def spent_for_category(snapshot: LedgerSnapshot, category_id: str) -> Money:
    """Total spent in one category, savings-classified categories included."""
    return Money.total(e.amount for e in snapshot.expenses if e.category_id == category_id)


def budget_for_category(snapshot: LedgerSnapshot, category_id: str) -> Money:
    budget = snapshot.budget_for(category_id)
    return budget.amount if budget is not None else Money.zero()


def planning_balance(snapshot: LedgerSnapshot, catalog: CategoryCatalog) -> Money:
    """
    Base that plan percentages apply to: the locked snapshot while a plan
    is locked, otherwise the live remaining balance.
    """
    if snapshot.settings.is_plan_locked:
        return snapshot.settings.balance_at_budget_set
    return remaining_balance(snapshot, catalog)


@dataclass(frozen=True)
class LedgerSummary:
    """All derived figures for one snapshot."""

    allowance: Money
    total_spent: Money
    total_savings_budget: Money
    total_sinking_allocated: Money
    remaining_balance: Money
    daily_average: Money
    survival_days: float
    balance_at_budget_set: Money
    planning_balance: Money
    is_plan_locked: bool

    def to_dict(self) -> dict[str, Any]:
        """Plain-number form; money in cents, unbounded runway as None."""
        return {
            "allowance": self.allowance.to_cents(),
            "total_spent": self.total_spent.to_cents(),
            "total_savings_budget": self.total_savings_budget.to_cents(),
            "total_sinking_allocated": self.total_sinking_allocated.to_cents(),
            "remaining_balance": self.remaining_balance.to_cents(),
            "daily_average": self.daily_average.to_cents(),
            "survival_days": None if math.isinf(self.survival_days) else self.survival_days,
            "balance_at_budget_set": self.balance_at_budget_set.to_cents(),
            "planning_balance": self.planning_balance.to_cents(),
            "is_plan_locked": self.is_plan_locked,
        }


def summarize(snapshot: LedgerSnapshot, catalog: CategoryCatalog, now: datetime) -> LedgerSummary:
    return LedgerSummary(
        allowance=snapshot.settings.allowance,
        total_spent=total_spent(snapshot, catalog),
        total_savings_budget=total_savings_budget(snapshot),
        total_sinking_allocated=total_sinking_allocated(snapshot),
        remaining_balance=remaining_balance(snapshot, catalog),
        daily_average=daily_average(snapshot, catalog, now),
        survival_days=survival_days(snapshot, catalog, now),
        balance_at_budget_set=snapshot.settings.balance_at_budget_set,
        planning_balance=planning_balance(snapshot, catalog),
        is_plan_locked=snapshot.settings.is_plan_locked,
    )
