#!/usr/bin/env python3
"""
Spending Analysis Module

Period pace against the budget target, spending trend series and the
per-category breakdown, built on pandas.

Pace follows the dashboard semantics: the target accrues once per elapsed
period (days, ISO weeks or calendar months since the first expense,
inclusive) and is compared with everything spent so far, savings-category
expenses included. A 1% of target band counts as on track.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

import pandas as pd

from ..catalog import UNCATEGORIZED, Category, CategoryCatalog
from ..core.models import BudgetPeriod, Expense, LedgerSnapshot
from ..core.money import Money
from ..ledger import metrics

FRAME_COLUMNS = ["date", "amount", "category_id", "classification"]
TREND_FREQUENCIES = ("D", "W", "M")
ON_TRACK_BAND = 0.01


class PaceStatus(Enum):
    """Spending pace relative to the budget target."""

    OVERSPEND = "overspend"
    UNDERSPEND = "underspend"
    ON_TRACK = "on_track"
    NO_TARGET = "no_target"


@dataclass(frozen=True)
class SpendingPace:
    """Result of ``analyze_pace``."""

    period: BudgetPeriod | None
    target_amount: Money
    periods_elapsed: int
    spent_in_period: Money
    accumulated_funds: Money
    status: PaceStatus


@dataclass(frozen=True)
class CategorySpending:
    """Spent vs. budgeted for one category."""

    category: Category
    spent: Money
    budget: Money

    @property
    def remaining(self) -> Money:
        return self.budget - self.spent

    @property
    def is_over_budget(self) -> bool:
        return self.budget.is_positive() and self.spent > self.budget


def spending_frame(expenses: list[Expense] | tuple[Expense, ...], catalog: CategoryCatalog) -> pd.DataFrame:
    """Expenses as a DataFrame (amount in cents), sorted by date."""
    if not expenses:
        return pd.DataFrame(columns=FRAME_COLUMNS)

    df = pd.DataFrame(
        {
            "date": pd.to_datetime([e.date for e in expenses]),
            "amount": [e.amount.to_cents() for e in expenses],
            "category_id": [e.category_id for e in expenses],
            "classification": [catalog.classification_of(e.category_id).value for e in expenses],
        }
    )
    return df.sort_values("date").reset_index(drop=True)


def _months_between(start: datetime, end: datetime) -> int:
    """Whole calendar months from ``start`` to ``end``."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if (end.day, end.time()) < (start.day, start.time()):
        months -= 1
    return max(months, 0)


def _period_start(now: datetime, period: BudgetPeriod) -> datetime:
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == BudgetPeriod.DAILY:
        return day_start
    if period == BudgetPeriod.WEEKLY:
        # ISO weeks start on Monday
        return day_start - timedelta(days=day_start.weekday())
    return day_start.replace(day=1)


def analyze_pace(snapshot: LedgerSnapshot, catalog: CategoryCatalog, now: datetime) -> SpendingPace:
    """Compare spending so far with the target accrued over elapsed periods."""
    target = snapshot.settings.budget_target
    if not target.is_set:
        return SpendingPace(
            period=None,
            target_amount=Money.zero(),
            periods_elapsed=0,
            spent_in_period=Money.zero(),
            accumulated_funds=Money.zero(),
            status=PaceStatus.NO_TARGET,
        )

    df = spending_frame(snapshot.expenses, catalog)
    first = min([now] + [e.date for e in snapshot.expenses])
    elapsed = now - first

    if target.period == BudgetPeriod.DAILY:
        periods = elapsed.days + 1
    elif target.period == BudgetPeriod.WEEKLY:
        periods = (_period_start(now, target.period) - _period_start(first, target.period)).days // 7 + 1
    else:
        periods = _months_between(first, now) + 1

    spent_total = int(df["amount"].sum()) if not df.empty else 0
    accumulated = target.amount * periods - Money.from_cents(spent_total)

    start = _period_start(now, target.period)
    if not df.empty:
        if target.period == BudgetPeriod.MONTHLY:
            end = start.replace(year=start.year + 1, month=1) if start.month == 12 else start.replace(month=start.month + 1)
        else:
            end = start + timedelta(days=1 if target.period == BudgetPeriod.DAILY else 7)
        in_period = df[(df["date"] >= pd.Timestamp(start)) & (df["date"] < pd.Timestamp(end))]
        spent_in_period = int(in_period["amount"].sum())
    else:
        spent_in_period = 0

    band = target.amount.to_cents() * ON_TRACK_BAND
    if accumulated.to_cents() < -band:
        status = PaceStatus.OVERSPEND
    elif accumulated.to_cents() > band:
        status = PaceStatus.UNDERSPEND
    else:
        status = PaceStatus.ON_TRACK

    return SpendingPace(
        period=target.period,
        target_amount=target.amount,
        periods_elapsed=periods,
        spent_in_period=Money.from_cents(spent_in_period),
        accumulated_funds=accumulated,
        status=status,
    )


def spending_trend(
    expenses: list[Expense] | tuple[Expense, ...], catalog: CategoryCatalog, freq: str = "D"
) -> pd.Series:
    """
    Spending (savings excluded) per day, week or month in cents.

    The index is a PeriodIndex covering every period from the first to the
    last expense; periods without spending are zero.
    """
    if freq not in TREND_FREQUENCIES:
        raise ValueError(f"Unsupported trend frequency '{freq}', expected one of {TREND_FREQUENCIES}")

    df = spending_frame(expenses, catalog)
    df = df[df["classification"] != "savings"]
    if df.empty:
        return pd.Series(dtype="int64", name="spent")

    periods = df["date"].dt.to_period(freq)
    totals = df.groupby(periods)["amount"].sum()
    full_range = pd.period_range(periods.min(), periods.max(), freq=freq)
    return totals.reindex(full_range, fill_value=0).astype("int64").rename("spent")


def category_breakdown(snapshot: LedgerSnapshot, catalog: CategoryCatalog) -> list[CategorySpending]:
    """Spent vs. budget per spending category, largest spend first."""
    df = spending_frame(snapshot.expenses, catalog)
    spent_by_category: dict[str, int] = {}
    if not df.empty:
        spent_by_category = {str(k): int(v) for k, v in df.groupby("category_id")["amount"].sum().items()}

    rows = []
    seen = set()
    for category in catalog.spend_categories():
        seen.add(category.id)
        rows.append(
            CategorySpending(
                category=category,
                spent=Money.from_cents(spent_by_category.get(category.id, 0)),
                budget=metrics.budget_for_category(snapshot, category.id),
            )
        )

    # ids missing from the catalog are pooled under "Uncategorized"
    unknown_cents = sum(
        cents
        for category_id, cents in spent_by_category.items()
        if category_id not in seen and catalog.lookup(category_id) is None
    )
    if unknown_cents:
        rows.append(CategorySpending(category=UNCATEGORIZED, spent=Money.from_cents(unknown_cents), budget=Money.zero()))

    return sorted(rows, key=lambda row: row.spent.to_cents(), reverse=True)
