#!/usr/bin/env python3
"""
AI Context Assembler

Shapes ledger state into the summaries sent to the external suggestion
service. Two requests exist:

- budget allocation: how to split the remaining balance across categories
- fund allocation: what to do with money accumulated by underspending

Amounts are emitted in major currency units (two decimals) since the
service consumes them as prose numbers. The service's reply is opaque
text; only emptiness is checked.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Protocol

from ..analysis import analyze_pace
from ..catalog import CategoryCatalog
from ..core.errors import EmptySuggestionError
from ..core.models import LedgerSnapshot
from ..core.money import Money
from ..ledger import metrics

BUDGET_ALLOCATION = "budget_allocation"
FUND_ALLOCATION = "fund_allocation"


def _major(amount: Money) -> float:
    return round(amount.to_cents() / 100, 2)


@dataclass(frozen=True)
class FundSummary:
    name: str
    target_amount: Money
    current_amount: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "targetAmount": _major(self.target_amount),
            "currentAmount": _major(self.current_amount),
        }


@dataclass(frozen=True)
class CategorySpendingSummary:
    name: str
    spent: Money
    type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "spent": _major(self.spent)}
        if self.type is not None:
            data["type"] = self.type
        return data


@dataclass(frozen=True)
class RecentExpenseSummary:
    name: str
    amount: Money
    date: str
    category_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": _major(self.amount),
            "date": self.date,
            "categoryName": self.category_name,
        }


@dataclass(frozen=True)
class AllocationContext:
    """Input for a budget allocation suggestion."""

    allowance: Money
    remaining_balance: Money
    savings_amount: Money
    sinking_funds: list[FundSummary] = field(default_factory=list)
    category_spending: list[CategorySpendingSummary] = field(default_factory=list)
    recent_expenses: list[RecentExpenseSummary] = field(default_factory=list)
    user_context: str | None = None

    kind = BUDGET_ALLOCATION

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind,
            "allowance": _major(self.allowance),
            "remainingBalance": _major(self.remaining_balance),
            "savingsAmount": _major(self.savings_amount),
            "sinkingFunds": [f.to_dict() for f in self.sinking_funds],
            "categorySpending": [c.to_dict() for c in self.category_spending],
            "recentExpenses": [e.to_dict() for e in self.recent_expenses],
        }
        if self.user_context:
            data["userContext"] = self.user_context
        return data


@dataclass(frozen=True)
class SuggestionContext:
    """Input for an accumulated-funds suggestion."""

    accumulated_funds: Money
    category_spending: list[CategorySpendingSummary] = field(default_factory=list)

    kind = FUND_ALLOCATION

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "accumulatedFunds": _major(self.accumulated_funds),
            "categorySpending": [c.to_dict() for c in self.category_spending],
        }


def _category_spending(
    snapshot: LedgerSnapshot, catalog: CategoryCatalog, with_type: bool
) -> list[CategorySpendingSummary]:
    return [
        CategorySpendingSummary(
            name=category.name,
            spent=metrics.spent_for_category(snapshot, category.id),
            type=category.classification.value if with_type else None,
        )
        for category in catalog.spend_categories()
    ]


def build_allocation_context(
    snapshot: LedgerSnapshot,
    catalog: CategoryCatalog,
    now: datetime,
    user_context: str | None = None,
    recent_days: int = 30,
) -> AllocationContext:
    """Summarize the ledger for a budget allocation request."""
    cutoff = now - timedelta(days=recent_days)
    recent = sorted((e for e in snapshot.expenses if e.date >= cutoff), key=lambda e: e.date, reverse=True)

    return AllocationContext(
        allowance=snapshot.settings.allowance,
        remaining_balance=metrics.remaining_balance(snapshot, catalog),
        savings_amount=metrics.total_savings_budget(snapshot),
        sinking_funds=[FundSummary(f.name, f.target_amount, f.current_amount) for f in snapshot.sinking_funds],
        category_spending=_category_spending(snapshot, catalog, with_type=True),
        recent_expenses=[
            RecentExpenseSummary(
                name=e.notes or "Expense",
                amount=e.amount,
                date=e.date.strftime("%Y-%m-%d"),
                category_name=catalog.get(e.category_id).name,
            )
            for e in recent
        ],
        user_context=(user_context or "").strip() or None,
    )


def build_suggestion_context(snapshot: LedgerSnapshot, catalog: CategoryCatalog, now: datetime) -> SuggestionContext:
    """Summarize accumulated funds (target accrued minus spent) and category spending."""
    pace = analyze_pace(snapshot, catalog, now)
    return SuggestionContext(
        accumulated_funds=pace.accumulated_funds,
        category_spending=_category_spending(snapshot, catalog, with_type=False),
    )


class SuggestionService(Protocol):
    """External text-generation service."""

    def suggest(self, context: dict[str, Any]) -> str:
        """Return formatted suggestion text for the given context."""
        ...


def request_suggestion(service: SuggestionService, context: AllocationContext | SuggestionContext) -> str:
    """
    Send a context to the suggestion service.

    Raises:
        EmptySuggestionError: If the service returns no text
    """
    text = service.suggest(context.to_dict())
    if not text or not text.strip():
        raise EmptySuggestionError(f"Suggestion service returned no text for a {context.kind} request")
    return text
