#!/usr/bin/env python3
"""
Core Data Models for the Budget Ledger

Ledger entities as stored in the per-user document namespace. Amounts are
held as Money and serialized as integer cents; timestamps are serialized as
ISO 8601 strings. Document ids are the store keys and are not repeated
inside the serialized payload.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .money import Money


class BudgetPeriod(Enum):
    """Period a budget target or recurring expense applies to."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def approx_days(self) -> int:
        """Length used to normalise a target to a daily rate (a month is 30 days)."""
        return {"daily": 1, "weekly": 7, "monthly": 30}[self.value]


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class BudgetTarget:
    """Spending target used for runway and pace calculations."""

    amount: Money = field(default_factory=Money.zero)
    period: BudgetPeriod = BudgetPeriod.DAILY

    @property
    def is_set(self) -> bool:
        return self.amount.is_positive()

    def daily_rate_cents(self) -> float:
        """Target normalised to cents per day (0.0 when no target is set)."""
        if not self.is_set:
            return 0.0
        return self.amount.to_cents() / self.period.approx_days

    def to_dict(self) -> dict[str, Any]:
        return {"amount": self.amount.to_cents(), "period": self.period.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "BudgetTarget":
        if not data:
            return cls()
        return cls(
            amount=Money.from_cents(data.get("amount", 0)),
            period=BudgetPeriod(data.get("period", BudgetPeriod.DAILY.value)),
        )


@dataclass(frozen=True)
class Settings:
    """
    Per-user settings singleton.

    ``balance_at_budget_set`` is the remaining-balance snapshot a budget
    plan was locked against; zero means no plan is locked.
    """

    allowance: Money = field(default_factory=Money.zero)
    budget_target: BudgetTarget = field(default_factory=BudgetTarget)
    balance_at_budget_set: Money = field(default_factory=Money.zero)

    @property
    def is_plan_locked(self) -> bool:
        return self.balance_at_budget_set.is_positive()

    def to_dict(self) -> dict[str, Any]:
        return {
            "allowance": self.allowance.to_cents(),
            "budget_target": self.budget_target.to_dict(),
            "balance_at_budget_set": self.balance_at_budget_set.to_cents(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Settings":
        if not data:
            return cls()
        return cls(
            allowance=Money.from_cents(data.get("allowance", 0)),
            budget_target=BudgetTarget.from_dict(data.get("budget_target")),
            balance_at_budget_set=Money.from_cents(data.get("balance_at_budget_set", 0)),
        )


@dataclass(frozen=True)
class Expense:
    """A spending record."""

    id: str
    amount: Money
    category_id: str
    notes: str
    date: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount.to_cents(),
            "category_id": self.category_id,
            "notes": self.notes,
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "Expense":
        return cls(
            id=doc_id,
            amount=Money.from_cents(data["amount"]),
            category_id=data["category_id"],
            notes=data.get("notes", ""),
            date=_parse_datetime(data["date"]),
        )


@dataclass(frozen=True)
class Income:
    """An income record; its amount is mirrored in Settings.allowance."""

    id: str
    amount: Money
    source: str
    date: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount.to_cents(),
            "source": self.source,
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "Income":
        return cls(
            id=doc_id,
            amount=Money.from_cents(data["amount"]),
            source=data.get("source", ""),
            date=_parse_datetime(data["date"]),
        )


@dataclass(frozen=True)
class CategoryBudget:
    """Budget for one category; the category id is the document key."""

    category_id: str
    amount: Money = field(default_factory=Money.zero)
    percentage: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"amount": self.amount.to_cents(), "percentage": self.percentage}

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "CategoryBudget":
        percentage = data.get("percentage")
        return cls(
            category_id=doc_id,
            amount=Money.from_cents(data.get("amount", 0)),
            percentage=float(percentage) if percentage is not None else None,
        )


@dataclass(frozen=True)
class SinkingFund:
    """A named, goal-targeted reserve."""

    id: str
    name: str
    target_amount: Money
    current_amount: Money = field(default_factory=Money.zero)

    @property
    def is_complete(self) -> bool:
        """True once the fund holds at least its target."""
        return self.current_amount >= self.target_amount

    @property
    def shortfall(self) -> Money:
        """Amount still needed to reach the target (never negative)."""
        missing = self.target_amount - self.current_amount
        return missing if missing.is_positive() else Money.zero()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "target_amount": self.target_amount.to_cents(),
            "current_amount": self.current_amount.to_cents(),
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "SinkingFund":
        return cls(
            id=doc_id,
            name=data.get("name", ""),
            target_amount=Money.from_cents(data.get("target_amount", 0)),
            current_amount=Money.from_cents(data.get("current_amount", 0)),
        )


@dataclass(frozen=True)
class RecurringExpense:
    """A bill or subscription logged as an expense each time it falls due."""

    id: str
    name: str
    amount: Money
    category_id: str
    period: BudgetPeriod
    next_due_date: datetime

    def is_due(self, now: datetime) -> bool:
        return self.next_due_date < now

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount.to_cents(),
            "category_id": self.category_id,
            "period": self.period.value,
            "next_due_date": self.next_due_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> "RecurringExpense":
        return cls(
            id=doc_id,
            name=data.get("name", ""),
            amount=Money.from_cents(data["amount"]),
            category_id=data["category_id"],
            period=BudgetPeriod(data.get("period", BudgetPeriod.MONTHLY.value)),
            next_due_date=_parse_datetime(data["next_due_date"]),
        )


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable view of one user's ledger at a point in time."""

    settings: Settings = field(default_factory=Settings)
    expenses: tuple[Expense, ...] = ()
    incomes: tuple[Income, ...] = ()
    budgets: tuple[CategoryBudget, ...] = ()
    sinking_funds: tuple[SinkingFund, ...] = ()
    recurring_expenses: tuple[RecurringExpense, ...] = ()

    def budget_for(self, category_id: str) -> CategoryBudget | None:
        for budget in self.budgets:
            if budget.category_id == category_id:
                return budget
        return None

    def sinking_fund(self, fund_id: str) -> SinkingFund | None:
        for fund in self.sinking_funds:
            if fund.id == fund_id:
                return fund
        return None


@dataclass(frozen=True)
class ExpenseDraft:
    """An expense that has not been stored yet (no id)."""

    amount: Money
    category_id: str
    notes: str = ""
    date: datetime | None = None
