#!/usr/bin/env python3
"""
Ledger Store Adapter

``LedgerSession`` is the explicit per-user context threaded into every
engine call. It knows where a user's documents live in the DocumentStore,
converts documents to typed models, offers the plain CRUD operations that
need no cross-document invariant, and runs atomic units of work through
``run_atomic``.

Layout of a user's namespace::

    users/{uid}                        settings document
    users/{uid}/expenses/{id}
    users/{uid}/income/{id}
    users/{uid}/budgets/{category_id}
    users/{uid}/sinking_funds/{id}
    users/{uid}/recurring_expenses/{id}
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, TypeVar

from ..catalog import CategoryCatalog, default_catalog
from ..core.errors import NotFoundError
from ..core.models import (
    BudgetTarget,
    CategoryBudget,
    Expense,
    ExpenseDraft,
    Income,
    LedgerSnapshot,
    RecurringExpense,
    Settings,
    SinkingFund,
)
from ..core.money import Money, require_non_negative, require_positive
from .base import DocumentPath, DocumentStore
from .transaction import Transaction, retry_on_conflict

logger = logging.getLogger(__name__)

T = TypeVar("T")

USERS = "users"
EXPENSES = "expenses"
INCOME = "income"
BUDGETS = "budgets"
SINKING_FUNDS = "sinking_funds"
RECURRING_EXPENSES = "recurring_expenses"


def _settings_fields(**fields: Any) -> dict[str, Any]:
    """Serialize typed settings fields to document fields."""
    data: dict[str, Any] = {}
    for name, value in fields.items():
        if name in ("allowance", "balance_at_budget_set"):
            data[name] = value.to_cents()
        elif name == "budget_target":
            data[name] = value.to_dict()
        else:
            raise TypeError(f"Unknown settings field: {name}")
    return data


class _Paths:
    """Path arithmetic shared by the session and transaction views."""

    user_id: str

    @property
    def settings_path(self) -> DocumentPath:
        return (USERS, self.user_id)

    def collection(self, name: str) -> DocumentPath:
        return (USERS, self.user_id, name)

    def doc_path(self, name: str, doc_id: str) -> DocumentPath:
        return (USERS, self.user_id, name, doc_id)


class TransactionView(_Paths):
    """
    Typed reads and writes over one open transaction.

    Every read goes to the transaction, so values are authoritative for the
    unit of work and are validated again at commit.
    """

    def __init__(self, txn: Transaction, session: "LedgerSession"):
        self.txn = txn
        self.session = session
        self.user_id = session.user_id

    # Reads

    def settings(self) -> Settings:
        return Settings.from_dict(self.txn.get(self.settings_path))

    def expenses(self) -> list[Expense]:
        return [Expense.from_dict(i, d) for i, d in self.txn.list(self.collection(EXPENSES))]

    def incomes(self) -> list[Income]:
        return [Income.from_dict(i, d) for i, d in self.txn.list(self.collection(INCOME))]

    def budgets(self) -> list[CategoryBudget]:
        return [CategoryBudget.from_dict(i, d) for i, d in self.txn.list(self.collection(BUDGETS))]

    def sinking_funds(self) -> list[SinkingFund]:
        return [SinkingFund.from_dict(i, d) for i, d in self.txn.list(self.collection(SINKING_FUNDS))]

    def recurring_expenses(self) -> list[RecurringExpense]:
        return [RecurringExpense.from_dict(i, d) for i, d in self.txn.list(self.collection(RECURRING_EXPENSES))]

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            settings=self.settings(),
            expenses=tuple(self.expenses()),
            incomes=tuple(self.incomes()),
            budgets=tuple(self.budgets()),
            sinking_funds=tuple(self.sinking_funds()),
            recurring_expenses=tuple(self.recurring_expenses()),
        )

    def balance_snapshot(self) -> LedgerSnapshot:
        """Snapshot of just the documents the remaining balance depends on."""
        return LedgerSnapshot(
            settings=self.settings(),
            expenses=tuple(self.expenses()),
            budgets=tuple(self.budgets()),
            sinking_funds=tuple(self.sinking_funds()),
        )

    def get_income(self, income_id: str) -> Income | None:
        data = self.txn.get(self.doc_path(INCOME, income_id))
        return Income.from_dict(income_id, data) if data is not None else None

    def get_sinking_fund(self, fund_id: str) -> SinkingFund | None:
        data = self.txn.get(self.doc_path(SINKING_FUNDS, fund_id))
        return SinkingFund.from_dict(fund_id, data) if data is not None else None

    def require_sinking_fund(self, fund_id: str) -> SinkingFund:
        fund = self.get_sinking_fund(fund_id)
        if fund is None:
            raise NotFoundError(f"Sinking fund not found: {fund_id}", path=self.doc_path(SINKING_FUNDS, fund_id))
        return fund

    def get_budget(self, category_id: str) -> CategoryBudget | None:
        data = self.txn.get(self.doc_path(BUDGETS, category_id))
        return CategoryBudget.from_dict(category_id, data) if data is not None else None

    def get_recurring_expense(self, recurring_id: str) -> RecurringExpense | None:
        data = self.txn.get(self.doc_path(RECURRING_EXPENSES, recurring_id))
        return RecurringExpense.from_dict(recurring_id, data) if data is not None else None

    # Writes

    def write_settings(self, **fields: Any) -> None:
        self.txn.set(self.settings_path, _settings_fields(**fields), merge=True)

    def add_expense(self, amount: Money, category_id: str, notes: str, date: datetime) -> Expense:
        expense = Expense(
            id=self.session.store.new_id(),
            amount=amount,
            category_id=category_id,
            notes=notes,
            date=date,
        )
        self.txn.set(self.doc_path(EXPENSES, expense.id), expense.to_dict())
        return expense

    def add_income(self, amount: Money, source: str, date: datetime) -> Income:
        income = Income(id=self.session.store.new_id(), amount=amount, source=source, date=date)
        self.txn.set(self.doc_path(INCOME, income.id), income.to_dict())
        return income

    def put_budget(self, budget: CategoryBudget) -> None:
        self.txn.set(self.doc_path(BUDGETS, budget.category_id), budget.to_dict(), merge=True)

    def put_sinking_fund(self, fund: SinkingFund) -> None:
        self.txn.set(self.doc_path(SINKING_FUNDS, fund.id), fund.to_dict())

    def put_recurring_expense(self, recurring: RecurringExpense) -> None:
        self.txn.set(self.doc_path(RECURRING_EXPENSES, recurring.id), recurring.to_dict())

    def delete_income(self, income_id: str) -> None:
        self.txn.delete(self.doc_path(INCOME, income_id))

    def delete_sinking_fund(self, fund_id: str) -> None:
        self.txn.delete(self.doc_path(SINKING_FUNDS, fund_id))


class LedgerSession(_Paths):
    """
    One user's view of the ledger store.

    Args:
        store: Backing DocumentStore
        user_id: Stable user identifier from the identity provider
        catalog: Category catalog (defaults to the built-in categories)
        clock: Callable returning "now" (injectable for tests)
    """

    def __init__(
        self,
        store: DocumentStore,
        user_id: str,
        catalog: CategoryCatalog | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        if not user_id or "/" in user_id:
            raise ValueError(f"Invalid user id: {user_id!r}")
        self.store = store
        self.user_id = user_id
        self.catalog = catalog if catalog is not None else default_catalog()
        self.clock = clock or datetime.now

    def now(self) -> datetime:
        return self.clock()

    # Atomic units

    def run_atomic(self, fn: Callable[[TransactionView], T]) -> T:
        """
        Run ``fn`` inside one transaction and commit.

        Any exception raised by ``fn`` discards the transaction; a
        ConflictError at commit means nothing was applied. Neither is
        retried here.
        """
        txn = self.store.transaction()
        try:
            result = fn(TransactionView(txn, self))
        except BaseException:
            txn.discard()
            raise
        txn.commit()
        return result

    def snapshot(self) -> LedgerSnapshot:
        """Consistent snapshot of all collections and settings."""
        return retry_on_conflict(lambda: self.run_atomic(lambda view: view.snapshot()))

    # Settings

    def get_settings(self) -> Settings:
        return Settings.from_dict(self.store.get(self.settings_path))

    def update_settings(self, **fields: Any) -> Settings:
        """Merge typed fields (allowance, budget_target, balance_at_budget_set) into settings."""
        self.store.set(self.settings_path, _settings_fields(**fields), merge=True)
        return self.get_settings()

    def set_allowance(self, amount: Money) -> Settings:
        """
        Overwrite the allowance directly.

        This bypasses the income log, so afterwards the allowance no longer
        has to equal the sum of income records.
        """
        require_non_negative(amount, "Allowance")
        logger.warning("Allowance for %s overwritten to %s outside the income log", self.user_id, amount)
        return self.update_settings(allowance=amount)

    def set_budget_target(self, target: BudgetTarget) -> Settings:
        require_non_negative(target.amount, "Budget target")
        return self.update_settings(budget_target=target)

    # Expenses

    def add_expense(self, amount: Money, category_id: str, notes: str = "", date: datetime | None = None) -> Expense:
        return self.add_expenses([ExpenseDraft(amount, category_id, notes, date)])[0]

    def add_expenses(self, drafts: Iterable[ExpenseDraft]) -> list[Expense]:
        """Insert several expenses in one batch."""
        batch = self.store.batch()
        created = []
        for draft in drafts:
            require_positive(draft.amount, "Expense amount")
            expense = Expense(
                id=self.store.new_id(),
                amount=draft.amount,
                category_id=draft.category_id,
                notes=draft.notes,
                date=draft.date or self.now(),
            )
            batch.set(self.doc_path(EXPENSES, expense.id), expense.to_dict())
            created.append(expense)
        batch.commit()
        return created

    def get_expense(self, expense_id: str) -> Expense | None:
        data = self.store.get(self.doc_path(EXPENSES, expense_id))
        return Expense.from_dict(expense_id, data) if data is not None else None

    def update_expense(self, expense: Expense) -> Expense:
        """
        Replace an existing expense.

        Raises:
            NotFoundError: If the expense does not exist
        """
        require_positive(expense.amount, "Expense amount")
        self.store.update(self.doc_path(EXPENSES, expense.id), expense.to_dict())
        return expense

    def delete_expense(self, expense_id: str) -> None:
        self.store.delete(self.doc_path(EXPENSES, expense_id))

    def delete_expenses(self, expense_ids: Iterable[str]) -> None:
        batch = self.store.batch()
        for expense_id in expense_ids:
            batch.delete(self.doc_path(EXPENSES, expense_id))
        batch.commit()

    def list_expenses(self) -> list[Expense]:
        """Expenses, newest first."""
        expenses = [Expense.from_dict(i, d) for i, d in self.store.list(self.collection(EXPENSES))]
        return sorted(expenses, key=lambda e: e.date, reverse=True)

    # Income (mutations go through FundFlowManager)

    def get_income(self, income_id: str) -> Income | None:
        data = self.store.get(self.doc_path(INCOME, income_id))
        return Income.from_dict(income_id, data) if data is not None else None

    def list_incomes(self) -> list[Income]:
        """Income records, newest first."""
        incomes = [Income.from_dict(i, d) for i, d in self.store.list(self.collection(INCOME))]
        return sorted(incomes, key=lambda i: i.date, reverse=True)

    # Category budgets (mutations go through FundFlowManager / BudgetPlanController)

    def get_budget(self, category_id: str) -> CategoryBudget | None:
        data = self.store.get(self.doc_path(BUDGETS, category_id))
        return CategoryBudget.from_dict(category_id, data) if data is not None else None

    def list_budgets(self) -> list[CategoryBudget]:
        return [CategoryBudget.from_dict(i, d) for i, d in self.store.list(self.collection(BUDGETS))]

    # Sinking funds

    def add_sinking_fund(self, name: str, target_amount: Money) -> SinkingFund:
        """Create an empty sinking fund."""
        if not name.strip():
            raise ValueError("Sinking fund name must not be empty")
        require_non_negative(target_amount, "Sinking fund target")
        fund = SinkingFund(id=self.store.new_id(), name=name.strip(), target_amount=target_amount)
        self.store.set(self.doc_path(SINKING_FUNDS, fund.id), fund.to_dict())
        logger.info("Created sinking fund '%s' with target %s", fund.name, target_amount)
        return fund

    def get_sinking_fund(self, fund_id: str) -> SinkingFund | None:
        data = self.store.get(self.doc_path(SINKING_FUNDS, fund_id))
        return SinkingFund.from_dict(fund_id, data) if data is not None else None

    def list_sinking_funds(self) -> list[SinkingFund]:
        return [SinkingFund.from_dict(i, d) for i, d in self.store.list(self.collection(SINKING_FUNDS))]

    # Recurring expenses (mutations go through RecurringExpenseManager)

    def get_recurring_expense(self, recurring_id: str) -> RecurringExpense | None:
        data = self.store.get(self.doc_path(RECURRING_EXPENSES, recurring_id))
        return RecurringExpense.from_dict(recurring_id, data) if data is not None else None

    def list_recurring_expenses(self) -> list[RecurringExpense]:
        items = [RecurringExpense.from_dict(i, d) for i, d in self.store.list(self.collection(RECURRING_EXPENSES))]
        return sorted(items, key=lambda r: r.next_due_date)
