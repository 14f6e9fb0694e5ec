#!/usr/bin/env python3
"""
Recurring Expenses

Bills and subscriptions that fall due on a schedule. Logging a due item
inserts the expense and advances its next due date in the same atomic unit,
so a bill can never be logged twice for one period.
"""

import calendar
import logging
from datetime import datetime, timedelta

from ..core.errors import NotFoundError, UnknownCategoryError
from ..core.models import BudgetPeriod, Expense, RecurringExpense
from ..core.money import Money, require_positive
from ..store.session import RECURRING_EXPENSES, LedgerSession, TransactionView

logger = logging.getLogger(__name__)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the end of shorter months."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def next_occurrence(moment: datetime, period: BudgetPeriod) -> datetime:
    """The due date one period after ``moment``."""
    if period == BudgetPeriod.DAILY:
        return moment + timedelta(days=1)
    if period == BudgetPeriod.WEEKLY:
        return moment + timedelta(weeks=1)
    return add_months(moment, 1)


class RecurringExpenseManager:
    """Recurring expense schedule for one LedgerSession."""

    def __init__(self, session: LedgerSession):
        self.session = session

    def add(
        self,
        name: str,
        amount: Money,
        category_id: str,
        period: BudgetPeriod,
        next_due_date: datetime,
    ) -> RecurringExpense:
        """
        Schedule a recurring expense.

        Raises:
            InvalidAmountError: If amount <= 0
            UnknownCategoryError: If the category is unknown or is savings
        """
        if not name.strip():
            raise ValueError("Recurring expense name must not be empty")
        require_positive(amount, "Recurring expense amount")
        category = self.session.catalog.lookup(category_id)
        if category is None or category.is_savings:
            raise UnknownCategoryError(f"Not a spending category: {category_id}")

        recurring = RecurringExpense(
            id=self.session.store.new_id(),
            name=name.strip(),
            amount=amount,
            category_id=category_id,
            period=period,
            next_due_date=next_due_date,
        )
        self.session.run_atomic(lambda view: view.put_recurring_expense(recurring))
        logger.info("Scheduled %s recurring expense '%s' for %s", period.value, recurring.name, amount)
        return recurring

    def delete(self, recurring_id: str) -> None:
        self.session.store.delete(self.session.doc_path(RECURRING_EXPENSES, recurring_id))

    def due(self, now: datetime | None = None) -> list[RecurringExpense]:
        """Items whose next due date has passed, oldest first."""
        moment = now or self.session.now()
        return [r for r in self.session.list_recurring_expenses() if r.is_due(moment)]

    def log(self, recurring_id: str, now: datetime | None = None) -> Expense:
        """
        Record one occurrence as an expense and advance the schedule.

        Raises:
            NotFoundError: If the recurring expense does not exist
        """
        moment = now or self.session.now()

        def unit(view: TransactionView) -> Expense:
            recurring = view.get_recurring_expense(recurring_id)
            if recurring is None:
                raise NotFoundError(
                    f"Recurring expense not found: {recurring_id}",
                    path=view.doc_path(RECURRING_EXPENSES, recurring_id),
                )
            expense = view.add_expense(
                amount=recurring.amount,
                category_id=recurring.category_id,
                notes=recurring.name,
                date=moment,
            )
            advanced = RecurringExpense(
                id=recurring.id,
                name=recurring.name,
                amount=recurring.amount,
                category_id=recurring.category_id,
                period=recurring.period,
                next_due_date=next_occurrence(recurring.next_due_date, recurring.period),
            )
            view.put_recurring_expense(advanced)
            return expense

        expense = self.session.run_atomic(unit)
        logger.info("Logged recurring expense %s for %s", recurring_id, expense.amount)
        return expense
