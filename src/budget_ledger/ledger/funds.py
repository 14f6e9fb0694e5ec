#!/usr/bin/env python3
"""
Fund-Flow Transaction Manager

Every operation that moves value between the income, spendable, savings and
sinking-fund pools runs as one atomic unit and derives its preconditions
from state read inside that unit, never from values the caller computed
earlier. Typed rejections are raised from inside the unit, which discards
it, so a rejected call leaves every document untouched.

Store conflicts propagate as ConflictError; retrying is the caller's
decision (see ``retry_on_conflict``).
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from ..catalog import SAVINGS_CATEGORY_ID
from ..core.errors import FundTargetNotMetError, InsufficientBalanceError
from ..core.models import CategoryBudget, Expense, Income, SinkingFund
from ..core.money import Money, require_non_negative, require_positive
from ..store.session import LedgerSession, TransactionView
from . import metrics

logger = logging.getLogger(__name__)


class FundFlowManager:
    """Atomic fund movements for one LedgerSession."""

    def __init__(self, session: LedgerSession):
        self.session = session

    def add_income(self, amount: Money, source: str, date: datetime | None = None) -> Income:
        """
        Record income and raise the allowance by the same amount.

        Raises:
            InvalidAmountError: If amount <= 0
        """
        require_positive(amount, "Income amount")
        when = date or self.session.now()

        def unit(view: TransactionView) -> Income:
            settings = view.settings()
            income = view.add_income(amount, source, when)
            view.write_settings(allowance=settings.allowance + amount)
            return income

        income = self.session.run_atomic(unit)
        logger.info("Added income %s from '%s'", amount, source)
        return income

    def delete_incomes(self, income_ids: Iterable[str]) -> Money:
        """
        Delete income records and lower the allowance by their total.

        Amounts come from the records as read inside the transaction. Ids
        that no longer exist are skipped.

        Returns:
            The total removed from the allowance
        """
        ids = list(dict.fromkeys(income_ids))

        def unit(view: TransactionView) -> Money:
            removed = Money.zero()
            for income_id in ids:
                income = view.get_income(income_id)
                if income is None:
                    logger.debug("Income %s already gone, skipping", income_id)
                    continue
                removed = removed + income.amount
                view.delete_income(income_id)

            if removed.is_positive():
                settings = view.settings()
                view.write_settings(allowance=settings.allowance - removed)
            return removed

        removed = self.session.run_atomic(unit)
        logger.info("Deleted %d income record(s), allowance reduced by %s", len(ids), removed)
        return removed

    def allocate_to_sinking_fund(self, fund_id: str, amount: Money) -> SinkingFund:
        """
        Move spendable money into a sinking fund.

        Only the fund's current amount changes; the money leaves the
        remaining balance through the sinking-fund term of the balance
        formula.

        Raises:
            InvalidAmountError: If amount <= 0
            NotFoundError: If the fund does not exist
            InsufficientBalanceError: If amount exceeds the remaining balance
        """
        require_positive(amount, "Allocation amount")
        catalog = self.session.catalog

        def unit(view: TransactionView) -> SinkingFund:
            fund = view.require_sinking_fund(fund_id)
            available = metrics.remaining_balance(view.balance_snapshot(), catalog)
            if amount > available:
                logger.warning("Rejected allocation of %s to '%s': only %s available", amount, fund.name, available)
                raise InsufficientBalanceError(
                    f"Cannot allocate {amount} to '{fund.name}': remaining balance is {available}",
                    requested=amount,
                    available=available,
                )
            updated = SinkingFund(
                id=fund.id,
                name=fund.name,
                target_amount=fund.target_amount,
                current_amount=fund.current_amount + amount,
            )
            view.put_sinking_fund(updated)
            return updated

        fund = self.session.run_atomic(unit)
        logger.info("Allocated %s to sinking fund '%s' (now %s)", amount, fund.name, fund.current_amount)
        return fund

    def spend_from_sinking_fund(self, fund_id: str, category_id: str) -> Expense:
        """
        Turn a completed sinking fund into an expense.

        Inserts an expense for the fund's full current amount and deletes
        the fund in the same unit, so the remaining balance is unchanged.

        Raises:
            NotFoundError: If the fund does not exist
            InsufficientBalanceError: If the fund holds nothing
            FundTargetNotMetError: If the fund is below its target
        """
        now = self.session.now()

        def unit(view: TransactionView) -> Expense:
            fund = view.require_sinking_fund(fund_id)
            if not fund.current_amount.is_positive():
                raise InsufficientBalanceError(
                    f"Sinking fund '{fund.name}' is empty",
                    requested=fund.current_amount,
                    available=fund.current_amount,
                )
            if not fund.is_complete:
                logger.warning("Rejected spend from '%s': %s short of target", fund.name, fund.shortfall)
                raise FundTargetNotMetError(
                    f"Sinking fund '{fund.name}' has {fund.current_amount} of its {fund.target_amount} target",
                    requested=fund.target_amount,
                    available=fund.current_amount,
                )
            expense = view.add_expense(
                amount=fund.current_amount,
                category_id=category_id,
                notes=f"Purchase from sinking fund: {fund.name}",
                date=now,
            )
            view.delete_sinking_fund(fund.id)
            return expense

        expense = self.session.run_atomic(unit)
        logger.info("Spent sinking fund %s as %s expense in '%s'", fund_id, expense.amount, category_id)
        return expense

    def update_sinking_fund(
        self,
        fund_id: str,
        name: str | None = None,
        target_amount: Money | None = None,
        current_amount: Money | None = None,
    ) -> SinkingFund:
        """
        Edit a sinking fund's name, target or current amount.

        Fields left as None keep the value read inside the transaction, so a
        rename never rewrites an amount allocated in the meantime. A given
        current amount is a manual correction and does not pass through the
        remaining-balance check of ``allocate_to_sinking_fund``.

        Raises:
            InvalidAmountError: If either amount is negative
            NotFoundError: If the fund does not exist
        """
        if target_amount is not None:
            require_non_negative(target_amount, "Sinking fund target")
        if current_amount is not None:
            require_non_negative(current_amount, "Sinking fund amount")
        if name is not None and not name.strip():
            raise ValueError("Sinking fund name must not be empty")

        def unit(view: TransactionView) -> SinkingFund:
            existing = view.require_sinking_fund(fund_id)
            if current_amount is not None and existing.current_amount != current_amount:
                logger.warning(
                    "Sinking fund '%s' balance manually changed from %s to %s without a balance check",
                    existing.name,
                    existing.current_amount,
                    current_amount,
                )
            updated = SinkingFund(
                id=existing.id,
                name=name.strip() if name is not None else existing.name,
                target_amount=target_amount if target_amount is not None else existing.target_amount,
                current_amount=current_amount if current_amount is not None else existing.current_amount,
            )
            view.put_sinking_fund(updated)
            return updated

        return self.session.run_atomic(unit)

    def delete_sinking_fund(self, fund_id: str) -> None:
        """
        Delete a sinking fund.

        No compensating write: its current amount simply stops being
        reserved and returns to the remaining balance.
        """
        self.session.run_atomic(lambda view: view.delete_sinking_fund(fund_id))
        logger.info("Deleted sinking fund %s", fund_id)

    def set_savings_budget(self, amount: Money) -> CategoryBudget:
        """
        Set the savings budget amount. Allowed whether or not a plan is locked.

        Raises:
            InvalidAmountError: If amount is negative
        """
        require_non_negative(amount, "Savings budget")
        budget = CategoryBudget(category_id=SAVINGS_CATEGORY_ID, amount=amount, percentage=None)
        self.session.run_atomic(lambda view: view.put_budget(budget))
        logger.info("Savings budget set to %s", amount)
        return budget
