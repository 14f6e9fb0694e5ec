#!/usr/bin/env python3
"""
Budget Plan Lifecycle Controller

A budget plan assigns each spending category a percentage of a balance.
Saving a plan locks it against a snapshot of the remaining balance, so the
category amounts stay fixed while new expenses change the live balance:

    NO_PLAN --save()--> LOCKED --reset()--> NO_PLAN

While LOCKED, non-savings category budgets are read-only. The savings
budget is outside this state machine and stays editable
(``FundFlowManager.set_savings_budget``).
"""

import logging
import math
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum

from ..catalog import CategoryCatalog
from ..core.errors import InvalidPercentageError, PlanLockedError, UnknownCategoryError
from ..core.models import CategoryBudget
from ..core.money import Money, require_non_negative, require_positive
from ..store.session import LedgerSession, TransactionView
from . import metrics
from .funds import FundFlowManager

logger = logging.getLogger(__name__)

Percentages = Mapping[str, float]


class PlanState(Enum):
    """Budget plan lifecycle states."""

    NO_PLAN = "no_plan"
    LOCKED = "locked"


def validate_percentage(category_id: str, percentage: float) -> None:
    """
    Check a single percentage is a finite number within 0-100.

    Raises:
        InvalidPercentageError: If it is not
    """
    if isinstance(percentage, bool) or not isinstance(percentage, (int, float, Decimal)):
        raise InvalidPercentageError(f"Percentage for '{category_id}' must be a number, got {percentage!r}")
    if isinstance(percentage, float) and not math.isfinite(percentage):
        raise InvalidPercentageError(f"Percentage for '{category_id}' must be finite")
    if percentage < 0 or percentage > 100:
        raise InvalidPercentageError(f"Percentage for '{category_id}' must be between 0 and 100, got {percentage}")


def validate_percentages(percentages: Percentages, catalog: CategoryCatalog) -> None:
    """
    Check a full plan: known spending categories, 0-100 each, at most 100 in total.

    The total is summed in Decimal so that e.g. 33.3 + 33.3 + 33.4 is exactly 100.

    Raises:
        UnknownCategoryError: For ids missing from the catalog
        InvalidPercentageError: For savings entries, out-of-range values or a total above 100
    """
    total = Decimal(0)
    for category_id, percentage in percentages.items():
        category = catalog.lookup(category_id)
        if category is None:
            raise UnknownCategoryError(f"Unknown category: {category_id}")
        if category.is_savings:
            raise InvalidPercentageError("The savings budget is set as an amount, not a plan percentage")
        validate_percentage(category_id, percentage)
        total += Decimal(str(percentage))

    if total > 100:
        raise InvalidPercentageError(f"Plan allocates {total}% of the balance; the maximum is 100%")


def preview(percentages: Percentages, balance: Money) -> dict[str, Money]:
    """Amounts each percentage would receive from ``balance`` (no validation, no writes)."""
    return {category_id: balance.percent(pct) for category_id, pct in percentages.items()}


class BudgetPlanController:
    """Plan lifecycle for one LedgerSession."""

    def __init__(self, session: LedgerSession):
        self.session = session

    def state(self) -> PlanState:
        settings = self.session.get_settings()
        return PlanState.LOCKED if settings.is_plan_locked else PlanState.NO_PLAN

    def planning_balance(self) -> Money:
        """The balance plan percentages are multiplied against right now."""
        return metrics.planning_balance(self.session.snapshot(), self.session.catalog)

    def save(self, percentages: Percentages, remaining_balance_snapshot: Money) -> list[CategoryBudget]:
        """
        Lock a plan against ``remaining_balance_snapshot``.

        Every spending category in the catalog gets a budget row; categories
        missing from ``percentages`` are saved at 0%.

        Raises:
            PlanLockedError: If a plan is already locked
            InvalidAmountError: If the snapshot is not positive
            InvalidPercentageError: If percentages are out of range or exceed 100 in total
            UnknownCategoryError: If a category id is not in the catalog
        """
        require_positive(remaining_balance_snapshot, "Plan balance snapshot")
        catalog = self.session.catalog
        validate_percentages(percentages, catalog)

        budgets = [
            CategoryBudget(
                category_id=category.id,
                amount=remaining_balance_snapshot.percent(percentages.get(category.id, 0)),
                percentage=float(percentages.get(category.id, 0)),
            )
            for category in catalog.spend_categories()
        ]

        def unit(view: TransactionView) -> list[CategoryBudget]:
            if view.settings().is_plan_locked:
                raise PlanLockedError("A budget plan is already locked; reset it before saving a new one")
            for budget in budgets:
                view.put_budget(budget)
            view.write_settings(balance_at_budget_set=remaining_balance_snapshot)
            return budgets

        saved = self.session.run_atomic(unit)
        logger.info("Budget plan locked against %s across %d categories", remaining_balance_snapshot, len(saved))
        return saved

    def reset(self) -> None:
        """
        Unlock the plan: clear the snapshot and zero every spending budget.

        Idempotent when no plan is locked.
        """
        catalog = self.session.catalog

        def unit(view: TransactionView) -> None:
            category_ids = {c.id for c in catalog.spend_categories()}
            category_ids.update(b.category_id for b in view.budgets() if not catalog.is_savings(b.category_id))
            for category_id in sorted(category_ids):
                view.put_budget(CategoryBudget(category_id=category_id, amount=Money.zero(), percentage=0.0))
            view.write_settings(balance_at_budget_set=Money.zero())

        self.session.run_atomic(unit)
        logger.info("Budget plan reset")

    def set_category_budget(
        self, category_id: str, percentage: float | None, amount: Money | None = None
    ) -> CategoryBudget:
        """
        Edit one category budget outside a full plan save.

        For spending categories the amount defaults to ``percentage`` of the
        planning balance. The savings category is amount-only and is
        delegated to ``FundFlowManager.set_savings_budget``.

        Raises:
            PlanLockedError: If a plan is locked and the category is not savings
            InvalidPercentageError: If the percentage is out of range
            UnknownCategoryError: If the category id is not in the catalog
        """
        catalog = self.session.catalog
        category = catalog.lookup(category_id)
        if category is None:
            raise UnknownCategoryError(f"Unknown category: {category_id}")

        if category.is_savings:
            if amount is None:
                raise InvalidPercentageError("The savings budget is set as an amount, not a percentage")
            return FundFlowManager(self.session).set_savings_budget(amount)

        if percentage is not None:
            validate_percentage(category_id, percentage)
        if amount is not None:
            require_non_negative(amount, "Category budget")

        def unit(view: TransactionView) -> CategoryBudget:
            snapshot = view.balance_snapshot()
            if snapshot.settings.is_plan_locked:
                logger.warning("Rejected edit of '%s' budget while plan is locked", category_id)
                raise PlanLockedError(f"Budget for '{category_id}' is locked until the plan is reset")

            if amount is not None:
                new_amount = amount
            elif percentage is not None:
                new_amount = metrics.planning_balance(snapshot, catalog).percent(percentage)
                if new_amount.is_negative():
                    new_amount = Money.zero()
            else:
                new_amount = Money.zero()
            budget = CategoryBudget(
                category_id=category_id,
                amount=new_amount,
                percentage=float(percentage) if percentage is not None else None,
            )
            view.put_budget(budget)
            return budget

        return self.session.run_atomic(unit)
