#!/usr/bin/env python3
"""Tests for the budget plan lifecycle."""

import pytest

from budget_ledger.catalog import parse_catalog
from budget_ledger.core.errors import (
    InvalidAmountError,
    InvalidPercentageError,
    PlanLockedError,
    UnknownCategoryError,
)
from budget_ledger.core.money import Money
from budget_ledger.ledger import BudgetPlanController, FundFlowManager, PlanState, preview, validate_percentages
from budget_ledger.store import LedgerSession, MemoryDocumentStore


@pytest.fixture
def funded(session, funds):
    """A ledger with 5000 income and a 2000 completed-then-spent fund (remaining 3000)."""
    funds.add_income(Money.parse(5000), "paycheck")
    fund = session.add_sinking_fund("Laptop", Money.parse(2000))
    funds.allocate_to_sinking_fund(fund.id, Money.parse(2000))
    funds.spend_from_sinking_fund(fund.id, "shopping")
    return session


@pytest.mark.ledger
class TestPercentageValidation:
    """Test plan validation rules."""

    def test_valid_plan(self, catalog):
        validate_percentages({"food": 33.3, "transport": 33.3, "housing": 33.4}, catalog)

    def test_total_over_100(self, catalog):
        with pytest.raises(InvalidPercentageError):
            validate_percentages({"food": 60, "transport": 50}, catalog)

    @pytest.mark.parametrize("value", [-1, 100.5, float("nan"), "50", True])
    def test_out_of_range_or_non_numeric(self, catalog, value):
        with pytest.raises(InvalidPercentageError):
            validate_percentages({"food": value}, catalog)

    def test_unknown_category(self, catalog):
        with pytest.raises(UnknownCategoryError):
            validate_percentages({"gadgets": 10}, catalog)

    def test_savings_not_allowed_in_plan(self, catalog):
        with pytest.raises(InvalidPercentageError):
            validate_percentages({"savings": 10}, catalog)

    def test_preview(self):
        amounts = preview({"food": 50, "transport": 25}, Money.parse(3000))
        assert amounts == {"food": Money.parse(1500), "transport": Money.parse(750)}


@pytest.mark.ledger
class TestPlanLifecycle:
    """Test save / lock / reset."""

    def test_save_locks_plan(self, funded, planner):
        """save({food:50, transport:50}, 3000) -> 1500 each, locked at 3000."""
        assert planner.state() == PlanState.NO_PLAN
        assert planner.planning_balance() == Money.parse(3000)

        saved = planner.save({"food": 50, "transport": 50}, Money.parse(3000))

        food = funded.get_budget("food")
        transport = funded.get_budget("transport")
        assert (food.percentage, food.amount) == (50.0, Money.parse(1500))
        assert (transport.percentage, transport.amount) == (50.0, Money.parse(1500))
        assert funded.get_settings().balance_at_budget_set == Money.parse(3000)
        assert planner.state() == PlanState.LOCKED
        assert len(saved) == len(funded.catalog.spend_categories())
        assert funded.get_budget("coffee").amount == Money.zero()

    def test_locked_plan_rejects_category_edits(self, funded, planner):
        planner.save({"food": 50, "transport": 50}, Money.parse(3000))

        with pytest.raises(PlanLockedError):
            planner.set_category_budget("food", 60)
        assert funded.get_budget("food").percentage == 50.0

    def test_locked_plan_rejects_second_save(self, funded, planner):
        planner.save({"food": 50}, Money.parse(3000))
        with pytest.raises(PlanLockedError):
            planner.save({"food": 10}, Money.parse(3000))

    def test_savings_editable_while_locked(self, funded, planner):
        planner.save({"food": 50, "transport": 50}, Money.parse(3000))

        budget = planner.set_category_budget("savings", None, Money.parse(500))
        assert budget.amount == Money.parse(500)
        assert funded.get_budget("savings").amount == Money.parse(500)

    def test_locked_balance_does_not_drift(self, funded, planner):
        planner.save({"food": 50}, Money.parse(3000))
        funded.add_expense(Money.parse(1000), "food")
        assert planner.planning_balance() == Money.parse(3000)

    def test_reset_unlocks_and_zeroes(self, funded, planner):
        """reset() -> snapshot cleared, budgets zeroed, edits allowed again."""
        planner.save({"food": 50, "transport": 50}, Money.parse(3000))

        planner.reset()

        assert planner.state() == PlanState.NO_PLAN
        assert funded.get_settings().balance_at_budget_set == Money.zero()
        for category_id in ("food", "transport"):
            budget = funded.get_budget(category_id)
            assert budget.percentage == 0.0
            assert budget.amount == Money.zero()

        edited = planner.set_category_budget("food", 10)
        assert edited.amount == Money.parse(300)

    def test_reset_is_idempotent(self, funded, planner):
        planner.reset()
        planner.reset()
        assert planner.state() == PlanState.NO_PLAN

    def test_reset_keeps_savings(self, funded, planner, funds):
        funds.set_savings_budget(Money.parse(400))
        planner.save({"food": 10}, Money.parse(2600))
        planner.reset()
        assert funded.get_budget("savings").amount == Money.parse(400)

    def test_reset_keeps_savings_with_custom_catalog(self, clock):
        """Test a YAML catalog that omits the savings category still keeps savings out of reset."""
        catalog = parse_catalog({"categories": [{"id": "food", "name": "Food", "type": "need"}]})
        session = LedgerSession(MemoryDocumentStore(), "tester", catalog=catalog, clock=clock)
        funds = FundFlowManager(session)
        planner = BudgetPlanController(session)

        funds.add_income(Money.parse(5000), "paycheck")
        funds.set_savings_budget(Money.parse(1000))
        planner.save({"food": 50}, Money.parse(4000))
        planner.reset()

        assert session.get_budget("savings").amount == Money.parse(1000)
        assert session.get_budget("food").amount == Money.zero()

    def test_save_requires_positive_snapshot(self, planner):
        with pytest.raises(InvalidAmountError):
            planner.save({"food": 50}, Money.zero())
        assert planner.state() == PlanState.NO_PLAN


@pytest.mark.ledger
class TestCategoryBudgetEdits:
    """Test single-category edits while unlocked."""

    def test_amount_from_percentage(self, funded, planner):
        budget = planner.set_category_budget("health", 25)
        assert budget.amount == Money.parse(750)
        assert budget.percentage == 25.0

    def test_explicit_amount(self, funded, planner):
        budget = planner.set_category_budget("health", None, Money.parse(123))
        assert budget.amount == Money.parse(123)
        assert budget.percentage is None

    def test_negative_balance_clamps_to_zero(self, session, planner):
        session.add_expense(Money.parse(100), "food")
        assert planner.set_category_budget("health", 50).amount == Money.zero()

    def test_savings_requires_amount(self, planner):
        with pytest.raises(InvalidPercentageError):
            planner.set_category_budget("savings", 10)

    def test_unknown_category(self, planner):
        with pytest.raises(UnknownCategoryError):
            planner.set_category_budget("gadgets", 10)
