#!/usr/bin/env python3
"""
Tests for fund-flow operations.

Covers income conservation, the sinking fund allocation guard, sinking fund
liquidation and the savings budget.
"""

from datetime import datetime

import pytest

from budget_ledger.core.errors import (
    ConflictError,
    FundTargetNotMetError,
    InsufficientBalanceError,
    InvalidAmountError,
    NotFoundError,
)
from budget_ledger.core.money import Money
from budget_ledger.ledger import FundFlowManager, metrics
from budget_ledger.store import retry_on_conflict


def _remaining(session):
    return metrics.remaining_balance(session.snapshot(), session.catalog)


def _income_total(session):
    return Money.total(i.amount for i in session.list_incomes())


@pytest.mark.ledger
class TestIncome:
    """Test allowance conservation through income records."""

    def test_add_income(self, session, funds):
        """allowance=0; add 5000 -> allowance=5000, one income row."""
        record = funds.add_income(Money.parse(5000), "paycheck", datetime(2024, 3, 1))

        assert session.get_settings().allowance == Money.parse(5000)
        assert session.list_incomes() == [record]
        assert record.date == datetime(2024, 3, 1)

    def test_add_income_rejects_non_positive(self, session, funds):
        with pytest.raises(InvalidAmountError):
            funds.add_income(Money.zero(), "nothing")
        assert session.store.export_documents() == {}

    def test_allowance_tracks_income_sum(self, session, funds):
        """Test allowance equals the income total after every call."""
        a = funds.add_income(Money.parse(5000), "paycheck")
        b = funds.add_income(Money.parse("1250.50"), "freelance")
        assert session.get_settings().allowance == _income_total(session)

        removed = funds.delete_incomes([a.id, a.id, "missing"])
        assert removed == Money.parse(5000)
        assert session.get_settings().allowance == _income_total(session) == b.amount

        assert funds.delete_incomes(["missing"]) == Money.zero()
        assert session.get_settings().allowance == b.amount

    def test_conflict_leaves_nothing_applied(self, session, funds, monkeypatch):
        """Test a conflicting commit writes neither the income nor the allowance."""
        real_run_atomic = session.run_atomic

        def interfering(fn):
            def wrapped(view):
                result = fn(view)
                session.store.set(session.settings_path, {"allowance": 1}, merge=True)
                return result

            return real_run_atomic(wrapped)

        monkeypatch.setattr(session, "run_atomic", interfering)
        with pytest.raises(ConflictError):
            funds.add_income(Money.parse(100), "paycheck")

        assert session.list_incomes() == []
        assert session.get_settings().allowance == Money.from_cents(1)

    def test_concurrent_delete_is_not_deducted_twice(self, session, funds, monkeypatch):
        """Test a delete racing another delete of the same income conflicts, then retries to a no-op."""
        first = funds.add_income(Money.parse(5000), "paycheck")
        second = funds.add_income(Money.parse(1000), "freelance")
        real_run_atomic = session.run_atomic
        raced = []

        def interfering(fn):
            def wrapped(view):
                result = fn(view)
                if not raced:
                    raced.append(True)
                    funds.delete_incomes([first.id])
                return result

            return real_run_atomic(wrapped)

        monkeypatch.setattr(session, "run_atomic", interfering)
        with pytest.raises(ConflictError):
            funds.delete_incomes([first.id])
        assert session.get_settings().allowance == second.amount

        assert retry_on_conflict(lambda: funds.delete_incomes([first.id])) == Money.zero()
        assert session.get_settings().allowance == _income_total(session) == second.amount


@pytest.mark.ledger
class TestSinkingFundAllocation:
    """Test the allocation guard."""

    def test_allocation_exceeding_balance_is_rejected(self, session, funds):
        """allowance=5000; allocate 6000 -> InsufficientBalanceError, state unchanged."""
        funds.add_income(Money.parse(5000), "paycheck")
        fund = session.add_sinking_fund("Laptop", Money.parse(2000))
        before = session.store.export_documents()

        with pytest.raises(InsufficientBalanceError) as exc_info:
            funds.allocate_to_sinking_fund(fund.id, Money.parse(6000))

        assert exc_info.value.requested == Money.parse(6000)
        assert exc_info.value.available == Money.parse(5000)
        assert session.store.export_documents() == before

    def test_allocation_reduces_remaining_balance(self, session, funds):
        """allowance=5000; allocate 2000 -> fund holds 2000, remaining 3000."""
        funds.add_income(Money.parse(5000), "paycheck")
        fund = session.add_sinking_fund("Laptop", Money.parse(2000))

        updated = funds.allocate_to_sinking_fund(fund.id, Money.parse(2000))

        assert updated.current_amount == Money.parse(2000)
        assert updated.is_complete
        assert _remaining(session) == Money.parse(3000)

    def test_guard_accounts_for_spending_and_savings(self, session, funds):
        funds.add_income(Money.parse(5000), "paycheck")
        session.add_expense(Money.parse(1000), "food")
        funds.set_savings_budget(Money.parse(1500))
        fund = session.add_sinking_fund("Trip", Money.parse(9000))

        funds.allocate_to_sinking_fund(fund.id, Money.parse(2500))
        with pytest.raises(InsufficientBalanceError):
            funds.allocate_to_sinking_fund(fund.id, Money.from_cents(1))

    def test_allocation_to_missing_fund(self, funds):
        funds.add_income(Money.parse(5000), "paycheck")
        with pytest.raises(NotFoundError):
            funds.allocate_to_sinking_fund("missing", Money.parse(1))

    def test_allocation_rejects_non_positive(self, session, funds):
        fund = session.add_sinking_fund("Trip", Money.parse(10))
        with pytest.raises(InvalidAmountError):
            funds.allocate_to_sinking_fund(fund.id, Money.zero())

    def test_concurrent_expense_fails_allocation(self, session, funds, monkeypatch):
        """Test an expense committed mid-allocation conflicts, and the retry sees the lower balance."""
        funds.add_income(Money.parse(5000), "paycheck")
        fund = session.add_sinking_fund("Laptop", Money.parse(5000))
        real_run_atomic = session.run_atomic
        raced = []

        def interfering(fn):
            def wrapped(view):
                result = fn(view)
                if not raced:
                    raced.append(True)
                    session.add_expense(Money.parse(4000), "housing")
                return result

            return real_run_atomic(wrapped)

        monkeypatch.setattr(session, "run_atomic", interfering)
        with pytest.raises(ConflictError):
            funds.allocate_to_sinking_fund(fund.id, Money.parse(3000))
        assert session.get_sinking_fund(fund.id).current_amount == Money.zero()
        assert _remaining(session) == Money.parse(1000)

        with pytest.raises(InsufficientBalanceError) as exc_info:
            retry_on_conflict(lambda: funds.allocate_to_sinking_fund(fund.id, Money.parse(3000)))
        assert exc_info.value.available == Money.parse(1000)
        assert session.get_sinking_fund(fund.id).current_amount == Money.zero()


@pytest.mark.ledger
class TestSinkingFundSpend:
    """Test liquidating a completed fund."""

    def test_spend_keeps_remaining_balance(self, session, funds, clock):
        """Fund deleted, one expense for its amount, remaining stays 3000."""
        funds.add_income(Money.parse(5000), "paycheck")
        fund = session.add_sinking_fund("Laptop", Money.parse(2000))
        funds.allocate_to_sinking_fund(fund.id, Money.parse(2000))
        assert _remaining(session) == Money.parse(3000)

        expense = funds.spend_from_sinking_fund(fund.id, "shopping")

        assert session.get_sinking_fund(fund.id) is None
        assert session.list_expenses() == [expense]
        assert expense.amount == Money.parse(2000)
        assert expense.category_id == "shopping"
        assert expense.notes == "Purchase from sinking fund: Laptop"
        assert expense.date == clock.now
        assert _remaining(session) == Money.parse(3000)

    def test_spend_below_target_is_rejected(self, session, funds):
        funds.add_income(Money.parse(5000), "paycheck")
        fund = session.add_sinking_fund("Laptop", Money.parse(2000))
        funds.allocate_to_sinking_fund(fund.id, Money.parse(500))
        before = session.store.export_documents()

        with pytest.raises(FundTargetNotMetError):
            funds.spend_from_sinking_fund(fund.id, "shopping")
        assert session.store.export_documents() == before

    def test_spend_empty_fund_is_rejected(self, session, funds):
        fund = session.add_sinking_fund("Nothing", Money.zero())
        with pytest.raises(InsufficientBalanceError) as exc_info:
            funds.spend_from_sinking_fund(fund.id, "shopping")
        assert not isinstance(exc_info.value, FundTargetNotMetError)


@pytest.mark.ledger
class TestSinkingFundMaintenance:
    """Test manual edits, deletion and the savings budget."""

    def test_manual_balance_edit_is_logged(self, session, funds, caplog):
        fund = session.add_sinking_fund("Laptop", Money.parse(2000))
        edited = funds.update_sinking_fund(
            fund.id, name="Gaming laptop", target_amount=Money.parse(3000), current_amount=Money.parse(700)
        )

        assert session.get_sinking_fund(fund.id) == edited
        assert "manually changed" in caplog.text

    def test_rename_keeps_allocation_committed_in_between(self, session, funds, caplog):
        """Test a name-only edit merges onto the stored fund instead of an earlier read."""
        funds.add_income(Money.parse(5000), "paycheck")
        fund = session.add_sinking_fund("Laptop", Money.parse(3000))
        stale = session.get_sinking_fund(fund.id)
        funds.allocate_to_sinking_fund(fund.id, Money.parse(2000))

        renamed = funds.update_sinking_fund(stale.id, name="Work laptop")

        assert renamed.name == "Work laptop"
        assert renamed.current_amount == Money.parse(2000)
        assert renamed.target_amount == Money.parse(3000)
        assert session.get_sinking_fund(fund.id) == renamed
        assert "manually changed" not in caplog.text

    def test_update_missing_fund(self, funds):
        with pytest.raises(NotFoundError):
            funds.update_sinking_fund("missing", name="X")

    def test_update_rejects_negative_amount(self, session, funds):
        fund = session.add_sinking_fund("Laptop", Money.parse(2000))
        with pytest.raises(InvalidAmountError):
            funds.update_sinking_fund(fund.id, current_amount=Money.from_cents(-1))

    def test_delete_returns_money_to_balance(self, session, funds):
        funds.add_income(Money.parse(5000), "paycheck")
        fund = session.add_sinking_fund("Laptop", Money.parse(2000))
        funds.allocate_to_sinking_fund(fund.id, Money.parse(1200))

        funds.delete_sinking_fund(fund.id)
        assert _remaining(session) == Money.parse(5000)

    def test_savings_budget(self, session, funds):
        funds.add_income(Money.parse(5000), "paycheck")
        budget = funds.set_savings_budget(Money.parse(1000))

        assert budget.percentage is None
        assert session.get_budget("savings").amount == Money.parse(1000)
        assert _remaining(session) == Money.parse(4000)

        with pytest.raises(InvalidAmountError):
            funds.set_savings_budget(Money.from_cents(-1))


@pytest.mark.ledger
class TestSessionIsolation:
    """Test managers only touch their own user's documents."""

    def test_other_user_unaffected(self, store, session, funds):
        from budget_ledger.store import LedgerSession

        other = LedgerSession(store, "someone-else")
        FundFlowManager(other).add_income(Money.parse(10), "gift")
        funds.add_income(Money.parse(20), "paycheck")

        assert other.get_settings().allowance == Money.parse(10)
        assert session.get_settings().allowance == Money.parse(20)
