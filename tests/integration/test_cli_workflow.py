#!/usr/bin/env python3
"""
Integration tests for ledger workflows through the CLI.

Every command opens the JSON ledger fresh, so these also exercise
persistence between invocations.
"""

import json
import re

import pytest
from click.testing import CliRunner

from budget_ledger.cli.main import main


def _id_after(prefix: str, output: str) -> str:
    match = re.search(prefix + r" (\w+):", output)
    assert match, output
    return match.group(1)


@pytest.mark.integration
class TestCLIWorkflows:
    """Test realistic command sequences."""

    def setup_method(self):
        self.runner = CliRunner()

    def invoke(self, *args, expect_ok=True):
        result = self.runner.invoke(main, list(args))
        if expect_ok:
            assert result.exit_code == 0, result.output
        return result

    def summary(self):
        return json.loads(self.invoke("summary", "--json").stdout)

    def test_income_lifecycle(self):
        """Test income raises and deletion lowers the allowance."""
        first = _id_after("Added income", self.invoke("income", "add", "5000", "--source", "Salary").output)
        self.invoke("income", "add", "1,250.50", "--source", "Freelance", "--date", "2024-03-01")
        assert self.summary()["allowance"] == 625050

        listing = self.invoke("income", "list").output
        assert "Salary" in listing and "2024-03-01" in listing

        result = self.invoke("income", "delete", first)
        assert "Removed ₱5,000.00 of income" in result.output
        assert self.summary()["allowance"] == 125050

    def test_sinking_fund_scenario(self):
        """Test allocate, guard and spend keep the remaining balance consistent."""
        self.invoke("income", "add", "5000", "--source", "paycheck")
        fund_id = _id_after("Created sinking fund", self.invoke("fund", "add", "Laptop", "--target", "2000").output)

        rejected = self.invoke("fund", "allocate", fund_id, "6000", expect_ok=False)
        assert rejected.exit_code == 1
        assert "remaining balance" in rejected.output

        result = self.invoke("fund", "allocate", fund_id, "2000")
        assert "(complete)" in result.output
        assert self.summary()["remaining_balance"] == 300000

        result = self.invoke("fund", "spend", fund_id, "--category", "shopping")
        assert "Purchase from sinking fund: Laptop" in result.output
        assert self.summary()["remaining_balance"] == 300000
        assert self.summary()["total_spent"] == 200000
        assert "No sinking funds" in self.invoke("fund", "list").output

    def test_fund_update_and_delete(self):
        fund_id = _id_after("Created sinking fund", self.invoke("fund", "add", "Trip", "--target", "900").output)

        result = self.invoke("fund", "update", fund_id, "--name", "Beach trip", "--amount", "100")
        assert "Updated Beach trip: ₱100.00 of ₱900.00" in result.output
        assert "₱800.00 to go" in self.invoke("fund", "list").output

        self.invoke("fund", "delete", fund_id)
        missing = self.invoke("fund", "update", fund_id, "--name", "x", expect_ok=False)
        assert missing.exit_code == 1
        assert "not found" in missing.output

    def test_fund_rename_keeps_saved_amount(self):
        self.invoke("income", "add", "1000", "--source", "paycheck")
        fund_id = _id_after("Created sinking fund", self.invoke("fund", "add", "Trip", "--target", "900").output)
        self.invoke("fund", "allocate", fund_id, "300")

        result = self.invoke("fund", "update", fund_id, "--target", "1200")
        assert "Updated Trip: ₱300.00 of ₱1,200.00" in result.output

    def test_plan_lifecycle(self):
        """Test save locks the plan until reset."""
        self.invoke("income", "add", "3000", "--source", "paycheck")

        dry = self.invoke("plan", "save", "food=50", "transport=25%", "--dry-run")
        assert "₱1,500.00" in dry.output and "nothing saved" in dry.output
        assert self.summary()["is_plan_locked"] is False

        result = self.invoke("plan", "save", "food=50", "transport=50")
        assert "Plan locked against ₱3,000.00" in result.output

        locked = self.invoke("plan", "set", "food", "--percent", "60", expect_ok=False)
        assert locked.exit_code == 1
        assert "locked" in locked.output

        assert "savings budget set" in self.invoke("savings", "set", "200").output.lower()

        shown = self.invoke("plan", "show").output
        assert "Plan: locked against ₱3,000.00" in shown
        assert "50%" in shown

        self.invoke("plan", "reset", "--yes")
        result = self.invoke("plan", "set", "food", "--percent", "10")
        assert "Budget for food set to ₱280.00" in result.output

    def test_plan_rejects_bad_allocations(self):
        self.invoke("income", "add", "1000", "--source", "paycheck")

        malformed = self.invoke("plan", "save", "food", expect_ok=False)
        assert malformed.exit_code == 2

        over = self.invoke("plan", "save", "food=80", "transport=30", expect_ok=False)
        assert over.exit_code == 1
        assert "100%" in over.output

    def test_expense_commands(self):
        self.invoke("expense", "add", "250", "--category", "food", "--notes", "Lunch", "--date", "2024-03-02")
        warned = self.invoke("expense", "add", "40", "--category", "gadgets")
        assert "Uncategorized" in warned.output

        listing = self.invoke("expense", "list", "--category", "food").output
        assert "Lunch" in listing and "gadgets" not in listing
        expense_id = listing.split()[0]

        self.invoke("expense", "delete", expense_id)
        assert self.summary()["total_spent"] == 4000

    def test_invalid_amount_is_usage_error(self):
        result = self.invoke("expense", "add", "lots", "--category", "food", expect_ok=False)
        assert result.exit_code == 2
        assert "Not a monetary amount" in result.output

        zero = self.invoke("expense", "add", "0", "--category", "food", expect_ok=False)
        assert zero.exit_code == 1
        assert "must be positive" in zero.output

    def test_recurring_commands(self):
        result = self.invoke(
            "recurring", "add", "Rent", "12000", "--category", "housing", "--next-due", "2020-01-31"
        )
        recurring_id = _id_after("Scheduled", result.output)

        assert "Rent" in self.invoke("recurring", "due").output
        logged = self.invoke("recurring", "log", recurring_id)
        assert "Logged expense" in logged.output
        assert "next 2020-02-29" in self.invoke("recurring", "list").output
        assert self.summary()["total_spent"] == 1200000

        savings = self.invoke(
            "recurring", "add", "Bad", "1", "--category", "savings", "--next-due", "2020-01-01", expect_ok=False
        )
        assert savings.exit_code == 1

    def test_target_and_allowance(self):
        result = self.invoke("target", "set", "300", "--period", "weekly")
        assert "Target set to ₱300.00 weekly" in result.output

        result = self.invoke("allowance", "set", "700", "--yes")
        assert "Allowance set to ₱700.00" in result.output

        data = self.summary()
        assert data["allowance"] == 70000
        # 700 / (300 / 7 per day)
        assert data["survival_days"] == pytest.approx(16.333, rel=1e-3)

    def test_insights_commands(self):
        self.invoke("income", "add", "5000", "--source", "paycheck")
        self.invoke("expense", "add", "120", "--category", "food", "--notes", "Groceries")

        context = json.loads(self.invoke("insights", "context", "--note", "new job").stdout)
        assert context["kind"] == "budget_allocation"
        assert context["remainingBalance"] == 4880.0
        assert context["userContext"] == "new job"
        assert context["recentExpenses"][0]["name"] == "Groceries"

        funds_context = json.loads(self.invoke("insights", "context", "--kind", "funds").stdout)
        assert funds_context["accumulatedFunds"] == 0.0

        assert "No spending target" in self.invoke("insights", "pace").output
        self.invoke("target", "set", "1000")
        assert "Status: underspend" in self.invoke("insights", "pace").output

        assert "Food & Groceries" in self.invoke("insights", "breakdown").output
        assert "₱120.00" in self.invoke("insights", "trend").output

    def test_custom_currency_symbol(self, monkeypatch):
        from budget_ledger.core.config import reload_config

        monkeypatch.setenv("LEDGER_CURRENCY_SYMBOL", "$")
        reload_config()

        result = self.invoke("income", "add", "10", "--source", "gift")
        assert "$10.00" in result.output
