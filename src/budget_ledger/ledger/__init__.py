"""
Ledger Engine Package

Derived metrics, atomic fund flows, the budget plan lifecycle and
recurring expenses, all operating on an explicit LedgerSession.

Example Usage:
    from budget_ledger.core.money import Money
    from budget_ledger.ledger import FundFlowManager
    from budget_ledger.store import LedgerSession, MemoryDocumentStore

    session = LedgerSession(MemoryDocumentStore(), "user-1")
    FundFlowManager(session).add_income(Money.parse("5000"), "paycheck")
"""

from . import metrics
from .funds import FundFlowManager
from .metrics import LedgerSummary, summarize
from .plan import BudgetPlanController, PlanState, preview, validate_percentages
from .recurring import RecurringExpenseManager, add_months, next_occurrence

__all__ = [
    "BudgetPlanController",
    "FundFlowManager",
    "LedgerSummary",
    "PlanState",
    "RecurringExpenseManager",
    "add_months",
    "metrics",
    "next_occurrence",
    "preview",
    "summarize",
    "validate_percentages",
]
