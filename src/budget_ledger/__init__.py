"""
Budget Ledger - Personal Allowance and Allocation Tracker

A single-user ledger that derives a remaining balance from one allowance,
the expenses recorded against it, a savings budget and a set of sinking
funds.

Key Features:
- Income records that keep the allowance equal to their sum
- Sinking funds guarded by the remaining balance
- A percentage budget plan that locks until reset
- Runway (survival days) from a target or observed spend rate
- Recurring expenses and pandas-based spending analysis

Domain Packages:
- core: Money, currency parsing, entity models, errors, configuration
- catalog: Category catalog (built-in or YAML)
- store: Document store, optimistic transactions, LedgerSession
- ledger: Derived metrics, fund flows, plan lifecycle, recurring expenses
- analysis: Spending pace, trends and breakdowns
- insights: Context assembly for the suggestion service
- cli: Command-line interface

Example Usage:
    from budget_ledger import LedgerSession, Money
    from budget_ledger.ledger import FundFlowManager
    from budget_ledger.store import MemoryDocumentStore

    session = LedgerSession(MemoryDocumentStore(), "me")
    FundFlowManager(session).add_income(Money.parse("15000"), "Salary")
"""

__version__ = "0.1.0"
__author__ = "Budget Ledger Developers"

from .core.money import Money
from .store.session import LedgerSession

__all__ = [
    "LedgerSession",
    "Money",
    "__author__",
    "__version__",
]
