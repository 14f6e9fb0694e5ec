"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from budget_ledger.catalog import default_catalog, reset_catalog
from budget_ledger.core.config import reload_config
from budget_ledger.ledger import BudgetPlanController, FundFlowManager, RecurringExpenseManager
from budget_ledger.store import LedgerSession, MemoryDocumentStore


class FixedClock:
    """Controllable "now" for sessions under test."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests don't use a real ledger
    monkeypatch.setenv("LEDGER_ENV", "test")
    monkeypatch.setenv("LEDGER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LEDGER_USER_ID", "tester")
    monkeypatch.delenv("LEDGER_STORE_FILE", raising=False)
    monkeypatch.delenv("LEDGER_CATALOG_FILE", raising=False)
    monkeypatch.delenv("LEDGER_CURRENCY_SYMBOL", raising=False)

    reload_config()
    reset_catalog()
    yield
    reset_catalog()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 10, 12, 0))


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def session(store, catalog, clock) -> LedgerSession:
    """Ledger session over an in-memory store with a fixed clock."""
    return LedgerSession(store, "tester", catalog=catalog, clock=clock)


@pytest.fixture
def funds(session) -> FundFlowManager:
    return FundFlowManager(session)


@pytest.fixture
def planner(session) -> BudgetPlanController:
    return BudgetPlanController(session)


@pytest.fixture
def recurring_manager(session) -> RecurringExpenseManager:
    return RecurringExpenseManager(session)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "store: Tests for the document store and transactions")
    config.addinivalue_line("markers", "ledger: Tests for fund flows, metrics and the budget plan")
    config.addinivalue_line("markers", "analysis: Tests for spending analysis")
    config.addinivalue_line("markers", "slow: Tests that take significant time to run")
