#!/usr/bin/env python3
"""
Unit tests for currency utilities.

Tests the integer-cent conversion and formatting helpers.
"""

from decimal import Decimal

import pytest

from budget_ledger.core.currency import (
    cents_to_major_str,
    format_cents,
    parse_amount_to_cents,
    percentage_of_cents,
)
from budget_ledger.core.errors import InvalidAmountError


@pytest.mark.currency
class TestParseAmount:
    """Test parsing user-supplied amounts."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("45.99", 4599),
            ("₱1,250", 125000),
            ("$3", 300),
            ("PHP 10.50", 1050),
            ("0.005", 1),
            (Decimal("2.5"), 250),
            (7, 700),
        ],
    )
    def test_accepted_inputs(self, raw, expected):
        """Test accepted formats convert to cents."""
        assert parse_amount_to_cents(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "NaN", "inf", True])
    def test_rejected_inputs(self, raw):
        """Test malformed input is rejected."""
        with pytest.raises(InvalidAmountError):
            parse_amount_to_cents(raw)


@pytest.mark.currency
class TestFormatting:
    """Test display helpers."""

    def test_cents_to_major_str(self):
        assert cents_to_major_str(4599) == "45.99"
        assert cents_to_major_str(5) == "0.05"
        assert cents_to_major_str(-123456, thousands=True) == "-1,234.56"

    def test_format_cents_default_symbol(self):
        assert format_cents(150000) == "₱1,500.00"
        assert format_cents(-1) == "-₱0.01"


@pytest.mark.currency
class TestPercentage:
    """Test percentage allocation math."""

    def test_decimal_precision(self):
        """Test 33.3% of 100.00 is 33.30, not 33.29."""
        assert percentage_of_cents(10000, 33.3) == 3330

    def test_zero_and_full(self):
        assert percentage_of_cents(12345, 0) == 0
        assert percentage_of_cents(12345, 100) == 12345
