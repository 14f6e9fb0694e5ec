#!/usr/bin/env python3
"""
Currency Conversion and Handling Utilities

All ledger arithmetic uses integer cents (centavos) to avoid floating-point
drift in balances.

Currency Systems:
- Stored documents and internal calculations use cents: 100 cents = 1.00
- Display uses strings with a currency symbol: "₱12.34"

Key Principles:
- Never use floating-point arithmetic for stored balances
- Percentage allocations round half-up to the nearest cent
- Parsing user input is strict: malformed input is rejected, not zeroed
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from .errors import InvalidAmountError

DEFAULT_CURRENCY_SYMBOL = "₱"


def cents_to_major_str(cents: int, thousands: bool = False) -> str:
    """
    Convert cents to a major-unit string using pure integer arithmetic.

    Args:
        cents: Amount in cents
        thousands: If True, group the whole part with commas

    Returns:
        Formatted string without currency symbol

    Example:
        cents_to_major_str(4599) -> "45.99"
        cents_to_major_str(-123456, thousands=True) -> "-1,234.56"
    """
    is_negative = cents < 0
    abs_cents = abs(int(cents))

    whole = abs_cents // 100
    remainder = abs_cents % 100
    whole_str = f"{whole:,}" if thousands else str(whole)

    if is_negative:
        return f"-{whole_str}.{remainder:02d}"
    return f"{whole_str}.{remainder:02d}"


def parse_amount_to_cents(amount: Union[str, int, Decimal]) -> int:
    """
    Parse a user-supplied amount to integer cents.

    Accepts strings like "1,234.56", "₱12.5", "$3" as well as integers
    (whole units) and Decimals. Fractions of a cent round half-up.

    Args:
        amount: Amount in major units

    Returns:
        Amount in cents

    Raises:
        InvalidAmountError: If the input cannot be parsed as a finite number
    """
    if isinstance(amount, bool):
        raise InvalidAmountError(f"Not a monetary amount: {amount!r}")
    if isinstance(amount, int):
        return amount * 100

    if isinstance(amount, Decimal):
        value = amount
    else:
        clean = str(amount).strip()
        for symbol in (DEFAULT_CURRENCY_SYMBOL, "$", "PHP", ","):
            clean = clean.replace(symbol, "")
        clean = clean.strip()
        if not clean:
            raise InvalidAmountError("Amount is empty")
        try:
            value = Decimal(clean)
        except InvalidOperation:
            raise InvalidAmountError(f"Not a monetary amount: {amount!r}") from None

    if not value.is_finite():
        raise InvalidAmountError(f"Not a monetary amount: {amount!r}")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage_of_cents(cents: int, percentage: Union[float, int, Decimal]) -> int:
    """
    Compute ``percentage / 100 * cents`` rounded half-up to a whole cent.

    Uses Decimal so that e.g. 33.3% of 100.00 is 33.30, not 33.29.

    Args:
        cents: Base amount in cents
        percentage: Percentage in the range 0-100 (not validated here)

    Returns:
        Allocated amount in cents
    """
    pct = Decimal(str(percentage))
    value = Decimal(cents) * pct / Decimal(100)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_cents(cents: int, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format cents as a currency string with symbol prefix."""
    if cents < 0:
        return f"-{symbol}{cents_to_major_str(-cents, thousands=True)}"
    return f"{symbol}{cents_to_major_str(cents, thousands=True)}"
