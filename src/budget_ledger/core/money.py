#!/usr/bin/env python3
"""
Money Primitive Type

Immutable currency value wrapper that uses integer cents internally.
Prevents floating-point errors and provides type-safe currency operations.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from .currency import format_cents, parse_amount_to_cents, percentage_of_cents
from .errors import InvalidAmountError


@dataclass(frozen=True)
class Money:
    """
    Immutable money value in cents.

    Balances may legitimately go negative (an overdrawn remaining balance),
    so no sign restriction is enforced here; the ledger operations validate
    signs where their invariants require it.

    Examples:
        >>> income = Money.parse("5,000")
        >>> str(income)
        '₱5,000.00'

        >>> income.percent(12.5)
        Money(cents=62500)

        >>> (Money.from_cents(100) - Money.from_cents(250)).is_negative()
        True
    """

    cents: int

    @classmethod
    def from_cents(cls, cents: int) -> "Money":
        """Create Money from cents."""
        return cls(cents=int(cents))

    @classmethod
    def zero(cls) -> "Money":
        """The zero amount."""
        return cls(cents=0)

    @classmethod
    def parse(cls, amount: str | int | Decimal) -> "Money":
        """
        Parse from a major-unit string like '₱1,234.56', an integer or a Decimal.

        Raises:
            InvalidAmountError: If the input is not a number
        """
        return cls(cents=parse_amount_to_cents(amount))

    @classmethod
    def total(cls, amounts: Iterable["Money"]) -> "Money":
        """Sum an iterable of Money values (zero when empty)."""
        return cls(cents=sum(m.cents for m in amounts))

    def to_cents(self) -> int:
        """Get value in cents."""
        return self.cents

    def percent(self, percentage: float | int | Decimal) -> "Money":
        """Return ``percentage`` percent of this amount, rounded half-up to the cent."""
        return Money(cents=percentage_of_cents(self.cents, percentage))

    def is_positive(self) -> bool:
        return self.cents > 0

    def is_negative(self) -> bool:
        return self.cents < 0

    def is_zero(self) -> bool:
        return self.cents == 0

    def abs(self) -> "Money":
        """Return absolute value of Money."""
        return Money(cents=abs(self.cents))

    def format(self, symbol: str) -> str:
        """Format with an explicit currency symbol."""
        return format_cents(self.cents, symbol)

    def __add__(self, other: "Money") -> "Money":
        """Add two Money objects."""
        return Money(cents=self.cents + other.cents)

    def __sub__(self, other: "Money") -> "Money":
        """Subtract two Money objects."""
        return Money(cents=self.cents - other.cents)

    def __neg__(self) -> "Money":
        return Money(cents=-self.cents)

    def __mul__(self, scalar: int) -> "Money":
        """Multiply Money by integer scalar."""
        return Money(cents=self.cents * scalar)

    def __eq__(self, other: object) -> bool:
        """Check equality."""
        if not isinstance(other, Money):
            return NotImplemented
        return self.cents == other.cents

    def __hash__(self) -> int:
        return hash(self.cents)

    def __lt__(self, other: "Money") -> bool:
        """Less than comparison."""
        return self.cents < other.cents

    def __le__(self, other: "Money") -> bool:
        """Less than or equal comparison."""
        return self.cents <= other.cents

    def __gt__(self, other: "Money") -> bool:
        """Greater than comparison."""
        return self.cents > other.cents

    def __ge__(self, other: "Money") -> bool:
        """Greater than or equal comparison."""
        return self.cents >= other.cents

    def __str__(self) -> str:
        """Format as currency string."""
        return format_cents(self.cents)

    def __repr__(self) -> str:
        """Repr format."""
        return f"Money(cents={self.cents})"


def require_positive(amount: Money, what: str) -> None:
    """
    Reject anything but a strictly positive Money value.

    Raises:
        InvalidAmountError: If ``amount`` is not Money or is <= 0
    """
    if not isinstance(amount, Money):
        raise InvalidAmountError(f"{what} must be a Money value, got {type(amount).__name__}")
    if not amount.is_positive():
        raise InvalidAmountError(f"{what} must be positive, got {amount}")


def require_non_negative(amount: Money, what: str) -> None:
    """
    Reject negative (or non-Money) values.

    Raises:
        InvalidAmountError: If ``amount`` is not Money or is < 0
    """
    if not isinstance(amount, Money):
        raise InvalidAmountError(f"{what} must be a Money value, got {type(amount).__name__}")
    if amount.is_negative():
        raise InvalidAmountError(f"{what} must not be negative, got {amount}")
