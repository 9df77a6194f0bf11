"""Money, quantities and percentages.

All are immutable and validated on construction; prices never go through
float.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from nota.domain.exceptions import InvalidQuantityError, ValidationError

HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal so discount chains and subtotals never pick up
    floating-point drift.  Amounts are kept unrounded; rounding is a
    display concern.
    """

    amount: Decimal
    currency: str = "IDR"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # arithmetic

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def less_percent(self, percent: Decimal) -> Money:
        """Reduce the amount by ``percent`` (0-100)."""
        return Money(self.amount - self.amount * percent / HUNDRED, self.currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    # display

    def __str__(self) -> str:
        return format_rupiah(self.amount)

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # construction

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Build from user or JSON input; goes through str so floats stay exact."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0"))


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that a saved line item never carries zero or
    negative units.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise InvalidQuantityError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


def to_percent(value: str | float | int | Decimal, field_name: str = "discount") -> Decimal:
    """Parse a percentage in [0, 100]."""
    try:
        percent = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid {field_name}: {value!r}") from exc
    if not Decimal("0") <= percent <= HUNDRED:
        raise ValidationError(f"{field_name} must be between 0 and 100, got {percent}")
    return percent


def round2(value: Decimal) -> Decimal:
    """Round half away from zero to two decimal places."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_rupiah(amount: Decimal) -> str:
    """Format as ``Rp 1.234.567`` (``Rp 1.234,50`` when there are cents)."""
    rounded = round2(amount)
    whole, _, cents = f"{rounded:,.2f}".partition(".")
    whole = whole.replace(",", ".")
    if cents == "00":
        return f"Rp {whole}"
    return f"Rp {whole},{cents}"
