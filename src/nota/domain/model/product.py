"""Product aggregate and its discount tiers.

Products live independently of transactions.  A line item copies the
prices it needs at save time, so later catalog changes never touch saved
notas.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from nota.domain.exceptions import ValidationError
from nota.domain.model.label import check_unit
from nota.domain.model.value_objects import Money, to_percent

DEFAULT_UNITS = ("buah", "box", "karton")
DEFAULT_UNIT = "buah"


@dataclass(frozen=True)
class DiscountTier:
    """A discount rule keyed by quantity and unit.

    ``discount`` and ``discount2`` are applied one after the other, never
    summed.  An ``is_exact`` tier only matches its exact quantity; other
    tiers match any quantity at or above ``min_quantity``.
    """

    min_quantity: int
    discount: Decimal
    unit: str
    discount2: Decimal | None = None
    is_exact: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.min_quantity, bool) or not isinstance(self.min_quantity, int):
            raise ValidationError("Tier minimum quantity must be an integer")
        if self.min_quantity < 0:
            raise ValidationError("Tier minimum quantity cannot be negative")
        object.__setattr__(self, "discount", to_percent(self.discount, "discount"))
        if self.discount2 is not None:
            object.__setattr__(self, "discount2", to_percent(self.discount2, "discount2"))
        object.__setattr__(self, "unit", check_unit(self.unit))

    def accepts_unit(self, unit: str | None) -> bool:
        return not unit or self.unit == unit


@dataclass(frozen=True)
class StockEntry:
    unit: str
    quantity: int

    def __post_init__(self) -> None:
        # Rows without a unit are ignored by allowed_units.
        if self.unit:
            object.__setattr__(self, "unit", check_unit(self.unit))


@dataclass
class Product:
    """A product in the catalog.

    ``price`` is the list price; ``base_price`` is what discounts are
    computed from and falls back to ``price`` when absent or zero.
    """

    id: str
    name: str
    price: Money
    base_price: Money | None = None
    category: str = ""
    sku: str = ""
    description: str = ""
    discount_tiers: tuple[DiscountTier, ...] = ()
    stock_entries: tuple[StockEntry, ...] = ()
    stock_unit: str = DEFAULT_UNIT

    @property
    def effective_base_price(self) -> Money:
        if self.base_price is None or self.base_price.is_zero:
            return self.price
        return self.base_price

    def allowed_units(self) -> tuple[str, ...]:
        """Units this product can be sold in.

        Taken from the stock entries when the product has any, otherwise
        the catalog-wide default units.
        """
        units: list[str] = []
        for entry in self.stock_entries:
            if entry.unit and entry.unit not in units:
                units.append(entry.unit)
        return tuple(units) or DEFAULT_UNITS

    def default_unit(self) -> str:
        return self.stock_unit or DEFAULT_UNIT

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name or SKU."""
        needle = query.lower()
        return needle in self.name.lower() or needle in self.sku.lower()
