"""Domain service: tiered discount resolution.

Given a product's tier table, a quantity and a unit, find the tier that
applies and the unit price after its discounts.  Pure functions: no I/O,
inputs are never mutated.

Resolution order:
  1. An ``is_exact`` tier whose ``min_quantity`` equals the quantity wins
     outright (first one found, in table order).
  2. Otherwise the threshold tier with the highest ``min_quantity`` that is
     still <= the quantity.  A lower threshold with a bigger percentage is
     never preferred.
  3. No tier: the list price, no discounts.

A matched tier discounts the *base* price (list price when the base is
absent or zero), first by ``discount`` then by ``discount2`` on the
already-reduced price.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from nota.domain.model.product import DiscountTier, Product
from nota.domain.model.value_objects import Money


@dataclass(frozen=True)
class DiscountResolution:
    final_unit_price: Money
    discounts: tuple[Decimal, ...] = ()
    matched_tier: DiscountTier | None = None

    @property
    def has_discount(self) -> bool:
        return self.matched_tier is not None


def resolve(
    tiers: Iterable[DiscountTier],
    quantity: int,
    unit: str | None,
    *,
    price: Money,
    base_price: Money | None = None,
) -> DiscountResolution:
    """Resolve the unit price for ``quantity`` of ``unit``.

    An empty or falsy ``unit`` leaves tiers unconstrained by unit.
    """
    tiers = tuple(tiers)
    if not tiers:
        return DiscountResolution(final_unit_price=price)

    tier = find_exact_tier(tiers, quantity, unit) or find_threshold_tier(tiers, quantity, unit)
    if tier is None:
        return DiscountResolution(final_unit_price=price)

    start = price if base_price is None or base_price.is_zero else base_price
    final_price, discounts = apply_tier(start, tier)
    return DiscountResolution(
        final_unit_price=final_price,
        discounts=discounts,
        matched_tier=tier,
    )


def resolve_for_product(product: Product, quantity: int, unit: str | None = None) -> DiscountResolution:
    return resolve(
        product.discount_tiers,
        quantity,
        unit,
        price=product.price,
        base_price=product.base_price,
    )


def find_exact_tier(
    tiers: Iterable[DiscountTier], quantity: int, unit: str | None
) -> DiscountTier | None:
    for tier in tiers:
        if tier.is_exact and tier.min_quantity == quantity and tier.accepts_unit(unit):
            return tier
    return None


def find_threshold_tier(
    tiers: Iterable[DiscountTier], quantity: int, unit: str | None
) -> DiscountTier | None:
    candidates = [t for t in tiers if not t.is_exact and t.accepts_unit(unit)]
    # sorted() is stable, so equal thresholds keep table order.
    for tier in sorted(candidates, key=lambda t: t.min_quantity, reverse=True):
        if tier.min_quantity <= quantity:
            return tier
    return None


def apply_tier(start: Money, tier: DiscountTier) -> tuple[Money, tuple[Decimal, ...]]:
    """Apply a tier's discounts in sequence (compounding, not additive)."""
    price = start.less_percent(tier.discount)
    discounts = [tier.discount]
    if tier.discount2 is not None and tier.discount2 > 0:
        price = price.less_percent(tier.discount2)
        discounts.append(tier.discount2)
    return price, tuple(discounts)
