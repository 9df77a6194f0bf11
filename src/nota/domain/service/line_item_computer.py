"""Domain service: turn a cart selection into a line item.

Every path that saves line items (create and edit) goes through
``compute_line_item`` so price, discount and subtotal are always derived
the same way.
"""

from __future__ import annotations

from decimal import Decimal

from nota.domain.exceptions import InvalidQuantityError
from nota.domain.model.label import encode_label
from nota.domain.model.product import Product
from nota.domain.model.transaction import DiscountDetails, LineItem
from nota.domain.model.value_objects import HUNDRED, Money, Quantity, round2
from nota.domain.service.discount_resolver import resolve_for_product


def compute_line_item(product: Product, quantity: int, unit: str) -> LineItem:
    """Price ``quantity`` of ``product`` in ``unit``.

    Raises InvalidQuantityError for a quantity of zero or less.
    """
    try:
        qty = Quantity(quantity)
    except InvalidQuantityError as exc:
        raise InvalidQuantityError(
            f"Quantity for {product.name} must be positive, got {quantity}",
            offending=(product.name,),
        ) from exc

    resolution = resolve_for_product(product, qty.value, unit)
    unit_price = resolution.final_unit_price
    base = product.effective_base_price

    # Without a matching tier the list price may exceed the base price;
    # that is never reported as a negative discount.
    discount_amount = Money(max(base.amount - unit_price.amount, Decimal("0")), base.currency)
    if base.amount > 0:
        discount_percent = round2(discount_amount.amount / base.amount * HUNDRED)
    else:
        discount_percent = round2(Decimal("0"))

    details = None
    if resolution.has_discount:
        second = resolution.discounts[1] if len(resolution.discounts) > 1 else Decimal("0")
        details = DiscountDetails(discount1=resolution.discounts[0], discount2=second)

    return LineItem(
        product_id=product.id,
        product_name=encode_label(product.name, qty.value, unit),
        quantity=qty,
        unit=unit,
        unit_price=unit_price,
        discount_amount=discount_amount,
        discount_percent=discount_percent,
        discount_details=details,
    )
