"""Cart: the ordered product selections behind a draft nota.

A cart is never saved as-is.  At save time every selection is turned into
a LineItem by the line-item computer.  Quantities may sit at zero or below
while the user is still typing; that is only rejected by
``validate_for_save``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from nota.domain.exceptions import (
    DuplicateProductInCartError,
    EmptyCartError,
    EntityNotFoundError,
    InvalidQuantityError,
    MissingCustomerError,
    UnsupportedUnitError,
    ValidationError,
)
from nota.domain.model.product import Product
from nota.domain.model.transaction import LineItem
from nota.domain.model.value_objects import Money
from nota.domain.service.line_item_computer import compute_line_item


@dataclass
class CartSelection:
    product: Product  # full snapshot, not just the id
    quantity: int
    unit: str


class Cart:

    def __init__(self, selections: list[CartSelection] | None = None) -> None:
        """Restore a cart as it was saved.

        Only the duplicate guard applies; saved quantities and units are
        taken as they are.
        """
        self._selections: list[CartSelection] = []
        for selection in selections or []:
            if selection.product.id in self.product_ids:
                raise DuplicateProductInCartError(
                    f"Product '{selection.product.name}' is already in the cart"
                )
            self._selections.append(selection)

    # --- Mutations ------------------------------------------------------------

    def add(self, product: Product, quantity: int, unit: str | None = None) -> CartSelection:
        """Append a selection; quantity is only checked at save time."""
        if product.id in self.product_ids:
            raise DuplicateProductInCartError(f"Product '{product.name}' is already in the cart")
        unit = unit or product.default_unit()
        self._check_unit(product, unit)
        selection = CartSelection(product=product, quantity=quantity, unit=unit)
        self._selections.append(selection)
        return selection

    def remove(self, index: int) -> CartSelection:
        return self._selections.pop(self._check_index(index))

    def update_quantity(self, index: int, value: str | int | None) -> None:
        """Set a quantity from raw input; empty input becomes 0."""
        selection = self._selections[self._check_index(index)]
        if value is None or (isinstance(value, str) and not value.strip()):
            selection.quantity = 0
            return
        try:
            selection.quantity = int(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                f"Quantity must be a whole number, got {value!r}",
                user_message="Jumlah harus berupa angka",
            ) from exc

    def update_unit(self, index: int, unit: str) -> None:
        selection = self._selections[self._check_index(index)]
        self._check_unit(selection.product, unit)
        selection.unit = unit

    # --- Queries --------------------------------------------------------------

    def __iter__(self) -> Iterator[CartSelection]:
        return iter(self._selections)

    def __len__(self) -> int:
        return len(self._selections)

    @property
    def selections(self) -> list[CartSelection]:
        return list(self._selections)

    @property
    def product_ids(self) -> set[str]:
        return {s.product.id for s in self._selections}

    def index_of(self, product_id: str) -> int:
        for index, selection in enumerate(self._selections):
            if selection.product.id == product_id:
                return index
        raise EntityNotFoundError(
            f"Product '{product_id}' is not in the cart",
            user_message="Produk tidak ada di nota ini",
        )

    def total(self) -> Money:
        """Running total, recomputed on every call.

        Selections still at zero or below contribute nothing.
        """
        result = Money.zero()
        for selection in self._selections:
            if selection.quantity > 0:
                item = compute_line_item(selection.product, selection.quantity, selection.unit)
                result = result + item.subtotal
        return result

    def validate_for_save(self, customer_id: str | None) -> str:
        """Reject a save before anything touches the store.

        Returns the checked customer id.
        """
        if not customer_id:
            raise MissingCustomerError("A customer must be selected")
        if not self._selections:
            raise EmptyCartError("The cart is empty")
        offending = tuple(s.product.name for s in self._selections if s.quantity <= 0)
        if offending:
            raise InvalidQuantityError(
                f"Quantity must be positive for: {', '.join(offending)}",
                offending=offending,
            )
        return customer_id

    def line_items(self) -> list[LineItem]:
        return [compute_line_item(s.product, s.quantity, s.unit) for s in self._selections]

    # --- Internal helpers -----------------------------------------------------

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self._selections):
            raise ValidationError(f"No cart item at position {index}")
        return index

    @staticmethod
    def _check_unit(product: Product, unit: str) -> None:
        allowed = product.allowed_units()
        if unit not in allowed:
            raise UnsupportedUnitError(
                f"Unit '{unit}' is not available for {product.name} "
                f"(expected one of: {', '.join(allowed)})"
            )
