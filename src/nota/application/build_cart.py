"""Application service: Build Cart use case.

Turns product selections by id into a Cart holding full product
snapshots, applying the cart's duplicate and unit guards.  Quantities are
not checked here; ``Cart.validate_for_save`` reports every bad one at once.
"""

from __future__ import annotations

from nota.application.dto import CartItemSpec
from nota.domain.exceptions import EntityNotFoundError
from nota.domain.model.cart import Cart
from nota.domain.repository.product_repository import ProductRepository


class BuildCartHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, item_specs: list[CartItemSpec], cart: Cart | None = None) -> Cart:
        """Add each selection to ``cart`` (a new cart when omitted)."""
        cart = cart if cart is not None else Cart()
        for spec in item_specs:
            product = self._product_repo.get_by_id(spec.product_id)
            if product is None:
                raise EntityNotFoundError(
                    f"Product not found: '{spec.product_id}'",
                    user_message="Produk tidak ditemukan",
                )
            cart.add(product, spec.quantity, spec.unit)
        return cart


def revise_cart(cart: Cart, item_specs: list[CartItemSpec]) -> Cart:
    """Change quantity, and unit when given, of selections already in ``cart``."""
    for spec in item_specs:
        index = cart.index_of(spec.product_id)
        cart.update_quantity(index, spec.quantity)
        if spec.unit:
            cart.update_unit(index, spec.unit)
    return cart
