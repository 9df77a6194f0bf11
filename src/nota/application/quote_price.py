"""Application service: price quote for one product selection (query).

Runs the same line-item computation a save would, without touching any
transaction.
"""

from __future__ import annotations

from nota.application.dto import QuoteDTO, line_item_to_dto
from nota.domain.exceptions import EntityNotFoundError, UnsupportedUnitError
from nota.domain.repository.product_repository import ProductRepository
from nota.domain.service.line_item_computer import compute_line_item


class QuotePriceHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, quantity: int, unit: str | None = None) -> QuoteDTO:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(
                f"Product not found: '{product_id}'", user_message="Produk tidak ditemukan"
            )
        unit = unit or product.default_unit()
        if unit not in product.allowed_units():
            raise UnsupportedUnitError(f"Unit '{unit}' is not available for {product.name}")

        item = line_item_to_dto(compute_line_item(product, quantity, unit))
        return QuoteDTO(
            product_id=product.id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit=item.unit,
            list_price=str(product.price),
            unit_price=item.unit_price,
            discounts=item.discounts,
            discount_percent=item.discount_percent,
            subtotal=item.subtotal,
        )
