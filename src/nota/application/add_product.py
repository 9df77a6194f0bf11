"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from nota.domain.exceptions import ValidationError
from nota.domain.model.product import DEFAULT_UNIT, DiscountTier, Product, StockEntry
from nota.domain.model.value_objects import Money
from nota.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: str,
        base_price: str | None = None,
        category: str = "",
        sku: str = "",
        units: list[str] | None = None,
        tiers: list[DiscountTier] | None = None,
    ) -> Product:
        """Create a product under the next free numeric id.

        ``units`` become stock entries (quantity 0); the first one is the
        product's default unit.
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required", user_message="Nama produk wajib diisi")

        all_products = self._product_repo.list_all()
        if any(p.name.lower() == name.strip().lower() for p in all_products):
            raise ValidationError(
                f"Product '{name}' already exists", user_message="Produk sudah terdaftar"
            )

        # Auto-assign ID based on existing numeric IDs
        numeric = [int(p.id) for p in all_products if p.id.isdigit()]
        next_id = str(max(numeric) + 1) if numeric else "1"

        unit_list = [u.strip() for u in units or [] if u and u.strip()]
        product = Product(
            id=next_id,
            name=name.strip(),
            price=Money.of(price),
            base_price=Money.of(base_price) if base_price else None,
            category=category.strip(),
            sku=sku.strip(),
            discount_tiers=tuple(tiers or ()),
            stock_entries=tuple(StockEntry(unit=u, quantity=0) for u in unit_list),
            stock_unit=unit_list[0] if unit_list else DEFAULT_UNIT,
        )
        for tier in product.discount_tiers:
            if tier.unit not in product.allowed_units():
                raise ValidationError(
                    f"Tier unit '{tier.unit}' is not sold for {product.name}",
                    user_message="Satuan diskon tidak tersedia untuk produk ini",
                )
        self._product_repo.save(product)
        logger.info("Added product #%s %s at %s", product.id, product.name, product.price)
        return product
