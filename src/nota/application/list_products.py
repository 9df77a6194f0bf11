"""Application service: product catalog listing (query)."""

from __future__ import annotations

from nota.application.dto import ProductDTO, format_percent
from nota.domain.model.product import DiscountTier, Product
from nota.domain.repository.product_repository import ProductRepository


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, search: str = "", category: str | None = None) -> list[ProductDTO]:
        products = self._product_repo.list_all()
        if search.strip():
            products = [p for p in products if p.matches(search.strip())]
        if category:
            products = [p for p in products if p.category.lower() == category.lower()]
        return [product_to_dto(p) for p in products]


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        sku=product.sku,
        category=product.category,
        price=str(product.price),
        units=list(product.allowed_units()),
        tiers=[describe_tier(t) for t in product.discount_tiers],
    )


def describe_tier(tier: DiscountTier) -> str:
    marker = "= " if tier.is_exact else ""
    discounts = f"-{format_percent(tier.discount)}"
    if tier.discount2:
        discounts += f" -{format_percent(tier.discount2)}"
    return f"{marker}{tier.min_quantity} {tier.unit}: {discounts}"
