"""RecordStore-backed implementation of ProductRepository."""

from __future__ import annotations

from nota.domain.model.product import DEFAULT_UNIT, DiscountTier, Product, StockEntry
from nota.domain.repository.product_repository import ProductRepository
from nota.infrastructure.persistence.record_store import RecordStore, translate_store_errors
from nota.infrastructure.persistence.rows import (
    decimal_from_raw,
    money_from_raw,
    money_to_raw,
    parse_guard,
)

TABLE = "products"


class StoreProductRepository(ProductRepository):

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        with translate_store_errors("Load product"):
            rows = self._store.select(TABLE, {"id": product_id})
        return self._to_domain(rows[0]) if rows else None

    def list_all(self) -> list[Product]:
        with translate_store_errors("List products"):
            rows = self._store.select(TABLE, order=("name",))
        return [self._to_domain(raw) for raw in rows]

    def save(self, product: Product) -> None:
        raw = self._to_raw(product)
        with translate_store_errors(f"Save product {product.id}"):
            with self._store.atomic():
                if self._store.select(TABLE, {"id": product.id}):
                    self._store.update(TABLE, raw, {"id": product.id})
                else:
                    self._store.insert(TABLE, [raw])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "category": product.category,
            "sku": product.sku,
            "description": product.description,
            "price": money_to_raw(product.price),
            "base_price": money_to_raw(product.base_price),
            "discount_tiers": [
                {
                    "minQuantity": tier.min_quantity,
                    "discount": str(tier.discount),
                    "discount2": None if tier.discount2 is None else str(tier.discount2),
                    "unit": tier.unit,
                    "isExact": tier.is_exact,
                }
                for tier in product.discount_tiers
            ],
            "stock_entries": [
                {"unit": entry.unit, "quantity": entry.quantity}
                for entry in product.stock_entries
            ],
            "stock_unit": product.stock_unit,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        with parse_guard(TABLE, raw):
            price = money_from_raw(raw["price"])
            if price is None:
                raise ValueError("price is required")
            return Product(
                id=str(raw["id"]),
                name=raw["name"],
                price=price,
                base_price=money_from_raw(raw.get("base_price")),
                category=raw.get("category") or "",
                sku=raw.get("sku") or "",
                description=raw.get("description") or "",
                discount_tiers=tuple(
                    DiscountTier(
                        min_quantity=int(t["minQuantity"]),
                        discount=decimal_from_raw(t["discount"]),
                        discount2=decimal_from_raw(t.get("discount2")),
                        unit=t["unit"],
                        is_exact=bool(t.get("isExact", False)),
                    )
                    for t in raw.get("discount_tiers") or []
                ),
                stock_entries=tuple(
                    StockEntry(unit=e["unit"], quantity=int(e.get("quantity") or 0))
                    for e in raw.get("stock_entries") or []
                ),
                stock_unit=raw.get("stock_unit") or DEFAULT_UNIT,
            )
