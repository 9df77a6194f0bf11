"""Catalog lookup port used by cart building and the product commands."""

from __future__ import annotations

from abc import ABC, abstractmethod

from nota.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog, ordered by name."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""
