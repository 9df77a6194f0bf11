"""Application service: reload a saved draft into an editable cart.

Each line item's product is fetched again by id so the cart holds current
catalog data; saving recomputes every price from it.  Items whose product
has since been removed are skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from nota.domain.exceptions import EntityNotFoundError
from nota.domain.model.cart import Cart, CartSelection
from nota.domain.repository.customer_repository import CustomerRepository, SalesRepository
from nota.domain.repository.product_repository import ProductRepository
from nota.domain.repository.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


@dataclass
class LoadedDraft:
    transaction_id: int
    transaction_number: str
    version: int
    cart: Cart
    customer_id: str | None
    sales_id: str | None
    notes: str
    payment_term: str | None
    payment_term_is_custom: bool
    skipped_products: list[str]


class LoadDraftHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        product_repo: ProductRepository,
        customer_repo: CustomerRepository,
        sales_repo: SalesRepository,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._product_repo = product_repo
        self._customer_repo = customer_repo
        self._sales_repo = sales_repo

    def handle(self, transaction_id: int) -> LoadedDraft:
        transaction = self._transaction_repo.get_by_id(transaction_id)
        if transaction is None:
            raise EntityNotFoundError(f"Transaction #{transaction_id} not found")
        transaction.ensure_pending("edit")

        selections: list[CartSelection] = []
        skipped: list[str] = []
        for item in transaction.items:
            product = self._product_repo.get_by_id(item.product_id)
            if product is None:
                logger.warning(
                    "Nota %s: product %s no longer exists, item %r dropped from cart",
                    transaction.transaction_number, item.product_id, item.product_name,
                )
                skipped.append(item.label.name)
                continue
            selections.append(
                CartSelection(product=product, quantity=item.quantity.value, unit=item.unit)
            )

        # The nota keeps only the customer's name; match it back to a record.
        customer = next(
            (c for c in self._customer_repo.list_all() if c.name == transaction.customer_name),
            None,
        )
        sales_id = transaction.sales_id
        if sales_id and self._sales_repo.get_by_id(sales_id) is None:
            sales_id = None

        term = transaction.payment_terms_days
        is_custom = term is not None and (customer is None or not customer.is_catalog_term(term))
        return LoadedDraft(
            transaction_id=transaction_id,
            transaction_number=transaction.transaction_number or "",
            version=transaction.version,
            cart=Cart(selections),
            customer_id=customer.id if customer else None,
            sales_id=sales_id,
            notes=transaction.notes,
            payment_term=term,
            payment_term_is_custom=is_custom,
            skipped_products=skipped,
        )
