"""Application service: Create Transaction use case.

Validates the cart, prices every selection through the line-item
computer, then hands the new draft to the repository, which allocates the
transaction number and inserts the nota with its items in one atomic step.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from nota.application.dto import TransactionDTO, transaction_to_dto
from nota.application.parties import load_customer, load_sales, normalize_payment_term
from nota.domain.model.cart import Cart
from nota.domain.model.transaction import Transaction, utcnow
from nota.domain.repository.customer_repository import CustomerRepository, SalesRepository
from nota.domain.repository.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


class CreateTransactionHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        customer_repo: CustomerRepository,
        sales_repo: SalesRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._customer_repo = customer_repo
        self._sales_repo = sales_repo
        self._clock = clock

    def handle(
        self,
        customer_id: str | None,
        cart: Cart,
        sales_id: str | None = None,
        notes: str = "",
        payment_term: str | None = None,
    ) -> TransactionDTO:
        """Create a new draft nota.

        Steps:
        1. Validate the cart (customer, non-empty, positive quantities).
        2. Resolve customer and sales person.
        3. Compute every line item from the cart.
        4. Persist atomically and return a DTO.
        """
        checked_id = cart.validate_for_save(customer_id)
        customer = load_customer(self._customer_repo, checked_id)
        sales = load_sales(self._sales_repo, sales_id)
        term = normalize_payment_term(payment_term)

        transaction = Transaction.create(
            customer=customer,
            items=cart.line_items(),
            sales=sales,
            notes=notes,
            payment_term=term,
            now=self._clock(),
        )
        self._transaction_repo.add(transaction)

        logger.info(
            "Created nota %s for %s: %d items, total %s",
            transaction.transaction_number,
            transaction.customer_name,
            len(transaction.items),
            transaction.total_amount,
        )
        is_custom = term is not None and not customer.is_catalog_term(term)
        return transaction_to_dto(transaction, payment_term_is_custom=is_custom)
