"""Application service: Edit Transaction use case.

Only drafts can be edited.  The whole line-item set is recomputed from the
edited cart and replaces the stored one; there is no partial update.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from nota.application.dto import TransactionDTO, transaction_to_dto
from nota.application.parties import load_customer, load_sales, normalize_payment_term
from nota.domain.exceptions import ConcurrentModificationError, EntityNotFoundError
from nota.domain.model.cart import Cart
from nota.domain.model.transaction import utcnow
from nota.domain.repository.customer_repository import CustomerRepository, SalesRepository
from nota.domain.repository.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


class EditTransactionHandler:

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
        transaction_id: int,
        customer_id: str | None,
        cart: Cart,
        sales_id: str | None = None,
        notes: str = "",
        payment_term: str | None = None,
        expected_version: int | None = None,
    ) -> TransactionDTO:
        """Save an edited draft.

        ``expected_version`` is the version the caller loaded; a nota that
        changed since then is rejected instead of overwritten.
        """
        transaction = self._transaction_repo.get_by_id(transaction_id)
        if transaction is None:
            raise EntityNotFoundError(f"Transaction #{transaction_id} not found")
        transaction.ensure_pending("edit")
        if expected_version is not None and expected_version != transaction.version:
            raise ConcurrentModificationError(
                f"Transaction {transaction.transaction_number} is at version "
                f"{transaction.version}, caller loaded {expected_version}"
            )

        checked_id = cart.validate_for_save(customer_id)
        customer = load_customer(self._customer_repo, checked_id)
        sales = load_sales(self._sales_repo, sales_id)
        term = normalize_payment_term(payment_term)

        transaction.revise(
            customer=customer,
            items=cart.line_items(),
            sales=sales,
            notes=notes,
            payment_term=term,
            now=self._clock(),
        )
        self._transaction_repo.update(transaction, replace_items=True)

        logger.info(
            "Edited nota %s: %d items, total %s",
            transaction.transaction_number,
            len(transaction.items),
            transaction.total_amount,
        )
        is_custom = term is not None and not customer.is_catalog_term(term)
        return transaction_to_dto(transaction, payment_term_is_custom=is_custom)
