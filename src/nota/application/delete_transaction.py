"""Application service: Delete Transaction use case.

Allowed in any status; line items go with the nota.
"""

from __future__ import annotations

import logging

from nota.domain.exceptions import EntityNotFoundError
from nota.domain.repository.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


class DeleteTransactionHandler:

    def __init__(self, transaction_repo: TransactionRepository) -> None:
        self._transaction_repo = transaction_repo

    def handle(self, transaction_id: int) -> None:
        if not self._transaction_repo.delete(transaction_id):
            raise EntityNotFoundError(f"Transaction #{transaction_id} not found")
        logger.info("Deleted transaction #%s", transaction_id)
