"""Application service: Finalize Transaction use case.

Moves a draft to ``completed``.  A completed nota can no longer be edited;
finalizing it again is rejected and changes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from nota.application.dto import TransactionDTO, transaction_to_dto
from nota.domain.exceptions import ConcurrentModificationError, EntityNotFoundError
from nota.domain.model.transaction import utcnow
from nota.domain.repository.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


class FinalizeTransactionHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._clock = clock

    def handle(self, transaction_id: int, expected_version: int | None = None) -> TransactionDTO:
        transaction = self._transaction_repo.get_by_id(transaction_id)
        if transaction is None:
            raise EntityNotFoundError(f"Transaction #{transaction_id} not found")
        if expected_version is not None and expected_version != transaction.version:
            raise ConcurrentModificationError(
                f"Transaction {transaction.transaction_number} is at version "
                f"{transaction.version}, caller loaded {expected_version}"
            )

        transaction.finalize(self._clock())
        self._transaction_repo.update(transaction)

        logger.info("Finalized nota %s", transaction.transaction_number)
        return transaction_to_dto(transaction)
