"""Application service: Show Transaction use case (query)."""

from __future__ import annotations

from nota.application.dto import TransactionDTO, transaction_to_dto
from nota.domain.exceptions import EntityNotFoundError
from nota.domain.model.transaction import Transaction
from nota.domain.repository.transaction_repository import TransactionRepository


class ShowTransactionHandler:

    def __init__(self, transaction_repo: TransactionRepository) -> None:
        self._transaction_repo = transaction_repo

    def handle(self, reference: int | str) -> TransactionDTO:
        """Look a nota up by numeric ID or by transaction number."""
        return transaction_to_dto(self.load(reference))

    def load(self, reference: int | str) -> Transaction:
        if isinstance(reference, int) or reference.isdigit():
            transaction = self._transaction_repo.get_by_id(int(reference))
        else:
            transaction = self._transaction_repo.get_by_number(reference)
        if transaction is None:
            raise EntityNotFoundError(f"Transaction {reference!r} not found")
        return transaction


class NextTransactionNumberHandler:

    def __init__(self, transaction_repo: TransactionRepository) -> None:
        self._transaction_repo = transaction_repo

    def handle(self) -> str:
        """The number the next create would get; nothing is consumed."""
        return self._transaction_repo.peek_next_number()
