"""Abstract repository for Transaction aggregate.

Each write method is all-or-nothing: an implementation must never leave a
transaction whose stored total disagrees with its stored line items.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from nota.domain.model.transaction import Transaction


class TransactionRepository(ABC):

    @abstractmethod
    def peek_next_number(self) -> str:
        """Return the number the next ``add`` would allocate, without consuming it."""

    @abstractmethod
    def add(self, transaction: Transaction) -> None:
        """Allocate a transaction number, then insert the transaction and its items.

        Sets ``id``, ``transaction_number`` and ``version`` on success.
        """

    @abstractmethod
    def get_by_id(self, transaction_id: int) -> Transaction | None:
        """Return a transaction with its items, or None if not found."""

    @abstractmethod
    def get_by_number(self, transaction_number: str) -> Transaction | None:
        """Return a transaction by its number, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Transaction]:
        """Return every transaction with its items, newest first."""

    @abstractmethod
    def update(self, transaction: Transaction, *, replace_items: bool = False) -> None:
        """Write back a loaded transaction.

        Raises ConcurrentModificationError when the stored version no longer
        matches ``transaction.version``.  With ``replace_items`` every stored
        line item is deleted and the current set inserted.
        """

    @abstractmethod
    def delete(self, transaction_id: int) -> bool:
        """Delete a transaction and its items; False if it did not exist."""
