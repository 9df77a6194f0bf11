"""Dict-backed repository doubles for handler tests.

These implement the same abstract interfaces as the store-backed
repositories but keep everything in a dict. No file I/O, no side effects.
"""

from __future__ import annotations

import copy

from nota.domain.exceptions import ConcurrentModificationError, EntityNotFoundError
from nota.domain.model.customer import Customer, SalesPerson
from nota.domain.model.product import Product
from nota.domain.model.transaction import Transaction
from nota.domain.model.transaction_number import format_transaction_number
from nota.domain.repository.customer_repository import CustomerRepository, SalesRepository
from nota.domain.repository.product_repository import ProductRepository
from nota.domain.repository.transaction_repository import TransactionRepository


class FakeTransactionRepository(TransactionRepository):
    """Stores deep copies so tests cannot mutate saved state by accident."""

    def __init__(self, prefix: str = "RJA/APT", counter: int = 2504040159) -> None:
        self._store: dict[int, Transaction] = {}
        self._next_id = 1
        self._prefix = prefix
        self.counter = counter

    def peek_next_number(self) -> str:
        return format_transaction_number(self._prefix, str(self.counter))

    def add(self, transaction: Transaction) -> None:
        transaction.id = self._next_id
        transaction.transaction_number = self.peek_next_number()
        transaction.version = 1
        self._next_id += 1
        self.counter += 1
        self._store[transaction.id] = copy.deepcopy(transaction)

    def get_by_id(self, transaction_id: int) -> Transaction | None:
        found = self._store.get(transaction_id)
        return copy.deepcopy(found) if found else None

    def get_by_number(self, transaction_number: str) -> Transaction | None:
        for t in self._store.values():
            if t.transaction_number == transaction_number:
                return copy.deepcopy(t)
        return None

    def list_all(self) -> list[Transaction]:
        ordered = sorted(self._store.values(), key=lambda t: (t.created_at, t.id), reverse=True)
        return [copy.deepcopy(t) for t in ordered]

    def update(self, transaction: Transaction, *, replace_items: bool = False) -> None:
        current = self._store.get(transaction.id)
        if current is None:
            raise EntityNotFoundError(f"Transaction #{transaction.id} not found")
        if current.version != transaction.version:
            raise ConcurrentModificationError("version mismatch")
        transaction.version += 1
        saved = copy.deepcopy(transaction)
        if not replace_items:
            saved.items = current.items
        self._store[transaction.id] = saved

    def delete(self, transaction_id: int) -> bool:
        return self._store.pop(transaction_id, None) is not None


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = p

    def get_by_id(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def list_all(self) -> list[Product]:
        return sorted(self._store.values(), key=lambda p: p.name)

    def save(self, product: Product) -> None:
        self._store[product.id] = product

    def remove(self, product_id: str) -> None:
        del self._store[product_id]


class FakeCustomerRepository(CustomerRepository):

    def __init__(self, customers: list[Customer] | None = None) -> None:
        self._store: dict[str, Customer] = {}
        for c in customers or []:
            self.add(c)

    def get_by_id(self, customer_id: str) -> Customer | None:
        return self._store.get(customer_id)

    def list_all(self) -> list[Customer]:
        return sorted(self._store.values(), key=lambda c: c.name)

    def add(self, customer: Customer) -> None:
        if customer.id is None:
            customer.id = str(len(self._store) + 1)
        self._store[customer.id] = customer


class FakeSalesRepository(SalesRepository):

    def __init__(self, people: list[SalesPerson] | None = None) -> None:
        self._store: dict[str, SalesPerson] = {}
        for s in people or []:
            self.add(s)

    def get_by_id(self, sales_id: str) -> SalesPerson | None:
        return self._store.get(sales_id)

    def list_all(self) -> list[SalesPerson]:
        return sorted(self._store.values(), key=lambda s: s.name)

    def add(self, sales: SalesPerson) -> None:
        if sales.id is None:
            sales.id = str(len(self._store) + 1)
        self._store[sales.id] = sales
