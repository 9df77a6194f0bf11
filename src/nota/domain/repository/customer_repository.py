"""Abstract repositories for customers and sales people."""

from __future__ import annotations

from abc import ABC, abstractmethod

from nota.domain.model.customer import Customer, SalesPerson


class CustomerRepository(ABC):

    @abstractmethod
    def get_by_id(self, customer_id: str) -> Customer | None:
        """Return a customer by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Customer]:
        """Return every customer, ordered by name."""

    @abstractmethod
    def add(self, customer: Customer) -> None:
        """Persist a new customer and assign its ID."""


class SalesRepository(ABC):

    @abstractmethod
    def get_by_id(self, sales_id: str) -> SalesPerson | None:
        """Return a sales person by ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[SalesPerson]:
        """Return every sales person, ordered by name."""

    @abstractmethod
    def add(self, sales: SalesPerson) -> None:
        """Persist a new sales person and assign its ID."""
