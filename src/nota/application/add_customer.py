"""Application services: customer records (add and list)."""

from __future__ import annotations

import logging

from nota.domain.model.customer import Customer
from nota.domain.repository.customer_repository import CustomerRepository

logger = logging.getLogger(__name__)


class AddCustomerHandler:

    def __init__(self, customer_repo: CustomerRepository) -> None:
        self._customer_repo = customer_repo

    def handle(self, name: str, address: str = "", payment_terms: list[str] | None = None) -> Customer:
        customer = Customer.create(name, address, payment_terms)
        self._customer_repo.add(customer)
        logger.info("Added customer #%s %s", customer.id, customer.name)
        return customer


class ListCustomersHandler:

    def __init__(self, customer_repo: CustomerRepository) -> None:
        self._customer_repo = customer_repo

    def handle(self) -> list[Customer]:
        return self._customer_repo.list_all()
