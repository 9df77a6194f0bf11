"""Application services: sales people (add and list)."""

from __future__ import annotations

import logging

from nota.domain.model.customer import SalesPerson
from nota.domain.repository.customer_repository import SalesRepository

logger = logging.getLogger(__name__)


class AddSalesHandler:

    def __init__(self, sales_repo: SalesRepository) -> None:
        self._sales_repo = sales_repo

    def handle(self, name: str, phone: str) -> SalesPerson:
        sales = SalesPerson.create(name, phone)
        self._sales_repo.add(sales)
        logger.info("Added sales #%s %s", sales.id, sales.name)
        return sales


class ListSalesHandler:

    def __init__(self, sales_repo: SalesRepository) -> None:
        self._sales_repo = sales_repo

    def handle(self) -> list[SalesPerson]:
        return self._sales_repo.list_all()
