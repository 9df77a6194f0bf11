"""Shared lookups for the customer and sales person a nota is saved for."""

from __future__ import annotations

from nota.domain.exceptions import EntityNotFoundError
from nota.domain.model.customer import Customer, SalesPerson
from nota.domain.repository.customer_repository import CustomerRepository, SalesRepository


def load_customer(customer_repo: CustomerRepository, customer_id: str) -> Customer:
    customer = customer_repo.get_by_id(customer_id)
    if customer is None:
        raise EntityNotFoundError(
            f"Customer #{customer_id} not found", user_message="Customer tidak ditemukan"
        )
    return customer


def load_sales(sales_repo: SalesRepository, sales_id: str | None) -> SalesPerson | None:
    if not sales_id:
        return None
    sales = sales_repo.get_by_id(sales_id)
    if sales is None:
        raise EntityNotFoundError(
            f"Sales #{sales_id} not found", user_message="Sales tidak ditemukan"
        )
    return sales


def normalize_payment_term(term: str | None) -> str | None:
    """Blank input means no term."""
    if term is None or not term.strip():
        return None
    return term.strip()
