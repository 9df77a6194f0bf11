"""RecordStore-backed implementations of CustomerRepository and SalesRepository."""

from __future__ import annotations

from nota.domain.model.customer import Customer, SalesPerson
from nota.domain.repository.customer_repository import CustomerRepository, SalesRepository
from nota.infrastructure.persistence.record_store import RecordStore, translate_store_errors
from nota.infrastructure.persistence.rows import id_from_raw, id_to_filter, parse_guard


class StoreCustomerRepository(CustomerRepository):

    TABLE = "customers"

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def get_by_id(self, customer_id: str) -> Customer | None:
        with translate_store_errors("Load customer"):
            rows = self._store.select(self.TABLE, {"id": id_to_filter(customer_id)})
        return self._to_domain(rows[0]) if rows else None

    def list_all(self) -> list[Customer]:
        with translate_store_errors("List customers"):
            rows = self._store.select(self.TABLE, order=("name",))
        return [self._to_domain(raw) for raw in rows]

    def add(self, customer: Customer) -> None:
        raw = {
            "name": customer.name,
            "address": customer.address,
            "payment_terms": list(customer.payment_terms),
        }
        with translate_store_errors("Add customer"):
            (inserted,) = self._store.insert(self.TABLE, [raw])
        customer.id = id_from_raw(inserted["id"])

    def _to_domain(self, raw: dict) -> Customer:
        with parse_guard(self.TABLE, raw):
            return Customer(
                id=id_from_raw(raw["id"]),
                name=raw["name"],
                address=raw.get("address") or "",
                payment_terms=[str(t) for t in raw.get("payment_terms") or []],
            )


class StoreSalesRepository(SalesRepository):

    TABLE = "sales"

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def get_by_id(self, sales_id: str) -> SalesPerson | None:
        with translate_store_errors("Load sales"):
            rows = self._store.select(self.TABLE, {"id": id_to_filter(sales_id)})
        return self._to_domain(rows[0]) if rows else None

    def list_all(self) -> list[SalesPerson]:
        with translate_store_errors("List sales"):
            rows = self._store.select(self.TABLE, order=("name",))
        return [self._to_domain(raw) for raw in rows]

    def add(self, sales: SalesPerson) -> None:
        with translate_store_errors("Add sales"):
            (inserted,) = self._store.insert(self.TABLE, [{"name": sales.name, "phone": sales.phone}])
        sales.id = id_from_raw(inserted["id"])

    def _to_domain(self, raw: dict) -> SalesPerson:
        with parse_guard(self.TABLE, raw):
            return SalesPerson(
                id=id_from_raw(raw["id"]),
                name=raw["name"],
                phone=raw.get("phone") or "",
            )
