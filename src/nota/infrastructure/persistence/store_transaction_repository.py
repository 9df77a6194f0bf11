"""RecordStore-backed implementation of TransactionRepository.

Multi-step writes run inside one ``atomic()`` block:

- add:    read counter -> store counter + 1 -> insert transaction -> insert items
- update: check version -> delete items -> insert items -> update scalars

so a failure at any step leaves the store as it was.  Every transaction
row carries a ``version`` that each update checks and bumps.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from nota.domain.exceptions import ConcurrentModificationError, EntityNotFoundError
from nota.domain.model.transaction import (
    DiscountDetails,
    LineItem,
    Transaction,
    TransactionStatus,
    utcnow,
)
from nota.domain.model.transaction_number import (
    COUNTER_SETTING_KEY,
    DEFAULT_COUNTER_SEED,
    DEFAULT_PREFIX,
    format_transaction_number,
    next_counter,
    parse_counter,
)
from nota.domain.model.value_objects import Quantity
from nota.domain.repository.transaction_repository import TransactionRepository
from nota.infrastructure.persistence.record_store import RecordStore, translate_store_errors
from nota.infrastructure.persistence.rows import (
    datetime_from_raw,
    datetime_to_raw,
    decimal_from_raw,
    money_from_raw,
    money_to_raw,
    parse_guard,
)

logger = logging.getLogger(__name__)

TRANSACTIONS = "transactions"
ITEMS = "transaction_items"
SETTINGS = "settings"


class StoreTransactionRepository(TransactionRepository):

    def __init__(
        self,
        store: RecordStore,
        prefix: str = DEFAULT_PREFIX,
        counter_seed: str = DEFAULT_COUNTER_SEED,
    ) -> None:
        self._store = store
        self._prefix = prefix
        self._counter_seed = counter_seed

    # --- TransactionRepository interface --------------------------------------

    def peek_next_number(self) -> str:
        with translate_store_errors("Read transaction counter"):
            rows = self._store.select(SETTINGS, {"key": COUNTER_SETTING_KEY})
        counter = rows[0]["value"] if rows else self._counter_seed
        parse_counter(counter)
        return format_transaction_number(self._prefix, counter)

    def add(self, transaction: Transaction) -> None:
        with translate_store_errors("Create transaction"):
            with self._store.atomic():
                number = format_transaction_number(self._prefix, self._take_counter())
                (row,) = self._store.insert(
                    TRANSACTIONS, [self._transaction_to_raw(transaction, number, version=1)]
                )
                item_rows = self._store.insert(
                    ITEMS, [self._item_to_raw(item, row["id"]) for item in transaction.items]
                )

        transaction.id = row["id"]
        transaction.transaction_number = number
        transaction.version = 1
        for item, item_row in zip(transaction.items, item_rows):
            item.id = item_row["id"]

    def get_by_id(self, transaction_id: int) -> Transaction | None:
        return self._get_one({"id": transaction_id})

    def get_by_number(self, transaction_number: str) -> Transaction | None:
        return self._get_one({"transaction_number": transaction_number})

    def list_all(self) -> list[Transaction]:
        with translate_store_errors("List transactions"):
            with self._store.atomic():
                rows = self._store.select(TRANSACTIONS, order=("-created_at", "-id"))
                item_rows = self._store.select(ITEMS, order=("id",))

        items_by_transaction: dict[int, list[dict]] = defaultdict(list)
        for item_row in item_rows:
            items_by_transaction[item_row.get("transaction_id")].append(item_row)
        return [self._to_domain(row, items_by_transaction[row["id"]]) for row in rows]

    def update(self, transaction: Transaction, *, replace_items: bool = False) -> None:
        key = {"id": transaction.id}
        with translate_store_errors(f"Update transaction {transaction.transaction_number}"):
            with self._store.atomic():
                current = self._store.select(TRANSACTIONS, key)
                if not current:
                    raise EntityNotFoundError(f"Transaction #{transaction.id} not found")
                if current[0].get("version") != transaction.version:
                    raise ConcurrentModificationError(
                        f"Transaction {transaction.transaction_number} is at version "
                        f"{current[0].get('version')}, expected {transaction.version}"
                    )

                item_rows = None
                if replace_items:
                    self._store.delete(ITEMS, {"transaction_id": transaction.id})
                    item_rows = self._store.insert(
                        ITEMS, [self._item_to_raw(item, transaction.id) for item in transaction.items]
                    )

                patch = self._transaction_to_raw(
                    transaction, transaction.transaction_number, version=transaction.version + 1
                )
                del patch["id"]
                self._store.update(TRANSACTIONS, patch, {**key, "version": transaction.version})

        transaction.version += 1
        if item_rows is not None:
            for item, item_row in zip(transaction.items, item_rows):
                item.id = item_row["id"]

    def delete(self, transaction_id: int) -> bool:
        with translate_store_errors(f"Delete transaction #{transaction_id}"):
            return self._store.delete(TRANSACTIONS, {"id": transaction_id}) > 0

    # --- Counter --------------------------------------------------------------

    def _take_counter(self) -> str:
        """Return the current counter and store its successor.

        Must run inside an atomic block.
        """
        rows = self._store.select(SETTINGS, {"key": COUNTER_SETTING_KEY})
        now = datetime_to_raw(utcnow())
        if rows:
            counter = str(rows[0]["value"])
            self._store.update(
                SETTINGS,
                {"value": next_counter(counter), "updated_at": now},
                {"key": COUNTER_SETTING_KEY},
            )
        else:
            counter = self._counter_seed
            logger.info("Seeding %s at %s", COUNTER_SETTING_KEY, counter)
            self._store.insert(
                SETTINGS,
                [{"key": COUNTER_SETTING_KEY, "value": next_counter(counter), "updated_at": now}],
            )
        return counter

    # --- Loading --------------------------------------------------------------

    def _get_one(self, filter: dict) -> Transaction | None:
        with translate_store_errors("Load transaction"):
            with self._store.atomic():
                rows = self._store.select(TRANSACTIONS, filter)
                if not rows:
                    return None
                item_rows = self._store.select(ITEMS, {"transaction_id": rows[0]["id"]}, order=("id",))
        return self._to_domain(rows[0], item_rows)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _transaction_to_raw(transaction: Transaction, number: str | None, version: int) -> dict:
        return {
            "id": transaction.id,
            "transaction_number": number,
            "customer_name": transaction.customer_name,
            "customer_address": transaction.customer_address,
            "sales_id": transaction.sales_id,
            "sales_name": transaction.sales_name,
            "total_amount": money_to_raw(transaction.total_amount),
            "notes": transaction.notes,
            "payment_terms_days": transaction.payment_terms_days,
            "status": transaction.status.value,
            "created_at": datetime_to_raw(transaction.created_at),
            "updated_at": datetime_to_raw(transaction.updated_at),
            "version": version,
        }

    @staticmethod
    def _item_to_raw(item: LineItem, transaction_id: int) -> dict:
        details = None
        if item.discount_details is not None:
            details = {
                "discount1": str(item.discount_details.discount1),
                "discount2": str(item.discount_details.discount2),
            }
        return {
            "transaction_id": transaction_id,
            "product_id": item.product_id,
            "product_name": item.product_name,
            "quantity": item.quantity.value,
            "unit": item.unit,
            "unit_price": money_to_raw(item.unit_price),
            "discount_amount": money_to_raw(item.discount_amount),
            "discount_percent": str(item.discount_percent),
            "discount_details": details,
            "subtotal": money_to_raw(item.subtotal),
        }

    @staticmethod
    def _item_to_domain(raw: dict) -> LineItem:
        with parse_guard(ITEMS, raw):
            details = raw.get("discount_details")
            item = LineItem(
                id=raw["id"],
                product_id=str(raw["product_id"]),
                product_name=raw["product_name"],
                quantity=Quantity(int(raw["quantity"])),
                unit=raw["unit"],
                unit_price=money_from_raw(raw["unit_price"]),
                discount_amount=money_from_raw(raw.get("discount_amount") or "0"),
                discount_percent=decimal_from_raw(raw.get("discount_percent") or "0"),
                discount_details=DiscountDetails(
                    discount1=decimal_from_raw(details["discount1"]),
                    discount2=decimal_from_raw(details.get("discount2") or "0"),
                ) if details else None,
            )
            label = item.label
            if label.quantity != item.quantity.value or label.unit != item.unit:
                raise ValueError(
                    f"label {item.product_name!r} disagrees with "
                    f"quantity={item.quantity.value} unit={item.unit!r}"
                )
            if money_from_raw(raw["subtotal"]) != item.subtotal:
                raise ValueError(f"subtotal {raw['subtotal']} != unit_price x quantity")
            return item

    def _to_domain(self, raw: dict, item_rows: list[dict]) -> Transaction:
        items = [self._item_to_domain(r) for r in item_rows]
        with parse_guard(TRANSACTIONS, raw):
            transaction = Transaction(
                id=raw["id"],
                transaction_number=raw["transaction_number"],
                customer_name=raw["customer_name"],
                customer_address=raw.get("customer_address") or "",
                items=items,
                sales_id=raw.get("sales_id"),
                sales_name=raw.get("sales_name"),
                notes=raw.get("notes") or "",
                payment_terms_days=raw.get("payment_terms_days") or None,
                status=TransactionStatus(raw["status"]),
                created_at=datetime_from_raw(raw["created_at"]),
                updated_at=datetime_from_raw(raw.get("updated_at") or raw["created_at"]),
                version=int(raw.get("version") or 0),
            )
            if money_from_raw(raw["total_amount"]) != transaction.total_amount:
                raise ValueError(
                    f"total_amount {raw['total_amount']} != sum of line items "
                    f"{transaction.total_amount.amount}"
                )
            return transaction
