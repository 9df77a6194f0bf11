"""Composition root: builds the store-backed repositories from settings.

CLI commands get their repositories here; settings and the store are
cached until ``reset()``.
"""

from __future__ import annotations

from functools import lru_cache

from nota.infrastructure.config import Settings, load_settings
from nota.infrastructure.persistence.json_record_store import JsonRecordStore
from nota.infrastructure.persistence.store_customer_repository import (
    StoreCustomerRepository,
    StoreSalesRepository,
)
from nota.infrastructure.persistence.store_product_repository import (
    StoreProductRepository,
)
from nota.infrastructure.persistence.store_transaction_repository import (
    StoreTransactionRepository,
)


@lru_cache(maxsize=1)
def settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def record_store() -> JsonRecordStore:
    cfg = settings()
    return JsonRecordStore(cfg.store_file, timeout=cfg.store_timeout)


def product_repository() -> StoreProductRepository:
    return StoreProductRepository(record_store())


def customer_repository() -> StoreCustomerRepository:
    return StoreCustomerRepository(record_store())


def sales_repository() -> StoreSalesRepository:
    return StoreSalesRepository(record_store())


def transaction_repository() -> StoreTransactionRepository:
    cfg = settings()
    return StoreTransactionRepository(
        record_store(),
        prefix=cfg.transaction_prefix,
        counter_seed=cfg.counter_seed,
    )


def reset() -> None:
    """Forget cached settings and store (the environment changed)."""
    settings.cache_clear()
    record_store.cache_clear()
