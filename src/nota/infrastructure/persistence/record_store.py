"""Generic record store: the persistence boundary.

Repositories talk to storage only through ``RecordStore``: select, insert,
update and delete on named tables of JSON-compatible rows, plus
``atomic()`` to group calls into one all-or-nothing unit.

The store raises its own ``StoreError`` family.  Repositories translate
those into domain exceptions (see ``translate_store_errors``).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from typing import Any

from nota.domain.exceptions import (
    DuplicateTransactionNumberError,
    PersistenceFailure,
    ReferentialConflictError,
)

logger = logging.getLogger(__name__)

Row = dict[str, Any]
Filter = Mapping[str, Any]


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """Base class for failures reported by a record store."""


class UniqueViolation(StoreError):

    def __init__(self, table: str, column: str, value: Any) -> None:
        super().__init__(f"duplicate key value violates unique constraint {table}.{column} = {value!r}")
        self.table = table
        self.column = column
        self.value = value


class ForeignKeyViolation(StoreError):

    def __init__(self, table: str, column: str, value: Any, detail: str) -> None:
        super().__init__(f"{detail}: {table}.{column} = {value!r} violates foreign key constraint")
        self.table = table
        self.column = column
        self.value = value


class StoreTimeout(StoreError):
    """The store could not be reached within the configured timeout."""


class UnknownTable(StoreError):
    pass


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Reference:
    table: str
    on_delete: str = "restrict"  # or "cascade"


@dataclass(frozen=True)
class TableSpec:
    name: str
    unique: tuple[str, ...] = ()
    references: Mapping[str, Reference] = field(default_factory=dict)


SCHEMA: tuple[TableSpec, ...] = (
    TableSpec("products"),
    TableSpec("customers"),
    TableSpec("sales"),
    TableSpec("transactions", unique=("transaction_number",)),
    TableSpec(
        "transaction_items",
        references={
            "transaction_id": Reference("transactions", on_delete="cascade"),
            "product_id": Reference("products", on_delete="restrict"),
        },
    ),
    TableSpec("settings", unique=("key",)),
)


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


class RecordStore(ABC):

    @abstractmethod
    def select(
        self,
        table: str,
        filter: Filter | None = None,
        order: Sequence[str] = (),
    ) -> list[Row]:
        """Return copies of matching rows.

        ``filter`` maps column to required value.  ``order`` lists columns;
        a leading ``-`` sorts that column descending.
        """

    @abstractmethod
    def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        """Insert rows, assigning an integer ``id`` where missing."""

    @abstractmethod
    def update(self, table: str, patch: Row, filter: Filter) -> list[Row]:
        """Apply ``patch`` to matching rows and return the updated rows."""

    @abstractmethod
    def delete(self, table: str, filter: Filter) -> int:
        """Delete matching rows, applying reference rules; return the count."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group calls so they all apply or none do.  Nestable."""


# ---------------------------------------------------------------------------
# Boundary translation
# ---------------------------------------------------------------------------


@contextmanager
def translate_store_errors(action: str) -> Iterator[None]:
    """Re-raise store errors as domain persistence errors.

    The store's own message is logged, never passed to the user.
    """
    try:
        yield
    except UniqueViolation as exc:
        logger.error("%s failed: %s", action, exc)
        if exc.table == "transactions" and exc.column == "transaction_number":
            raise DuplicateTransactionNumberError(f"{action}: {exc}") from exc
        raise PersistenceFailure(f"{action}: {exc}") from exc
    except ForeignKeyViolation as exc:
        logger.error("%s failed: %s", action, exc)
        raise ReferentialConflictError(f"{action}: {exc}") from exc
    except StoreError as exc:
        logger.error("%s failed: %s", action, exc)
        raise PersistenceFailure(f"{action}: {exc}") from exc
