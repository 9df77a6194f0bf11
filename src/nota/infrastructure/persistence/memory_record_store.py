"""In-memory implementation of RecordStore.

Thread-safe: every call holds one re-entrant lock, acquired with the
configured timeout.  ``atomic()`` snapshots all tables when the outermost
block opens and restores the snapshot if the block raises; nested blocks
join the outermost one.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from nota.infrastructure.persistence.record_store import (
    SCHEMA,
    Filter,
    ForeignKeyViolation,
    RecordStore,
    Row,
    StoreTimeout,
    TableSpec,
    UniqueViolation,
    UnknownTable,
)


class MemoryRecordStore(RecordStore):

    def __init__(self, schema: Sequence[TableSpec] = SCHEMA, timeout: float = 5.0) -> None:
        self._specs = {spec.name: spec for spec in schema}
        self._tables: dict[str, list[Row]] = {name: [] for name in self._specs}
        self._sequences: dict[str, int] = {name: 0 for name in self._specs}
        self._timeout = timeout
        self._lock = threading.RLock()
        self._depth = 0
        self._dirty = False

    # --- RecordStore interface ------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._timeout):
            raise StoreTimeout(f"store busy: lock not acquired within {self._timeout}s")
        try:
            outermost = self._depth == 0
            if outermost:
                self._begin()
                self._dirty = False
                snapshot = copy.deepcopy((self._tables, self._sequences))
            self._depth += 1
            try:
                yield
                if outermost and self._dirty:
                    self._commit()
            except BaseException:
                if outermost:
                    self._tables, self._sequences = snapshot
                raise
            finally:
                self._depth -= 1
        finally:
            self._lock.release()

    def select(self, table: str, filter: Filter | None = None, order: Sequence[str] = ()) -> list[Row]:
        with self.atomic():
            rows = [copy.deepcopy(r) for r in self._rows(table) if _matches(r, filter)]
        # Sort by the last key first so earlier keys take precedence.
        for key in reversed(order):
            column = key.lstrip("-")
            rows.sort(key=lambda r: _sort_key(r.get(column)), reverse=key.startswith("-"))
        return rows

    def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        with self.atomic():
            stored = self._rows(table)
            inserted: list[Row] = []
            for row in rows:
                new = copy.deepcopy(dict(row))
                if new.get("id") is None:
                    self._sequences[table] += 1
                    new["id"] = self._sequences[table]
                elif isinstance(new["id"], int):
                    self._sequences[table] = max(self._sequences[table], new["id"])
                self._check_unique(table, new, ("id",) + self._specs[table].unique, skip=None)
                self._check_references(table, new, new.keys())
                stored.append(new)
                self._dirty = True
                inserted.append(copy.deepcopy(new))
            return inserted

    def update(self, table: str, patch: Row, filter: Filter) -> list[Row]:
        with self.atomic():
            updated: list[Row] = []
            for row in self._rows(table):
                if not _matches(row, filter):
                    continue
                candidate = {**row, **copy.deepcopy(patch)}
                columns = tuple(c for c in ("id",) + self._specs[table].unique if c in patch)
                self._check_unique(table, candidate, columns, skip=row)
                self._check_references(table, candidate, patch.keys())
                row.update(candidate)
                self._dirty = True
                updated.append(copy.deepcopy(row))
            return updated

    def delete(self, table: str, filter: Filter) -> int:
        with self.atomic():
            targets = [r for r in self._rows(table) if _matches(r, filter)]
            self._delete_rows(table, targets)
            return len(targets)

    # --- Hooks for persistent subclasses --------------------------------------

    def _begin(self) -> None:
        """Called when an outermost atomic block opens."""

    def _commit(self) -> None:
        """Called when an outermost atomic block that changed data completes."""

    # --- Internal helpers -----------------------------------------------------

    def _rows(self, table: str) -> list[Row]:
        try:
            return self._tables[table]
        except KeyError:
            raise UnknownTable(f"unknown table {table!r}") from None

    def _delete_rows(self, table: str, targets: list[Row]) -> None:
        if not targets:
            return
        ids = {r["id"] for r in targets}
        for spec in self._specs.values():
            for column, ref in spec.references.items():
                if ref.table != table:
                    continue
                children = [r for r in self._rows(spec.name) if r.get(column) in ids]
                if not children:
                    continue
                if ref.on_delete == "cascade":
                    self._delete_rows(spec.name, children)
                else:
                    raise ForeignKeyViolation(
                        spec.name, column, children[0].get(column),
                        f"delete on {table} is still referenced from {spec.name}",
                    )
        self._tables[table] = [r for r in self._rows(table) if r["id"] not in ids]
        self._dirty = True

    def _check_unique(self, table: str, row: Row, columns: Sequence[str], skip: Row | None) -> None:
        for column in columns:
            value = row.get(column)
            if value is None:
                continue
            for other in self._rows(table):
                if other is not skip and other.get(column) == value:
                    raise UniqueViolation(table, column, value)

    def _check_references(self, table: str, row: Row, columns) -> None:
        for column, ref in self._specs[table].references.items():
            if column not in columns:
                continue
            value = row.get(column)
            if value is None:
                continue
            if not any(r.get("id") == value for r in self._rows(ref.table)):
                raise ForeignKeyViolation(
                    table, column, value, f"insert or update on {table} has no matching {ref.table}"
                )


def _matches(row: Row, filter: Filter | None) -> bool:
    return all(row.get(column) == value for column, value in (filter or {}).items())


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is None, value if value is not None else 0)
