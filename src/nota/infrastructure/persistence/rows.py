"""Row <-> value conversions shared by the store-backed repositories.

Stored rows are not trusted: any row that fails to parse into a domain
record surfaces as CorruptRecordError.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from nota.domain.exceptions import CorruptRecordError, ValidationError
from nota.domain.model.value_objects import Money


@contextmanager
def parse_guard(table: str, row: dict) -> Iterator[None]:
    try:
        yield
    except (AttributeError, KeyError, TypeError, ValueError, InvalidOperation, ValidationError) as exc:
        raise CorruptRecordError(
            f"Malformed {table} row {row.get('id')!r}: {exc!r}"
        ) from exc


def money_to_raw(money: Money | None) -> str | None:
    return None if money is None else str(money.amount)


def money_from_raw(raw: str | int | float | None) -> Money | None:
    if raw is None or raw == "":
        return None
    return Money(Decimal(str(raw)))


def decimal_from_raw(raw: str | int | float | None) -> Decimal | None:
    if raw is None or raw == "":
        return None
    return Decimal(str(raw))


def datetime_to_raw(value: datetime) -> str:
    return value.isoformat()


def datetime_from_raw(raw: str) -> datetime:
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def id_from_raw(raw: int | str) -> str:
    return str(raw)


def id_to_filter(value: str) -> int | str:
    """Integer-looking IDs are stored as integers by the store's sequences."""
    return int(value) if value.isdigit() else value
