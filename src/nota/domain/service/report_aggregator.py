"""Domain service: revenue reports and the monthly recap.

Everything here is derived by replaying saved transactions and their line
items; nothing is cached.  Dates are calendar dates in the reporting time
zone when one is given, otherwise in each timestamp's own zone.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from nota.domain.exceptions import ValidationError
from nota.domain.model.transaction import Transaction, TransactionStatus
from nota.domain.model.value_objects import Money

TOP_PRODUCTS_LIMIT = 5
PERIODS = ("all", "day", "month", "year")

SHORT_MONTHS_ID = (
    "Jan", "Feb", "Mar", "Apr", "Mei", "Jun",
    "Jul", "Agu", "Sep", "Okt", "Nov", "Des",
)

_CASH_RE = re.compile(r"cash", re.IGNORECASE)
_DAYS_RE = re.compile(r"(\d+)")


@dataclass(frozen=True)
class DailyRevenue:
    date: str  # YYYY-MM-DD
    amount: Money


@dataclass(frozen=True)
class TopProduct:
    name: str
    unit: str
    quantity: int
    revenue: Money


@dataclass(frozen=True)
class SalesSummary:
    total_revenue: Money
    total_transactions: int
    average_transaction: Money
    daily_revenue: tuple[DailyRevenue, ...]
    top_products: tuple[TopProduct, ...]


@dataclass(frozen=True)
class RecapRow:
    transaction_number: str
    sales_name: str | None
    customer_name: str
    created_at: datetime
    payment_terms_days: str | None
    total_amount: Money
    payment_term_label: str


@dataclass(frozen=True)
class SalesRecap:
    month: int
    year: int
    rows: tuple[RecapRow, ...]

    @property
    def total(self) -> Money:
        result = Money.zero()
        for row in self.rows:
            result = result + row.total_amount
        return result


# --- Periods ------------------------------------------------------------------


def period_range(period: str, now: datetime, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Resolve a named report period to a [start, end) range.

    ``all`` spans from the epoch to the start of next year, ``day`` from
    local midnight to ``now``, ``month`` the current calendar month and
    ``year`` the current calendar year.
    """
    local_now = _local(now, tz)
    zone = local_now.tzinfo
    if period == "all":
        start = datetime(1970, 1, 1, tzinfo=zone)
        end = datetime(local_now.year + 1, 1, 1, tzinfo=zone)
    elif period == "day":
        start = datetime.combine(local_now.date(), time.min, tzinfo=zone)
        end = local_now
    elif period == "month":
        start = datetime(local_now.year, local_now.month, 1, tzinfo=zone)
        end = _next_month_start(local_now.year, local_now.month, zone)
    elif period == "year":
        start = datetime(local_now.year, 1, 1, tzinfo=zone)
        end = datetime(local_now.year + 1, 1, 1, tzinfo=zone)
    else:
        raise ValidationError(f"Unknown report period {period!r}; expected one of {PERIODS}")
    return start, end


# --- Sales summary ------------------------------------------------------------


def summarize(
    transactions: Iterable[Transaction],
    start: datetime,
    end: datetime,
    month: int | None = None,
    tz: tzinfo | None = None,
) -> SalesSummary:
    """Revenue figures for transactions created in [start, end).

    ``month`` (1-12) further keeps only transactions whose local creation
    date falls in that month of any year.
    """
    _check_month(month)
    selected = [
        t for t in transactions
        if start <= t.created_at < end
        and (month is None or _local(t.created_at, tz).month == month)
    ]

    total_revenue = Money.zero()
    daily: dict[str, Money] = {}
    for t in selected:
        total_revenue = total_revenue + t.total_amount
        day = _local(t.created_at, tz).date().isoformat()
        daily[day] = daily.get(day, Money.zero()) + t.total_amount

    count = len(selected)
    average = Money(total_revenue.amount / count) if count else Money.zero()

    return SalesSummary(
        total_revenue=total_revenue,
        total_transactions=count,
        average_transaction=average,
        daily_revenue=tuple(DailyRevenue(d, amount) for d, amount in sorted(daily.items())),
        top_products=top_products(selected),
    )


def top_products(transactions: Iterable[Transaction], limit: int = TOP_PRODUCTS_LIMIT) -> tuple[TopProduct, ...]:
    """Best sellers by revenue, grouped by (stored product_name, unit)."""
    totals: dict[tuple[str, str], tuple[int, Money]] = {}
    for t in transactions:
        for item in t.items:
            key = (item.product_name, item.unit)
            quantity, revenue = totals.get(key, (0, Money.zero()))
            totals[key] = (quantity + item.quantity.value, revenue + item.subtotal)

    ranked = sorted(totals.items(), key=lambda kv: kv[1][1].amount, reverse=True)
    return tuple(
        TopProduct(name=name, unit=unit, quantity=quantity, revenue=revenue)
        for (name, unit), (quantity, revenue) in ranked[:limit]
    )


# --- Monthly recap ------------------------------------------------------------


def recap(
    transactions: Iterable[Transaction],
    month: int,
    year: int,
    tz: tzinfo | None = None,
) -> SalesRecap:
    """Completed notas of one calendar month, oldest first."""
    _check_month(month)
    selected = []
    for t in transactions:
        if t.status != TransactionStatus.COMPLETED:
            continue
        local = _local(t.created_at, tz)
        if local.year == year and local.month == month:
            selected.append(t)
    selected.sort(key=lambda t: t.created_at)

    rows = tuple(
        RecapRow(
            transaction_number=t.transaction_number or "",
            sales_name=t.sales_name,
            customer_name=t.customer_name,
            created_at=t.created_at,
            payment_terms_days=t.payment_terms_days,
            total_amount=t.total_amount,
            payment_term_label=payment_term_label(t.payment_terms_days, t.created_at, tz),
        )
        for t in selected
    )
    return SalesRecap(month=month, year=year, rows=rows)


def payment_term_label(term: str | None, created_at: datetime, tz: tzinfo | None = None) -> str:
    """``Cash``, ``"<days> hari (<due date>)"`` or ``-``."""
    if not term:
        return "-"
    if _CASH_RE.search(term):
        return "Cash"
    match = _DAYS_RE.search(term)
    if match is None:
        return "-"
    days = int(match.group(1))
    due = _local(created_at, tz).date() + timedelta(days=days)
    return f"{days} hari ({format_date_id(due)})"


def format_date_id(value: date) -> str:
    """Short Indonesian date, e.g. ``4 Feb 2025``."""
    return f"{value.day} {SHORT_MONTHS_ID[value.month - 1]} {value.year}"


# --- Internal helpers ---------------------------------------------------------


def _local(moment: datetime, tz: tzinfo | None) -> datetime:
    if tz is None or moment.tzinfo is None:
        return moment
    return moment.astimezone(tz)


def _next_month_start(year: int, month: int, zone: tzinfo | None) -> datetime:
    if month == 12:
        return datetime(year + 1, 1, 1, tzinfo=zone)
    return datetime(year, month + 1, 1, tzinfo=zone)


def _check_month(month: int | None) -> None:
    if month is not None and not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
