"""Application services: sales summary and monthly recap (queries).

Both replay every saved transaction through the report aggregator.  The
summary counts drafts and finals alike; the recap lists completed notas
only.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, tzinfo

from nota.application.dto import (
    DailyRevenueDTO,
    RecapRowDTO,
    SalesRecapDTO,
    SalesSummaryDTO,
    TopProductDTO,
)
from nota.domain.model.transaction import utcnow
from nota.domain.repository.transaction_repository import TransactionRepository
from nota.domain.service import report_aggregator
from nota.domain.service.report_aggregator import format_date_id

# Periods where a month filter narrows the range further.
MONTH_FILTERED_PERIODS = ("all", "year")


class SalesReportHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._tz = tz
        self._clock = clock

    def handle(self, period: str = "all", month: int | None = None) -> SalesSummaryDTO:
        start, end = report_aggregator.period_range(period, self._clock(), self._tz)
        if period not in MONTH_FILTERED_PERIODS:
            month = None
        summary = report_aggregator.summarize(
            self._transaction_repo.list_all(), start, end, month=month, tz=self._tz
        )
        return SalesSummaryDTO(
            period=period,
            month=month,
            total_revenue=str(summary.total_revenue),
            total_transactions=summary.total_transactions,
            average_transaction=str(summary.average_transaction),
            daily_revenue=[DailyRevenueDTO(d.date, str(d.amount)) for d in summary.daily_revenue],
            top_products=[
                TopProductDTO(p.name, p.unit, p.quantity, str(p.revenue))
                for p in summary.top_products
            ],
        )


class SalesRecapHandler:

    def __init__(self, transaction_repo: TransactionRepository, tz: tzinfo | None = None) -> None:
        self._transaction_repo = transaction_repo
        self._tz = tz

    def handle(self, month: int, year: int) -> SalesRecapDTO:
        result = report_aggregator.recap(self._transaction_repo.list_all(), month, year, self._tz)
        rows = []
        for row in result.rows:
            created = row.created_at.astimezone(self._tz) if self._tz else row.created_at
            rows.append(
                RecapRowDTO(
                    transaction_number=row.transaction_number,
                    sales_name=row.sales_name or "-",
                    customer_name=row.customer_name,
                    date=format_date_id(created.date()),
                    payment_term=row.payment_term_label,
                    total=str(row.total_amount),
                )
            )
        return SalesRecapDTO(month=month, year=year, rows=rows, total=str(result.total))
