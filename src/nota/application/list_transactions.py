"""Application service: transaction history (query).

Mirrors the history screen: a tab picks drafts or finals, a period narrows
by creation date, an optional month further narrows ``all`` and ``year``,
and a search matches transaction number or customer name.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, time, tzinfo

from nota.application.dto import TransactionDTO, transaction_to_dto
from nota.domain.exceptions import ValidationError
from nota.domain.model.transaction import Transaction, TransactionStatus, utcnow
from nota.domain.repository.transaction_repository import TransactionRepository

TABS = {"draft": TransactionStatus.PENDING, "final": TransactionStatus.COMPLETED}
HISTORY_PERIODS = ("all", "today", "month", "year")


class ListTransactionsHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._tz = tz
        self._clock = clock

    def handle(
        self,
        tab: str = "draft",
        period: str = "all",
        month: int | None = None,
        search: str = "",
    ) -> list[TransactionDTO]:
        if tab not in TABS:
            raise ValidationError(f"Unknown tab {tab!r}; expected one of {tuple(TABS)}")
        if period not in HISTORY_PERIODS:
            raise ValidationError(f"Unknown period {period!r}; expected one of {HISTORY_PERIODS}")
        if month is not None and not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")

        status = TABS[tab]
        now = self._local(self._clock())
        needle = search.strip().lower()

        result = []
        for transaction in self._transaction_repo.list_all():
            if transaction.status != status:
                continue
            if not self._in_period(transaction, period, month, now):
                continue
            if needle and not (
                needle in (transaction.transaction_number or "").lower()
                or needle in transaction.customer_name.lower()
            ):
                continue
            result.append(transaction)
        # list_all is newest first already; keep that order explicit.
        result.sort(key=lambda t: t.created_at, reverse=True)
        return [transaction_to_dto(t) for t in result]

    def _in_period(self, transaction: Transaction, period: str, month: int | None, now: datetime) -> bool:
        created = self._local(transaction.created_at)
        if period == "today":
            return created >= datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
        if period == "month":
            return created.year == now.year and created.month == now.month
        if period == "year":
            if created < datetime(now.year, 1, 1, tzinfo=now.tzinfo):
                return False
        return month is None or created.month == month

    def _local(self, moment: datetime) -> datetime:
        if self._tz is None or moment.tzinfo is None:
            return moment
        return moment.astimezone(self._tz)
