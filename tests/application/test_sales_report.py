"""Tests for the sales summary and recap use cases."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from nota.application.sales_report import SalesRecapHandler, SalesReportHandler
from nota.domain.model.product import Product
from nota.domain.model.transaction import Transaction, TransactionStatus
from nota.domain.model.value_objects import Money
from nota.domain.service.line_item_computer import compute_line_item
from tests.fakes import FakeTransactionRepository

JAKARTA = ZoneInfo("Asia/Jakarta")
NOW = datetime(2025, 6, 15, 8, 0, tzinfo=timezone.utc)
WIDGET = Product(id="1", name="Widget", price=Money.of("1000"))


def _seed(repo, created_at, quantity, status=TransactionStatus.COMPLETED, term=None, sales=None):
    repo.add(Transaction(
        id=None,
        transaction_number=None,
        customer_name="Toko Maju",
        items=[compute_line_item(WIDGET, quantity, "buah")],
        status=status,
        payment_terms_days=term,
        sales_name=sales,
        created_at=created_at,
    ))


def _repo():
    repo = FakeTransactionRepository()
    _seed(repo, datetime(2025, 6, 15, 1, tzinfo=timezone.utc), 2)                      # today
    _seed(repo, datetime(2025, 6, 3, tzinfo=timezone.utc), 4, TransactionStatus.PENDING, term="Cash")
    _seed(repo, datetime(2025, 6, 1, tzinfo=timezone.utc), 1, term="30 hari", sales="Budi")
    _seed(repo, datetime(2025, 2, 1, tzinfo=timezone.utc), 10)
    _seed(repo, datetime(2024, 6, 1, tzinfo=timezone.utc), 100)
    return repo


class TestSalesReport:

    def test_month_counts_drafts_and_finals(self):
        dto = SalesReportHandler(_repo(), tz=JAKARTA, clock=lambda: NOW).handle("month")
        assert dto.total_transactions == 3
        assert dto.total_revenue == "Rp 7.000"
        assert dto.average_transaction == "Rp 2.333,33"

    def test_day(self):
        dto = SalesReportHandler(_repo(), tz=JAKARTA, clock=lambda: NOW).handle("day")
        assert dto.total_transactions == 1
        assert [d.date for d in dto.daily_revenue] == ["2025-06-15"]

    def test_year_with_month_filter(self):
        dto = SalesReportHandler(_repo(), tz=JAKARTA, clock=lambda: NOW).handle("year", month=2)
        assert dto.total_transactions == 1
        assert dto.month == 2

    def test_month_filter_ignored_for_day_and_month(self):
        dto = SalesReportHandler(_repo(), tz=JAKARTA, clock=lambda: NOW).handle("month", month=2)
        assert dto.total_transactions == 3
        assert dto.month is None

    def test_all_with_month(self):
        dto = SalesReportHandler(_repo(), tz=JAKARTA, clock=lambda: NOW).handle("all", month=6)
        assert dto.total_transactions == 4

    def test_top_products(self):
        dto = SalesReportHandler(_repo(), tz=JAKARTA, clock=lambda: NOW).handle("all")
        assert dto.top_products[0].name == "Widget (100 buah)"
        assert dto.top_products[0].revenue == "Rp 100.000"


class TestSalesRecap:

    def test_completed_rows_with_terms(self):
        dto = SalesRecapHandler(_repo(), tz=JAKARTA).handle(month=6, year=2025)
        assert [r.total for r in dto.rows] == ["Rp 1.000", "Rp 2.000"]
        first = dto.rows[0]
        assert first.sales_name == "Budi"
        assert first.date == "1 Jun 2025"
        assert first.payment_term == "30 hari (1 Jul 2025)"
        assert dto.rows[1].sales_name == "-"
        assert dto.rows[1].payment_term == "-"
        assert dto.total == "Rp 3.000"

    def test_empty_month(self):
        dto = SalesRecapHandler(_repo(), tz=JAKARTA).handle(month=3, year=2025)
        assert dto.rows == []
        assert dto.total == "Rp 0"
