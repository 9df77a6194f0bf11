"""CLI commands for revenue reports."""

from __future__ import annotations

import logging
from datetime import datetime

import click

from nota.application.sales_report import SalesRecapHandler, SalesReportHandler
from nota.domain.exceptions import DomainException
from nota.domain.service.report_aggregator import PERIODS
from nota.infrastructure.bootstrap import settings, transaction_repository

logger = logging.getLogger(__name__)


@click.command("summary")
@click.option("--period", type=click.Choice(list(PERIODS)), default="month", show_default=True)
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Month filter for 'all' and 'year'.")
def report_summary(period: str, month: int | None) -> None:
    """Revenue, daily breakdown and top products."""
    handler = SalesReportHandler(transaction_repo=transaction_repository(), tz=settings().tz)

    try:
        dto = handler.handle(period=period, month=month)
    except DomainException as exc:
        logger.warning("Sales report failed: %s", exc)
        raise click.ClickException(exc.user_message)

    click.echo(f"Period: {dto.period}" + (f" (month {dto.month})" if dto.month else ""))
    click.echo(f"Total revenue:        {dto.total_revenue}")
    click.echo(f"Transactions:         {dto.total_transactions}")
    click.echo(f"Average transaction:  {dto.average_transaction}")

    click.echo()
    click.echo("Daily revenue")
    for day in dto.daily_revenue:
        click.echo(f"  {day.date}  {day.amount:>16}")

    click.echo()
    click.echo("Top products")
    for rank, product in enumerate(dto.top_products, start=1):
        click.echo(
            f"  {rank}. {product.name:<34} {product.quantity:>5} {product.unit:<7} {product.revenue:>16}"
        )


@click.command("recap")
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Defaults to the current month.")
@click.option("--year", type=int, default=None, help="Defaults to the current year.")
def report_recap(month: int | None, year: int | None) -> None:
    """Completed notas of one month with payment-term due dates."""
    cfg = settings()
    today = datetime.now(cfg.tz)
    handler = SalesRecapHandler(transaction_repo=transaction_repository(), tz=cfg.tz)

    try:
        dto = handler.handle(month=month or today.month, year=year or today.year)
    except DomainException as exc:
        logger.warning("Sales recap failed: %s", exc)
        raise click.ClickException(exc.user_message)

    if not dto.rows:
        click.echo(f"No completed transactions in {dto.month:02d}/{dto.year}.")
        return

    click.echo(f"{'No':>3} {'Number':<22} {'Sales':<14} {'Customer':<22} {'Date':<12} {'Term':<24} {'Total':>16}")
    click.echo("-" * 119)
    for index, row in enumerate(dto.rows, start=1):
        click.echo(
            f"{index:>3} {row.transaction_number:<22} {row.sales_name:<14} {row.customer_name:<22} "
            f"{row.date:<12} {row.payment_term:<24} {row.total:>16}"
        )
    click.echo("-" * 119)
    click.echo(f"{'Total':<102} {dto.total:>16}")
