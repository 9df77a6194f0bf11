import logging

import click

from nota.infrastructure import bootstrap
from nota.infrastructure.cli.customer_commands import (
    customer_add,
    customer_list,
    sales_add,
    sales_list,
)
from nota.infrastructure.cli.product_commands import product_add, product_list, product_quote
from nota.infrastructure.cli.report_commands import report_recap, report_summary
from nota.infrastructure.cli.transaction_commands import (
    transaction_create,
    transaction_delete,
    transaction_edit,
    transaction_finalize,
    transaction_list,
    transaction_next_number,
    transaction_show,
)
from nota.infrastructure.config import ConfigurationError


@click.group()
def cli() -> None:
    """Nota: sales order notes with tiered discounts."""
    try:
        settings = bootstrap.settings()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def transaction() -> None:
    """Manage notas (draft and final transactions)."""


@cli.group()
def report() -> None:
    """Revenue reports."""


@cli.group()
def product() -> None:
    """Browse the product catalog."""


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.group()
def sales() -> None:
    """Manage sales people."""


# Register subcommands
transaction.add_command(transaction_create)
transaction.add_command(transaction_edit)
transaction.add_command(transaction_finalize)
transaction.add_command(transaction_delete)
transaction.add_command(transaction_show)
transaction.add_command(transaction_list)
transaction.add_command(transaction_next_number)
report.add_command(report_summary)
report.add_command(report_recap)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_quote)
customer.add_command(customer_add)
customer.add_command(customer_list)
sales.add_command(sales_add)
sales.add_command(sales_list)
