"""CLI commands for customers and sales people."""

from __future__ import annotations

import click

from nota.application.add_customer import AddCustomerHandler, ListCustomersHandler
from nota.application.add_sales import AddSalesHandler, ListSalesHandler
from nota.domain.exceptions import DomainException
from nota.infrastructure.bootstrap import customer_repository, sales_repository


@click.command("add")
@click.option("--name", required=True, help="Customer name.")
@click.option("--address", default="", help="Address.")
@click.option("--term", "terms", multiple=True, help="Catalog payment term (repeatable).")
def customer_add(name: str, address: str, terms: tuple[str, ...]) -> None:
    """Add a customer."""
    handler = AddCustomerHandler(customer_repo=customer_repository())

    try:
        customer = handler.handle(name=name, address=address, payment_terms=list(terms))
    except DomainException as exc:
        raise click.ClickException(exc.user_message)

    click.echo(f"Customer #{customer.id} '{customer.name}' added")


@click.command("list")
def customer_list() -> None:
    """List customers."""
    handler = ListCustomersHandler(customer_repo=customer_repository())

    try:
        customers = handler.handle()
    except DomainException as exc:
        raise click.ClickException(exc.user_message)

    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"{'ID':<6} {'Name':<28} {'Terms':<24} Address")
    click.echo("-" * 80)
    for c in customers:
        click.echo(f"{c.id:<6} {c.name:<28} {', '.join(c.payment_terms) or '-':<24} {c.address}")


@click.command("add")
@click.option("--name", required=True, help="Sales person name.")
@click.option("--phone", required=True, help="Phone number.")
def sales_add(name: str, phone: str) -> None:
    """Add a sales person."""
    handler = AddSalesHandler(sales_repo=sales_repository())

    try:
        sales = handler.handle(name=name, phone=phone)
    except DomainException as exc:
        raise click.ClickException(exc.user_message)

    click.echo(f"Sales #{sales.id} '{sales.name}' added")


@click.command("list")
def sales_list() -> None:
    """List sales people."""
    handler = ListSalesHandler(sales_repo=sales_repository())

    try:
        people = handler.handle()
    except DomainException as exc:
        raise click.ClickException(exc.user_message)

    if not people:
        click.echo("No sales people found.")
        return

    click.echo(f"{'ID':<6} {'Name':<28} Phone")
    click.echo("-" * 50)
    for s in people:
        click.echo(f"{s.id:<6} {s.name:<28} {s.phone}")
