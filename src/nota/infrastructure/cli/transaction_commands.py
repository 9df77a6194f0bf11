"""CLI commands for the Transaction aggregate."""

from __future__ import annotations

import logging

import click

from nota.application.build_cart import BuildCartHandler, revise_cart
from nota.application.create_transaction import CreateTransactionHandler
from nota.application.delete_transaction import DeleteTransactionHandler
from nota.application.dto import CartItemSpec, TransactionDTO
from nota.application.edit_transaction import EditTransactionHandler
from nota.application.finalize_transaction import FinalizeTransactionHandler
from nota.application.list_transactions import HISTORY_PERIODS, TABS, ListTransactionsHandler
from nota.application.load_draft import LoadDraftHandler
from nota.application.show_transaction import NextTransactionNumberHandler, ShowTransactionHandler
from nota.domain.exceptions import DomainException
from nota.infrastructure.bootstrap import (
    customer_repository,
    product_repository,
    sales_repository,
    settings,
    transaction_repository,
)

logger = logging.getLogger(__name__)


def _parse_items(raw: str) -> list[CartItemSpec]:
    """Parse 'P1:3,P2:12:box' into CartItemSpec list."""
    specs: list[CartItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = [p.strip() for p in entry.split(":")]
        if len(parts) not in (2, 3) or not parts[0]:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductId:Quantity[:Unit]'."
            )
        try:
            qty = int(parts[1])
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{parts[1]}' for product '{parts[0]}'."
            )
        unit = parts[2] if len(parts) == 3 and parts[2] else None
        specs.append(CartItemSpec(product_id=parts[0], quantity=qty, unit=unit))
    return specs


def _display_transaction(dto: TransactionDTO) -> None:
    """Shared formatting for displaying a nota."""
    click.echo(f"Nota {dto.transaction_number}  (#{dto.id}, status={dto.status}, v{dto.version})")
    click.echo(f"Customer: {dto.customer_name}")
    if dto.customer_address:
        click.echo(f"Address:  {dto.customer_address}")
    click.echo(f"Sales:    {dto.sales_name or '-'}")
    term = dto.payment_terms_days or "-"
    if dto.payment_term_is_custom:
        term += " (custom)"
    click.echo(f"Term:     {term}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()
    click.echo(f"  {'Product':<28} {'Qty':>5} {'Unit':<7} {'Price':>14} {'Disc':>11} {'Subtotal':>16}")
    click.echo(f"  {'-'*86}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<28} {item.quantity:>5} {item.unit:<7} "
            f"{item.unit_price:>14} {item.discounts or '-':>11} {item.subtotal:>16}"
        )
    click.echo(f"  {'-'*86}")
    click.echo(f"  {'Total':<70} {dto.total:>16}")


def _fail(action: str, exc: DomainException) -> click.ClickException:
    logger.warning("%s failed: %s", action, exc)
    return click.ClickException(exc.user_message)


@click.command("create")
@click.option("--customer", "customer_id", required=True, help="Customer ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty[:Unit],...'.")
@click.option("--sales", "sales_id", default=None, help="Sales person ID.")
@click.option("--notes", default="", help="Free-text notes.")
@click.option("--term", default=None, help="Payment term, e.g. 'Cash' or '30 hari'.")
def transaction_create(
    customer_id: str, items: str, sales_id: str | None, notes: str, term: str | None
) -> None:
    """Save a new draft nota."""
    specs = _parse_items(items)

    try:
        cart = BuildCartHandler(product_repo=product_repository()).handle(specs)
        handler = CreateTransactionHandler(
            transaction_repo=transaction_repository(),
            customer_repo=customer_repository(),
            sales_repo=sales_repository(),
        )
        dto = handler.handle(
            customer_id=customer_id, cart=cart, sales_id=sales_id, notes=notes, payment_term=term
        )
    except DomainException as exc:
        raise _fail("Create nota", exc)

    click.echo(f"Draft saved as {dto.transaction_number}")
    _display_transaction(dto)


@click.command("edit")
@click.option("--id", "transaction_id", required=True, type=int, help="Transaction ID to edit.")
@click.option("--items", default=None, help="Replace the cart with 'ProductId:Qty[:Unit],...'.")
@click.option("--add", "add_items", default=None, help="Append items to the saved cart.")
@click.option("--remove", "remove_ids", multiple=True, help="Product ID to drop from the cart.")
@click.option("--set", "set_items", default=None, help="Change saved lines as 'ProductId:Qty[:Unit],...'.")
@click.option("--customer", "customer_id", default=None, help="New customer ID.")
@click.option("--sales", "sales_id", default=None, help="New sales person ID.")
@click.option("--notes", default=None, help="New notes.")
@click.option("--term", default=None, help="New payment term.")
def transaction_edit(
    transaction_id: int,
    items: str | None,
    add_items: str | None,
    remove_ids: tuple[str, ...],
    set_items: str | None,
    customer_id: str | None,
    sales_id: str | None,
    notes: str | None,
    term: str | None,
) -> None:
    """Edit a draft nota; unspecified fields keep their saved values."""
    replace_specs = _parse_items(items) if items else None
    set_specs = _parse_items(set_items) if set_items else []
    add_specs = _parse_items(add_items) if add_items else []

    try:
        draft = LoadDraftHandler(
            transaction_repo=transaction_repository(),
            product_repo=product_repository(),
            customer_repo=customer_repository(),
            sales_repo=sales_repository(),
        ).handle(transaction_id)
        for name in draft.skipped_products:
            click.echo(f"Warning: '{name}' is no longer in the catalog and was dropped.")

        cart_builder = BuildCartHandler(product_repo=product_repository())
        if replace_specs is not None:
            cart = cart_builder.handle(replace_specs)
        else:
            cart = draft.cart
            for product_id in remove_ids:
                cart.remove(cart.index_of(product_id))
        revise_cart(cart, set_specs)
        cart_builder.handle(add_specs, cart=cart)

        dto = EditTransactionHandler(
            transaction_repo=transaction_repository(),
            customer_repo=customer_repository(),
            sales_repo=sales_repository(),
        ).handle(
            transaction_id,
            customer_id=customer_id or draft.customer_id,
            cart=cart,
            sales_id=sales_id if sales_id is not None else draft.sales_id,
            notes=notes if notes is not None else draft.notes,
            payment_term=term if term is not None else draft.payment_term,
            expected_version=draft.version,
        )
    except DomainException as exc:
        raise _fail(f"Edit nota #{transaction_id}", exc)

    click.echo(f"Draft {dto.transaction_number} updated")
    _display_transaction(dto)


@click.command("finalize")
@click.option("--id", "transaction_id", required=True, type=int, help="Transaction ID to finalize.")
def transaction_finalize(transaction_id: int) -> None:
    """Finalize a draft nota (it can no longer be edited)."""
    handler = FinalizeTransactionHandler(transaction_repo=transaction_repository())

    try:
        dto = handler.handle(transaction_id)
    except DomainException as exc:
        raise _fail(f"Finalize nota #{transaction_id}", exc)

    click.echo(f"Nota {dto.transaction_number} finalized.")


@click.command("delete")
@click.option("--id", "transaction_id", required=True, type=int, help="Transaction ID to delete.")
@click.confirmation_option(prompt="Delete this nota and all its items?")
def transaction_delete(transaction_id: int) -> None:
    """Delete a nota, draft or final."""
    handler = DeleteTransactionHandler(transaction_repo=transaction_repository())

    try:
        handler.handle(transaction_id)
    except DomainException as exc:
        raise _fail(f"Delete nota #{transaction_id}", exc)

    click.echo(f"Transaction #{transaction_id} deleted.")


@click.command("show")
@click.argument("reference")
def transaction_show(reference: str) -> None:
    """Show a nota by ID or transaction number."""
    handler = ShowTransactionHandler(transaction_repo=transaction_repository())

    try:
        dto = handler.handle(reference)
    except DomainException as exc:
        raise _fail(f"Show nota {reference}", exc)

    _display_transaction(dto)


@click.command("list")
@click.option("--tab", type=click.Choice(list(TABS)), default="draft", show_default=True)
@click.option("--period", type=click.Choice(list(HISTORY_PERIODS)), default="all", show_default=True)
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Month filter for 'all' and 'year'.")
@click.option("--search", default="", help="Match transaction number or customer name.")
def transaction_list(tab: str, period: str, month: int | None, search: str) -> None:
    """List notas, newest first."""
    handler = ListTransactionsHandler(transaction_repo=transaction_repository(), tz=settings().tz)

    try:
        rows = handler.handle(tab=tab, period=period, month=month, search=search)
    except DomainException as exc:
        raise _fail("List notas", exc)

    if not rows:
        click.echo("No transactions found.")
        return

    click.echo(f"{'ID':<5} {'Number':<22} {'Customer':<24} {'Created':<21} {'Total':>16}")
    click.echo("-" * 92)
    for dto in rows:
        click.echo(
            f"{dto.id:<5} {dto.transaction_number:<22} {dto.customer_name:<24} "
            f"{dto.created_at:<21} {dto.total:>16}"
        )


@click.command("next-number")
def transaction_next_number() -> None:
    """Show the number the next saved nota will get."""
    handler = NextTransactionNumberHandler(transaction_repo=transaction_repository())

    try:
        number = handler.handle()
    except DomainException as exc:
        raise _fail("Preview transaction number", exc)

    click.echo(number)
