"""`nota product` commands: catalog entry, listing and price quotes."""

from __future__ import annotations

import click

from nota.application.add_product import AddProductHandler
from nota.application.list_products import ListProductsHandler
from nota.application.quote_price import QuotePriceHandler
from nota.domain.exceptions import DomainException
from nota.domain.model.product import DiscountTier
from nota.infrastructure.bootstrap import product_repository


def _parse_tier(raw: str) -> DiscountTier:
    """Parse 'Min:Unit:Disc[:Disc2]', with a leading '=' for an exact tier."""
    exact = raw.startswith("=")
    parts = [p.strip() for p in raw.lstrip("=").split(":")]
    if len(parts) not in (3, 4):
        raise click.BadParameter(
            f"Invalid tier '{raw}'. Expected '[=]MinQty:Unit:Discount[:Discount2]'."
        )
    try:
        min_quantity = int(parts[0])
    except ValueError:
        raise click.BadParameter(f"Invalid tier quantity '{parts[0]}'.")
    try:
        return DiscountTier(
            min_quantity=min_quantity,
            unit=parts[1],
            discount=parts[2],
            discount2=parts[3] if len(parts) == 4 else None,
            is_exact=exact,
        )
    except DomainException as exc:
        raise click.BadParameter(str(exc))


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="List price (e.g. 10000).")
@click.option("--base-price", default=None, help="Price discounts are computed from.")
@click.option("--category", default="", help="Category.")
@click.option("--sku", default="", help="SKU.")
@click.option("--unit", "units", multiple=True, help="Sellable unit; the first is the default.")
@click.option("--tier", "tiers", multiple=True, help="Discount tier '[=]MinQty:Unit:Disc[:Disc2]'.")
def product_add(
    name: str,
    price: str,
    base_price: str | None,
    category: str,
    sku: str,
    units: tuple[str, ...],
    tiers: tuple[str, ...],
) -> None:
    """Register a product with its units and discount tiers."""
    parsed = [_parse_tier(t) for t in tiers]
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(
            name=name,
            price=price,
            base_price=base_price,
            category=category,
            sku=sku,
            units=list(units),
            tiers=parsed,
        )
    except DomainException as exc:
        raise click.ClickException(exc.user_message)

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
@click.option("--search", default="", help="Match name or SKU.")
@click.option("--category", default=None, help="Only this category.")
def product_list(search: str, category: str | None) -> None:
    """List products in the catalog."""
    handler = ListProductsHandler(product_repo=product_repository())

    try:
        products = handler.handle(search=search, category=category)
    except DomainException as exc:
        raise click.ClickException(exc.user_message)

    if not products:
        click.echo("No matching products.")
        return

    click.echo(f"{'ID':<6} {'Name':<28} {'Category':<14} {'Price':>14}  Units")
    click.echo("-" * 80)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<28} {p.category:<14} {p.price:>14}  {', '.join(p.units)}")
        for tier in p.tiers:
            click.echo(f"{'':<8}tier {tier}")


@click.command("quote")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", required=True, type=int, help="Quantity.")
@click.option("--unit", default=None, help="Unit (defaults to the product's unit).")
def product_quote(product_id: str, quantity: int, unit: str | None) -> None:
    """Show the discounted price for a quantity of a product."""
    handler = QuotePriceHandler(product_repo=product_repository())

    try:
        dto = handler.handle(product_id, quantity, unit)
    except DomainException as exc:
        raise click.ClickException(exc.user_message)

    click.echo(dto.product_name)
    click.echo(f"  List price:  {dto.list_price}")
    click.echo(f"  Unit price:  {dto.unit_price}" + (f"  ({dto.discounts})" if dto.discounts else ""))
    click.echo(f"  Discount:    {dto.discount_percent}")
    click.echo(f"  Subtotal:    {dto.subtotal}")
