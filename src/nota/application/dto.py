"""Data transfer objects passed between the CLI and the application layer.

Money is pre-formatted as rupiah strings for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timezone

from nota.domain.model.transaction import LineItem, Transaction


@dataclass(frozen=True)
class CartItemSpec:
    """Input: a product selection (product id, quantity, optional unit)."""

    product_id: str
    quantity: int
    unit: str | None = None


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    product_name: str  # encoded label, e.g. "Widget (12 box)"
    name: str
    quantity: int
    unit: str
    unit_price: str  # formatted, e.g. "Rp 9.000"
    discounts: str  # e.g. "-10% -5%", empty without discount
    discount_percent: str
    subtotal: str


@dataclass(frozen=True)
class TransactionDTO:
    """Output: a complete nota as displayed to the user."""

    id: int
    transaction_number: str
    status: str
    customer_name: str
    customer_address: str
    sales_name: str | None
    notes: str
    payment_terms_days: str | None
    items: list[LineItemDTO]
    total: str
    created_at: str
    editable: bool
    version: int
    payment_term_is_custom: bool | None = None


def format_percent(value) -> str:
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}%"


def line_item_to_dto(item: LineItem) -> LineItemDTO:
    discounts = ""
    if item.discount_details is not None:
        parts = [item.discount_details.discount1]
        if item.discount_details.discount2 > 0:
            parts.append(item.discount_details.discount2)
        discounts = " ".join(f"-{format_percent(p)}" for p in parts)
    return LineItemDTO(
        product_id=item.product_id,
        product_name=item.product_name,
        name=item.label.name,
        quantity=item.quantity.value,
        unit=item.unit,
        unit_price=str(item.unit_price),
        discounts=discounts,
        discount_percent=format_percent(item.discount_percent),
        subtotal=str(item.subtotal),
    )


def transaction_to_dto(
    transaction: Transaction, payment_term_is_custom: bool | None = None
) -> TransactionDTO:
    return TransactionDTO(
        id=transaction.id,  # type: ignore[arg-type]
        transaction_number=transaction.transaction_number or "",
        status=transaction.status.value,
        customer_name=transaction.customer_name,
        customer_address=transaction.customer_address,
        sales_name=transaction.sales_name,
        notes=transaction.notes,
        payment_terms_days=transaction.payment_terms_days,
        items=[line_item_to_dto(item) for item in transaction.items],
        total=str(transaction.total_amount),
        created_at=transaction.created_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        editable=transaction.is_editable,
        version=transaction.version,
        payment_term_is_custom=payment_term_is_custom,
    )


@dataclass(frozen=True)
class DailyRevenueDTO:
    date: str
    amount: str


@dataclass(frozen=True)
class TopProductDTO:
    name: str
    unit: str
    quantity: int
    revenue: str


@dataclass(frozen=True)
class SalesSummaryDTO:
    period: str
    month: int | None
    total_revenue: str
    total_transactions: int
    average_transaction: str
    daily_revenue: list[DailyRevenueDTO]
    top_products: list[TopProductDTO]


@dataclass(frozen=True)
class RecapRowDTO:
    transaction_number: str
    sales_name: str
    customer_name: str
    date: str
    payment_term: str
    total: str


@dataclass(frozen=True)
class SalesRecapDTO:
    month: int
    year: int
    rows: list[RecapRowDTO]
    total: str


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    sku: str
    category: str
    price: str
    units: list[str]
    tiers: list[str]  # e.g. "10 box: -10% -5%" or "= 12 box: -7%"


@dataclass(frozen=True)
class QuoteDTO:
    product_id: str
    product_name: str
    quantity: int
    unit: str
    list_price: str
    unit_price: str
    discounts: str
    discount_percent: str
    subtotal: str
