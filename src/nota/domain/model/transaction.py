"""Transaction aggregate: a nota and its line items.

The Transaction is an aggregate root that owns its line items.  A nota
starts as a ``pending`` draft, which may be edited or deleted, and moves
forward exactly once to ``completed``, after which only deletion is
allowed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from nota.domain.exceptions import EmptyCartError, InvalidStatusTransitionError
from nota.domain.model.customer import Customer, SalesPerson
from nota.domain.model.label import ProductLabel, decode_label
from nota.domain.model.value_objects import Money, Quantity


class TransactionStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DiscountDetails:
    discount1: Decimal
    discount2: Decimal = Decimal("0")


@dataclass
class LineItem:
    """A priced product selection as saved on a nota.

    All prices are per unit except ``subtotal``.  ``product_name`` is the
    encoded label ``"<name> (<quantity> <unit>)"`` and always agrees with
    ``quantity`` and ``unit``.
    """

    product_id: str
    product_name: str
    quantity: Quantity
    unit: str
    unit_price: Money
    discount_amount: Money
    discount_percent: Decimal
    discount_details: DiscountDetails | None = None
    id: int | None = None

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def label(self) -> ProductLabel:
        return decode_label(self.product_name)


@dataclass
class Transaction:
    """Aggregate root for notas.

    Use ``Transaction.create()`` for new notas.  The plain constructor is
    kept simple so the repository can reconstitute stored rows.
    ``version`` is bumped by the repository on every successful update.
    """

    id: int | None
    transaction_number: str | None
    customer_name: str
    items: list[LineItem]
    customer_address: str = ""
    sales_id: str | None = None
    sales_name: str | None = None
    notes: str = ""
    payment_terms_days: str | None = None
    status: TransactionStatus = TransactionStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    # --- Factory (used for NEW notas only) ------------------------------------

    @staticmethod
    def create(
        customer: Customer,
        items: list[LineItem],
        sales: SalesPerson | None = None,
        notes: str = "",
        payment_term: str | None = None,
        now: datetime | None = None,
    ) -> Transaction:
        if not items:
            raise EmptyCartError("A nota must contain at least one item")
        now = now or utcnow()
        return Transaction(
            id=None,
            transaction_number=None,
            customer_name=customer.name,
            customer_address=customer.address,
            items=list(items),
            sales_id=sales.id if sales else None,
            sales_name=sales.name if sales else None,
            notes=notes or "",
            payment_terms_days=payment_term or None,
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def revise(
        self,
        customer: Customer,
        items: list[LineItem],
        sales: SalesPerson | None = None,
        notes: str = "",
        payment_term: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Replace every line item and the editable scalar fields."""
        self.ensure_pending("edit")
        if not items:
            raise EmptyCartError("A nota must contain at least one item")
        self.items = list(items)
        self.customer_name = customer.name
        self.customer_address = customer.address
        self.sales_id = sales.id if sales else None
        self.sales_name = sales.name if sales else None
        self.notes = notes or ""
        self.payment_terms_days = payment_term or None
        self.updated_at = now or utcnow()

    def finalize(self, now: datetime | None = None) -> None:
        """Transition pending -> completed.

        ``created_at`` is moved to the finalize time: reports and the recap
        date a nota by when it became final.
        """
        self.ensure_pending("finalize")
        now = now or utcnow()
        self.status = TransactionStatus.COMPLETED
        self.created_at = now
        self.updated_at = now

    # --- Computed properties --------------------------------------------------

    @property
    def total_amount(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.subtotal
        return result

    @property
    def is_editable(self) -> bool:
        return self.status == TransactionStatus.PENDING

    def ensure_pending(self, action: str) -> None:
        """Raise InvalidStatusTransitionError unless the nota is still a draft."""
        if self.status == TransactionStatus.PENDING:
            return
        if action == "finalize":
            raise InvalidStatusTransitionError(
                f"Cannot finalize nota {self.transaction_number}: already {self.status.value}",
                user_message="Nota sudah difinalisasi",
            )
        raise InvalidStatusTransitionError(
            f"Cannot {action} nota {self.transaction_number}: status is {self.status.value}",
            user_message="Nota yang sudah final tidak dapat diubah",
        )
