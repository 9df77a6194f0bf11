"""Customer and SalesPerson records.

Both are reference data for a nota: the transaction copies the customer's
name and address and the sales person's name at save time.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from nota.domain.exceptions import ValidationError


@dataclass
class Customer:
    id: str | None
    name: str
    address: str = ""
    payment_terms: list[str] = field(default_factory=list)

    @staticmethod
    def create(name: str, address: str = "", payment_terms: list[str] | None = None) -> Customer:
        if not name or not name.strip():
            raise ValidationError("Customer name is required", user_message="Nama customer wajib diisi")
        terms = [t.strip() for t in payment_terms or [] if t and t.strip()]
        return Customer(id=None, name=name.strip(), address=address.strip(), payment_terms=terms)

    def is_catalog_term(self, term: str | None) -> bool:
        return bool(term) and term in self.payment_terms


@dataclass
class SalesPerson:
    id: str | None
    name: str
    phone: str

    @staticmethod
    def create(name: str, phone: str) -> SalesPerson:
        if not name or not name.strip():
            raise ValidationError("Sales name is required", user_message="Nama sales wajib diisi")
        if not phone or not phone.strip():
            raise ValidationError("Sales phone is required", user_message="No. HP sales wajib diisi")
        return SalesPerson(id=None, name=name.strip(), phone=phone.strip())
