"""Encoded line-item labels.

A saved line item's ``product_name`` is ``"<name> (<quantity> <unit>)"``.
Detail and report views read quantity and unit back out of it, so
``encode_label`` and ``decode_label`` must stay exact inverses.  Names may
hold anything, including parentheses and line breaks; units may not hold
parentheses or line breaks, which ``check_unit`` enforces wherever a unit
enters the catalog.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from nota.domain.exceptions import ValidationError

# Anchored at the end so only the trailing parenthesized group is taken.
_LABEL_RE = re.compile(
    r"^(?P<name>.*?)\s*\((?P<quantity>\d+)\s+(?P<unit>[^()\r\n]+?)\)\s*\Z", re.DOTALL
)
_FORBIDDEN_IN_UNIT = frozenset("()\r\n")


@dataclass(frozen=True)
class ProductLabel:
    name: str
    quantity: int | None = None
    unit: str | None = None


def check_unit(unit: str) -> str:
    """Return ``unit`` stripped, rejecting what a label could not carry."""
    cleaned = unit.strip() if unit else ""
    if not cleaned:
        raise ValidationError("Unit is required", user_message="Satuan wajib diisi")
    if _FORBIDDEN_IN_UNIT.intersection(cleaned):
        raise ValidationError(
            f"Unit {unit!r} may not contain parentheses or line breaks",
            user_message="Satuan tidak boleh mengandung tanda kurung atau baris baru",
        )
    return cleaned


def encode_label(name: str, quantity: int, unit: str) -> str:
    return f"{name} ({quantity} {check_unit(unit)})"


def decode_label(label: str) -> ProductLabel:
    """Split an encoded label into name, quantity and unit.

    A label without a trailing ``(<int> <unit>)`` group decodes to the bare
    name with no quantity or unit.
    """
    match = _LABEL_RE.match(label)
    if match is None:
        return ProductLabel(name=label.strip())
    return ProductLabel(
        name=match.group("name").strip(),
        quantity=int(match.group("quantity")),
        unit=match.group("unit").strip(),
    )
