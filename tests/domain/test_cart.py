"""Unit tests for the Cart."""

from decimal import Decimal

import pytest

from nota.domain.exceptions import (
    DuplicateProductInCartError,
    EmptyCartError,
    InvalidQuantityError,
    MissingCustomerError,
    UnsupportedUnitError,
    ValidationError,
)
from nota.domain.model.cart import Cart, CartSelection
from nota.domain.model.product import DiscountTier, Product, StockEntry
from nota.domain.model.value_objects import Money


def _widget():
    return Product(
        id="1",
        name="Widget",
        price=Money.of("10000"),
        discount_tiers=(DiscountTier(min_quantity=5, discount=Decimal("10"), unit="buah"),),
    )


def _gadget():
    return Product(
        id="2",
        name="Gadget",
        price=Money.of("2500"),
        stock_entries=(StockEntry("pcs", 100), StockEntry("lusin", 8)),
        stock_unit="pcs",
    )


class TestCartAdd:

    def test_add_uses_default_unit(self):
        cart = Cart()
        selection = cart.add(_gadget(), 2)
        assert selection.unit == "pcs"
        assert len(cart) == 1

    def test_duplicate_rejected(self):
        cart = Cart()
        cart.add(_widget(), 1)
        with pytest.raises(DuplicateProductInCartError):
            cart.add(_widget(), 3)
        assert len(cart) == 1
        assert cart.selections[0].quantity == 1

    def test_non_positive_quantity_held_until_save(self):
        cart = Cart()
        cart.add(_widget(), 0)
        assert cart.selections[0].quantity == 0
        with pytest.raises(InvalidQuantityError):
            cart.validate_for_save("1")

    def test_unit_outside_stock_entries_rejected(self):
        with pytest.raises(UnsupportedUnitError):
            Cart().add(_gadget(), 1, "box")

    def test_default_units_when_no_stock_entries(self):
        cart = Cart()
        cart.add(_widget(), 1, "karton")
        with pytest.raises(UnsupportedUnitError):
            cart.update_unit(0, "lusin")


class TestCartEditing:

    def test_empty_input_becomes_zero(self):
        cart = Cart()
        cart.add(_widget(), 3)
        cart.update_quantity(0, "")
        assert cart.selections[0].quantity == 0

    def test_negative_allowed_while_editing(self):
        cart = Cart()
        cart.add(_widget(), 3)
        cart.update_quantity(0, "-1")
        assert cart.selections[0].quantity == -1

    def test_non_numeric_rejected(self):
        cart = Cart()
        cart.add(_widget(), 3)
        with pytest.raises(ValidationError, match="whole number"):
            cart.update_quantity(0, "abc")

    def test_update_unit(self):
        cart = Cart()
        cart.add(_gadget(), 1)
        cart.update_unit(0, "lusin")
        assert cart.selections[0].unit == "lusin"

    def test_remove(self):
        cart = Cart()
        cart.add(_widget(), 1)
        cart.add(_gadget(), 1)
        removed = cart.remove(0)
        assert removed.product.id == "1"
        assert cart.product_ids == {"2"}

    def test_remove_bad_index(self):
        with pytest.raises(ValidationError, match="No cart item"):
            Cart().remove(0)


class TestCartTotal:

    def test_total_recomputed_on_every_read(self):
        cart = Cart()
        cart.add(_widget(), 4)
        assert cart.total() == Money.of("40000")
        cart.update_quantity(0, 5)
        assert cart.total() == Money.of("45000")

    def test_non_positive_selections_contribute_nothing(self):
        cart = Cart()
        cart.add(_widget(), 2)
        cart.add(_gadget(), 2)
        cart.update_quantity(0, "")
        assert cart.total() == Money.of("5000")


class TestCartValidation:

    def test_missing_customer(self):
        cart = Cart()
        cart.add(_widget(), 1)
        with pytest.raises(MissingCustomerError):
            cart.validate_for_save(None)

    def test_empty_cart(self):
        with pytest.raises(EmptyCartError):
            Cart().validate_for_save("1")

    def test_customer_checked_before_cart(self):
        with pytest.raises(MissingCustomerError):
            Cart().validate_for_save("")

    def test_invalid_quantity_names_every_offender(self):
        cart = Cart()
        cart.add(_widget(), 1)
        cart.add(_gadget(), 1)
        cart.update_quantity(0, 0)
        cart.update_quantity(1, -4)
        with pytest.raises(InvalidQuantityError) as info:
            cart.validate_for_save("1")
        assert info.value.offending == ("Widget", "Gadget")

    def test_restored_cart_keeps_saved_values(self):
        selection = CartSelection(product=_gadget(), quantity=3, unit="dus")
        cart = Cart([selection])
        assert cart.selections[0].unit == "dus"

    def test_restored_cart_rejects_duplicates(self):
        with pytest.raises(DuplicateProductInCartError):
            Cart([
                CartSelection(product=_widget(), quantity=1, unit="buah"),
                CartSelection(product=_widget(), quantity=2, unit="box"),
            ])

    def test_line_items(self):
        cart = Cart()
        cart.add(_widget(), 5)
        (item,) = cart.line_items()
        assert item.product_name == "Widget (5 buah)"
        assert item.subtotal == Money.of("45000")
