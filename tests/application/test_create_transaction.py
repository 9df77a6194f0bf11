"""Integration tests for the CreateTransaction use case.

Runs against in-memory fake repositories.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from nota.application.build_cart import BuildCartHandler
from nota.application.create_transaction import CreateTransactionHandler
from nota.application.dto import CartItemSpec
from nota.domain.exceptions import (
    EmptyCartError,
    EntityNotFoundError,
    InvalidQuantityError,
    MissingCustomerError,
)
from nota.domain.model.cart import Cart
from nota.domain.model.customer import Customer, SalesPerson
from nota.domain.model.product import DiscountTier, Product
from nota.domain.model.value_objects import Money
from tests.fakes import (
    FakeCustomerRepository,
    FakeProductRepository,
    FakeSalesRepository,
    FakeTransactionRepository,
)

NOW = datetime(2025, 4, 4, 2, 0, tzinfo=timezone.utc)


def _products():
    return [
        Product(
            id="1",
            name="Widget",
            price=Money.of("10000"),
            base_price=Money.of("10000"),
            discount_tiers=(DiscountTier(min_quantity=5, discount=Decimal("10"), unit="buah"),),
        ),
        Product(id="2", name="Gadget", price=Money.of("2500")),
    ]


def _setup():
    """Build handlers with fake repos pre-loaded with products, a customer and a sales person."""
    transaction_repo = FakeTransactionRepository()
    product_repo = FakeProductRepository(_products())
    customer_repo = FakeCustomerRepository(
        [Customer(id=None, name="Toko Maju", address="Jl. Merdeka 1", payment_terms=["Cash", "30 hari"])]
    )
    sales_repo = FakeSalesRepository([SalesPerson(id=None, name="Budi", phone="0812")])
    handler = CreateTransactionHandler(transaction_repo, customer_repo, sales_repo, clock=lambda: NOW)
    cart_builder = BuildCartHandler(product_repo)
    return handler, cart_builder, transaction_repo


class TestCreateTransactionHappyPath:

    def test_creates_pending_nota_with_number(self):
        handler, build, repo = _setup()
        dto = handler.handle("1", build.handle([CartItemSpec("1", 5, "buah")]))
        assert dto.transaction_number == "RJA/APT/2504040159"
        assert dto.status == "pending"
        assert dto.editable
        assert dto.version == 1
        assert dto.total == "Rp 45.000"
        assert repo.counter == 2504040160

    def test_line_items_priced_through_resolver(self):
        handler, build, _ = _setup()
        dto = handler.handle("1", build.handle([CartItemSpec("1", 5, "buah"), CartItemSpec("2", 2)]))
        widget, gadget = dto.items
        assert widget.product_name == "Widget (5 buah)"
        assert widget.unit_price == "Rp 9.000"
        assert widget.discounts == "-10%"
        assert widget.discount_percent == "10%"
        assert gadget.subtotal == "Rp 5.000"
        assert gadget.discounts == ""

    def test_copies_customer_and_sales(self):
        handler, build, repo = _setup()
        dto = handler.handle(
            "1", build.handle([CartItemSpec("2", 1)]), sales_id="1", notes="antar pagi",
        )
        saved = repo.get_by_id(dto.id)
        assert saved.customer_name == "Toko Maju"
        assert saved.customer_address == "Jl. Merdeka 1"
        assert saved.sales_name == "Budi"
        assert saved.notes == "antar pagi"
        assert saved.created_at == NOW

    def test_total_matches_items(self):
        handler, build, repo = _setup()
        dto = handler.handle("1", build.handle([CartItemSpec("1", 7), CartItemSpec("2", 3)]))
        saved = repo.get_by_id(dto.id)
        assert saved.total_amount == Money.of("9000") * 7 + Money.of("2500") * 3

    def test_sequential_numbers(self):
        handler, build, _ = _setup()
        first = handler.handle("1", build.handle([CartItemSpec("2", 1)]))
        second = handler.handle("1", build.handle([CartItemSpec("2", 1)]))
        assert first.transaction_number == "RJA/APT/2504040159"
        assert second.transaction_number == "RJA/APT/2504040160"


class TestPaymentTerm:

    def test_catalog_term_not_custom(self):
        handler, build, _ = _setup()
        dto = handler.handle("1", build.handle([CartItemSpec("2", 1)]), payment_term="30 hari")
        assert dto.payment_terms_days == "30 hari"
        assert dto.payment_term_is_custom is False

    def test_custom_term_flagged(self):
        handler, build, _ = _setup()
        dto = handler.handle("1", build.handle([CartItemSpec("2", 1)]), payment_term=" 45 hari ")
        assert dto.payment_terms_days == "45 hari"
        assert dto.payment_term_is_custom is True

    def test_blank_term_stored_as_none(self):
        handler, build, _ = _setup()
        dto = handler.handle("1", build.handle([CartItemSpec("2", 1)]), payment_term="   ")
        assert dto.payment_terms_days is None
        assert dto.payment_term_is_custom is False


class TestCreateTransactionValidation:

    def test_missing_customer(self):
        handler, build, repo = _setup()
        with pytest.raises(MissingCustomerError) as info:
            handler.handle(None, build.handle([CartItemSpec("2", 1)]))
        assert info.value.user_message == "Silakan pilih customer"
        assert repo.list_all() == []

    def test_empty_cart(self):
        handler, _, repo = _setup()
        with pytest.raises(EmptyCartError):
            handler.handle("1", Cart())
        assert repo.counter == 2504040159

    def test_zero_quantity_blocks_save(self):
        handler, build, repo = _setup()
        cart = build.handle([CartItemSpec("1", 2), CartItemSpec("2", 1)])
        cart.update_quantity(1, "")
        with pytest.raises(InvalidQuantityError) as info:
            handler.handle("1", cart)
        assert info.value.offending == ("Gadget",)
        assert repo.list_all() == []

    def test_every_zero_quantity_selection_is_named(self):
        handler, build, repo = _setup()
        cart = build.handle([CartItemSpec("1", 0), CartItemSpec("2", 0)])
        with pytest.raises(InvalidQuantityError) as info:
            handler.handle("1", cart)
        assert info.value.offending == ("Widget", "Gadget")
        assert repo.list_all() == []
        assert repo.counter == 2504040159

    def test_unknown_customer(self):
        handler, build, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle("99", build.handle([CartItemSpec("2", 1)]))

    def test_unknown_sales(self):
        handler, build, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle("1", build.handle([CartItemSpec("2", 1)]), sales_id="42")

    def test_unknown_product(self):
        _, build, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Product not found"):
            build.handle([CartItemSpec("404", 1)])
