"""Integration tests for editing, finalizing and deleting notas."""

from datetime import datetime, timezone

import pytest

from nota.application.build_cart import BuildCartHandler, revise_cart
from nota.application.create_transaction import CreateTransactionHandler
from nota.application.delete_transaction import DeleteTransactionHandler
from nota.application.dto import CartItemSpec
from nota.application.edit_transaction import EditTransactionHandler
from nota.application.finalize_transaction import FinalizeTransactionHandler
from nota.application.show_transaction import NextTransactionNumberHandler, ShowTransactionHandler
from nota.domain.exceptions import (
    ConcurrentModificationError,
    EmptyCartError,
    EntityNotFoundError,
    InvalidStatusTransitionError,
)
from nota.domain.model.cart import Cart
from nota.domain.model.customer import Customer
from nota.domain.model.product import Product
from nota.domain.model.value_objects import Money
from tests.fakes import (
    FakeCustomerRepository,
    FakeProductRepository,
    FakeSalesRepository,
    FakeTransactionRepository,
)

CREATED = datetime(2025, 4, 4, 2, 0, tzinfo=timezone.utc)
EDITED = datetime(2025, 4, 5, 2, 0, tzinfo=timezone.utc)
FINALIZED = datetime(2025, 4, 6, 2, 0, tzinfo=timezone.utc)


class _World:
    """Fake repos plus every handler under test."""

    def __init__(self) -> None:
        self.transactions = FakeTransactionRepository()
        self.products = FakeProductRepository([
            Product(id="1", name="Widget", price=Money.of("1000")),
            Product(id="2", name="Gadget", price=Money.of("2500")),
            Product(id="3", name="Sprocket", price=Money.of("400")),
        ])
        self.customers = FakeCustomerRepository([
            Customer(id=None, name="Toko Maju"),
            Customer(id=None, name="CV Sentosa"),
        ])
        self.sales = FakeSalesRepository()
        self.build = BuildCartHandler(self.products)
        self.create = CreateTransactionHandler(
            self.transactions, self.customers, self.sales, clock=lambda: CREATED
        )
        self.edit = EditTransactionHandler(
            self.transactions, self.customers, self.sales, clock=lambda: EDITED
        )
        self.finalize = FinalizeTransactionHandler(self.transactions, clock=lambda: FINALIZED)
        self.delete = DeleteTransactionHandler(self.transactions)
        self.show = ShowTransactionHandler(self.transactions)

    def draft(self, *specs: CartItemSpec) -> int:
        specs = specs or (CartItemSpec("1", 2), CartItemSpec("2", 1))
        return self.create.handle("1", self.build.handle(list(specs))).id


class TestEdit:

    def test_replaces_entire_item_set(self):
        w = _World()
        tid = w.draft(CartItemSpec("1", 2), CartItemSpec("2", 1))
        dto = w.edit.handle(tid, "1", w.build.handle([CartItemSpec("3", 5)]))
        assert [i.name for i in dto.items] == ["Sprocket"]
        saved = w.transactions.get_by_id(tid)
        assert len(saved.items) == 1
        assert saved.total_amount == Money.of("2000")

    def test_total_recomputed(self):
        w = _World()
        tid = w.draft()
        dto = w.edit.handle(
            tid, "1", w.build.handle([CartItemSpec("1", 10), CartItemSpec("2", 2)])
        )
        assert dto.total == "Rp 15.000"

    def test_keeps_number_bumps_version(self):
        w = _World()
        tid = w.draft()
        before = w.show.handle(tid)
        dto = w.edit.handle(tid, "2", w.build.handle([CartItemSpec("1", 1)]))
        assert dto.transaction_number == before.transaction_number
        assert dto.version == before.version + 1
        assert dto.customer_name == "CV Sentosa"
        assert w.transactions.get_by_id(tid).updated_at == EDITED

    def test_stale_version_rejected(self):
        w = _World()
        tid = w.draft()
        loaded_version = w.show.handle(tid).version
        w.edit.handle(tid, "1", w.build.handle([CartItemSpec("1", 3)]))
        with pytest.raises(ConcurrentModificationError):
            w.edit.handle(
                tid, "1", w.build.handle([CartItemSpec("2", 1)]), expected_version=loaded_version
            )
        assert w.show.handle(tid).items[0].name == "Widget"

    def test_empty_cart_leaves_nota_untouched(self):
        w = _World()
        tid = w.draft()
        with pytest.raises(EmptyCartError):
            w.edit.handle(tid, "1", Cart())
        assert len(w.transactions.get_by_id(tid).items) == 2

    def test_completed_nota_cannot_be_edited(self):
        w = _World()
        tid = w.draft()
        w.finalize.handle(tid)
        with pytest.raises(InvalidStatusTransitionError):
            w.edit.handle(tid, "1", w.build.handle([CartItemSpec("1", 1)]))

    def test_unknown_transaction(self):
        w = _World()
        with pytest.raises(EntityNotFoundError):
            w.edit.handle(99, "1", w.build.handle([CartItemSpec("1", 1)]))


class TestFinalize:

    def test_completes_and_restamps_created_at(self):
        w = _World()
        tid = w.draft()
        dto = w.finalize.handle(tid)
        assert dto.status == "completed"
        assert not dto.editable
        assert w.transactions.get_by_id(tid).created_at == FINALIZED

    def test_second_finalize_rejected_and_changes_nothing(self):
        w = _World()
        tid = w.draft()
        first = w.finalize.handle(tid)
        with pytest.raises(InvalidStatusTransitionError) as info:
            w.finalize.handle(tid)
        assert info.value.user_message == "Nota sudah difinalisasi"
        after = w.show.handle(tid)
        assert after.version == first.version
        assert after.total == first.total

    def test_finalize_keeps_items(self):
        w = _World()
        tid = w.draft()
        w.finalize.handle(tid)
        assert len(w.transactions.get_by_id(tid).items) == 2

    def test_stale_version_rejected(self):
        w = _World()
        tid = w.draft()
        with pytest.raises(ConcurrentModificationError):
            w.finalize.handle(tid, expected_version=7)


class TestDelete:

    def test_deletes_draft(self):
        w = _World()
        tid = w.draft()
        w.delete.handle(tid)
        assert w.transactions.get_by_id(tid) is None

    def test_deletes_completed(self):
        w = _World()
        tid = w.draft()
        w.finalize.handle(tid)
        w.delete.handle(tid)
        assert w.transactions.list_all() == []

    def test_unknown_transaction(self):
        w = _World()
        with pytest.raises(EntityNotFoundError):
            w.delete.handle(5)


class TestShow:

    def test_by_number(self):
        w = _World()
        tid = w.draft()
        assert w.show.handle("RJA/APT/2504040159").id == tid

    def test_by_numeric_string(self):
        w = _World()
        tid = w.draft()
        assert w.show.handle(str(tid)).id == tid

    def test_missing(self):
        w = _World()
        with pytest.raises(EntityNotFoundError):
            w.show.handle("RJA/APT/1")

    def test_next_number_preview_consumes_nothing(self):
        w = _World()
        preview = NextTransactionNumberHandler(w.transactions)
        assert preview.handle() == "RJA/APT/2504040159"
        assert preview.handle() == "RJA/APT/2504040159"
        w.draft()
        assert preview.handle() == "RJA/APT/2504040160"


class TestReviseCart:

    def test_changes_quantity_and_unit_in_place(self):
        w = _World()
        tid = w.draft(CartItemSpec("1", 2), CartItemSpec("2", 1))
        cart = w.build.handle([CartItemSpec("1", 2), CartItemSpec("2", 1)])
        revise_cart(cart, [CartItemSpec("2", 4, "box")])
        dto = w.edit.handle(tid, "1", cart)
        gadget = dto.items[1]
        assert (gadget.name, gadget.quantity, gadget.unit) == ("Gadget", 4, "box")
        assert gadget.product_name == "Gadget (4 box)"
        assert dto.total == "Rp 12.000"

    def test_unit_kept_when_omitted(self):
        cart = _World().build.handle([CartItemSpec("1", 2, "karton")])
        revise_cart(cart, [CartItemSpec("1", 6)])
        assert (cart.selections[0].quantity, cart.selections[0].unit) == (6, "karton")

    def test_product_not_in_cart(self):
        cart = _World().build.handle([CartItemSpec("1", 2)])
        with pytest.raises(EntityNotFoundError):
            revise_cart(cart, [CartItemSpec("3", 1)])
