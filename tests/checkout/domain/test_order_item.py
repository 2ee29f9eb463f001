"""Tests for the OrderItem aggregate: address attachment and status lifecycle."""

import json

import pytest
from checkout.order.events import (
    OrderItemCreated,
    OrderItemFinished,
    OrderItemPaymentInitiated,
    OrderItemReconciliationRequired,
    OrderItemStockCommitted,
)
from checkout.order.item import OrderItemStatus
from protean.exceptions import ValidationError


def _attach(order_item, billing_address, shipping_address=None, same_as_billing=True, storage_pid=9):
    order_item.attach_addresses(
        billing_address,
        shipping_address,
        shipping_same_as_billing=same_as_billing,
        storage_pid=storage_pid,
    )


class TestAddressAttachment:
    def test_same_as_billing_attaches_billing_only(self, order_item, billing_address):
        _attach(order_item, billing_address)

        assert order_item.billing_address.first_name == "Jane"
        assert order_item.shipping_address is None
        assert order_item.shipping_same_as_billing is True

    def test_same_as_billing_discards_submitted_shipping_address(
        self, order_item, billing_address, shipping_address
    ):
        _attach(order_item, billing_address, shipping_address, same_as_billing=True)

        assert order_item.shipping_address is None

    def test_storage_pid_is_assigned(self, order_item, billing_address):
        _attach(order_item, billing_address, storage_pid=42)

        assert order_item.pid == 42
        assert order_item.billing_address.pid == 42

    def test_separate_shipping_address_shares_storage_pid(self, order_item, billing_address, shipping_address):
        _attach(order_item, billing_address, shipping_address, same_as_billing=False, storage_pid=42)

        assert order_item.shipping_same_as_billing is False
        assert order_item.shipping_address.city == "Köln"
        assert order_item.shipping_address.pid == order_item.billing_address.pid == 42

    def test_separate_shipping_requires_an_address(self, order_item, billing_address):
        with pytest.raises(ValidationError) as exc:
            _attach(order_item, billing_address, None, same_as_billing=False)

        assert "shipping_address" in exc.value.messages

    def test_remove_shipping_address(self, order_item, billing_address, shipping_address):
        _attach(order_item, billing_address, shipping_address, same_as_billing=False)

        order_item.remove_shipping_address()

        assert order_item.shipping_address is None
        assert order_item.shipping_same_as_billing is True

    def test_addresses_are_frozen_once_created(self, order_item, billing_address, cart):
        _attach(order_item, billing_address)
        order_item.record_creation(cart, "ORD-1")

        with pytest.raises(ValidationError) as exc:
            _attach(order_item, billing_address)

        assert "status" in exc.value.messages


class TestCartAssignment:
    def test_assign_cart_copies_payment(self, order_item, cart):
        order_item.assign_cart(cart.pid, cart.payment)

        assert order_item.cart_pid == 7
        assert order_item.payment_id == 1
        assert order_item.payment_name == "Prepayment"
        assert order_item.payment_provider is None

    def test_assign_cart_without_payment(self, order_item):
        order_item.assign_cart(7)

        assert order_item.cart_pid == 7
        assert order_item.payment_id is None


class TestOrderLifecycle:
    def test_new_order_item(self, order_item):
        assert order_item.status == OrderItemStatus.NEW.value

    def test_record_creation_snapshots_the_cart(self, order_item, billing_address, cart):
        _attach(order_item, billing_address)

        order_item.record_creation(cart, "ORD-1")

        assert order_item.status == OrderItemStatus.CREATED.value
        assert order_item.order_number == "ORD-1"
        assert order_item.gross == 48.48
        assert order_item.currency == "EUR"
        assert order_item.created_at is not None
        products = json.loads(order_item.products)
        assert [p["sku"] for p in products] == ["TSHIRT-BLK-M", "MUG-WHT"]

    def test_record_creation_raises_created_event(self, order_item, billing_address, cart):
        _attach(order_item, billing_address)
        order_item.record_creation(cart, "ORD-1")

        event = next(e for e in order_item._events if isinstance(e, OrderItemCreated))
        assert event.order_number == "ORD-1"
        assert event.gross == 48.48
        assert event.order_item_id == str(order_item.id)

    def test_full_lifecycle(self, order_item, billing_address, cart):
        _attach(order_item, billing_address)
        order_item.record_creation(cart, "ORD-1")
        order_item.commit_stock()
        order_item.initiate_payment("txn-1")
        order_item.finish()

        assert order_item.status == OrderItemStatus.FINISHED.value
        assert order_item.payment_transaction_id == "txn-1"
        assert order_item.finished_at is not None
        raised = [type(e) for e in order_item._events]
        assert raised == [
            OrderItemCreated,
            OrderItemStockCommitted,
            OrderItemPaymentInitiated,
            OrderItemFinished,
        ]

    def test_cannot_skip_a_stage(self, order_item):
        with pytest.raises(ValidationError) as exc:
            order_item.finish()

        assert "Cannot transition from New to Finished" in exc.value.messages["status"][0]

    def test_cannot_create_twice(self, order_item, billing_address, cart):
        _attach(order_item, billing_address)
        order_item.record_creation(cart, "ORD-1")

        with pytest.raises(ValidationError):
            order_item.record_creation(cart, "ORD-2")

    def test_reconciliation_after_creation(self, order_item, billing_address, cart):
        _attach(order_item, billing_address)
        order_item.record_creation(cart, "ORD-1")

        order_item.require_reconciliation("stock_decrement")

        assert order_item.status == OrderItemStatus.RECONCILIATION_REQUIRED.value
        assert order_item.halted_stage == "stock_decrement"
        event = order_item._events[-1]
        assert isinstance(event, OrderItemReconciliationRequired)
        assert event.halted_stage == "stock_decrement"

    def test_reconciliation_is_terminal(self, order_item, billing_address, cart):
        _attach(order_item, billing_address)
        order_item.record_creation(cart, "ORD-1")
        order_item.require_reconciliation("stock_decrement")

        with pytest.raises(ValidationError):
            order_item.commit_stock()
