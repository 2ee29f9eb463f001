"""Application tests for the default stage listeners."""

import pytest
from checkout.cart.session import Severity
from checkout.controller.responses import CART_DISPLAY, RedirectToUri
from checkout.listeners import (
    CheckStockListener,
    DecrementStockListener,
    FinishOrderListener,
    InitiatePaymentListener,
    OrderNumberSequence,
    PersistOrderListener,
    ProcessOrderCreateListener,
)
from checkout.order.item import OrderItem, OrderItemStatus
from checkout.pipeline.events import (
    CheckStockEvent,
    CreateEvent,
    FinishEvent,
    PaymentEvent,
    ProcessOrderCreateEvent,
    StockEvent,
)
from protean import current_domain


@pytest.fixture
def prepared_order(cart, order_item, billing_address, settings):
    """Order item as the pipeline hands it to the create stage."""
    order_item.assign_cart(cart.pid, cart.payment)
    order_item.attach_addresses(
        billing_address,
        shipping_same_as_billing=True,
        storage_pid=settings.order.pid,
    )
    return order_item


@pytest.fixture
def created_order(prepared_order, cart, settings):
    PersistOrderListener()(CreateEvent(cart, prepared_order, settings))
    return prepared_order


class TestCheckStockListener:
    def test_sufficient_stock_passes(self, cart, order_item, settings, stock_service, session_store):
        event = CheckStockEvent(cart, order_item, settings)

        CheckStockListener(stock_service, session_store)(event)

        assert not event.is_propagation_stopped
        assert session_store.pop_flash_messages(cart.pid) == []

    def test_shortage_flashes_each_product_and_halts(self, cart, order_item, settings, stock_service, session_store):
        stock_service.set_level("TSHIRT-BLK-M", 1)
        stock_service.set_level("MUG-WHT", 0)
        event = CheckStockEvent(cart, order_item, settings)

        CheckStockListener(stock_service, session_store)(event)

        assert event.is_propagation_stopped
        assert event.response == CART_DISPLAY
        flashes = session_store.pop_flash_messages(cart.pid)
        assert [f.severity for f in flashes] == [Severity.ERROR, Severity.ERROR]
        assert flashes[0].message == 'Only 1 of "Black T-Shirt (M)" are available; you requested 2.'

    def test_untracked_products_are_unlimited(self, cart, order_item, settings, session_store):
        from checkout.stock.memory_adapter import InMemoryStockService

        event = CheckStockEvent(cart, order_item, settings)

        CheckStockListener(InMemoryStockService(), session_store)(event)

        assert not event.is_propagation_stopped

    def test_uses_the_active_stock_service_by_default(self, cart, order_item, settings, stock_service):
        stock_service.set_level("MUG-WHT", 0)
        event = CheckStockEvent(cart, order_item, settings)

        CheckStockListener()(event)

        assert event.is_propagation_stopped


class TestPersistOrderListener:
    def test_create_persists_the_order(self, created_order):
        persisted = current_domain.repository_for(OrderItem).get(created_order.id)

        assert persisted.status == OrderItemStatus.CREATED.value
        assert persisted.order_number == "ORD-1"
        assert persisted.pid == 9
        assert persisted.gross == 48.48

    def test_order_numbers_count_up_per_pid(self):
        sequence = OrderNumberSequence()

        assert [sequence.next_number(9), sequence.next_number(9), sequence.next_number(4)] == [1, 2, 1]

    def test_sequence_start(self):
        assert OrderNumberSequence(start=1000).next_number(9) == 1000


class TestDecrementStockListener:
    def test_commits_stock(self, created_order, cart, settings, stock_service, session_store):
        event = StockEvent(cart, created_order, settings)

        DecrementStockListener(stock_service, session_store)(event)

        assert not event.is_propagation_stopped
        assert created_order.status == OrderItemStatus.STOCK_COMMITTED.value
        assert stock_service.levels["TSHIRT-BLK-M"] == 8
        assert stock_service.commits == [{"TSHIRT-BLK-M": 2, "MUG-WHT": 1}]

    def test_failed_commit_halts(self, created_order, cart, settings, stock_service, session_store):
        stock_service.set_level("MUG-WHT", 0)
        event = StockEvent(cart, created_order, settings)

        DecrementStockListener(stock_service, session_store)(event)

        assert event.is_propagation_stopped
        assert event.response == CART_DISPLAY
        assert created_order.status == OrderItemStatus.CREATED.value
        assert stock_service.levels["TSHIRT-BLK-M"] == 10


class TestInitiatePaymentListener:
    @pytest.fixture
    def stock_committed_order(self, created_order, cart, settings, stock_service, session_store):
        DecrementStockListener(stock_service, session_store)(StockEvent(cart, created_order, settings))
        return created_order

    def test_payment_without_provider_skips_gateway(self, stock_committed_order, cart, settings, gateway):
        event = PaymentEvent(cart, stock_committed_order, settings)

        InitiatePaymentListener(gateway)(event)

        assert not event.is_propagation_stopped
        assert gateway.calls == []
        assert stock_committed_order.status == OrderItemStatus.PAYMENT_INITIATED.value

    def test_provider_payment_records_transaction(self, stock_committed_order, cart, settings, gateway):
        stock_committed_order.payment_provider = "paypal"
        event = PaymentEvent(cart, stock_committed_order, settings)

        InitiatePaymentListener(gateway)(event)

        assert not event.is_propagation_stopped
        assert gateway.calls[0]["order_number"] == "ORD-1"
        assert stock_committed_order.payment_transaction_id.startswith("fake_txn_")

    def test_offsite_payment_halts_with_redirect(self, stock_committed_order, cart, settings, gateway):
        stock_committed_order.payment_provider = "paypal"
        gateway.configure(redirect_url="https://pay.example.com/checkout/abc")
        event = PaymentEvent(cart, stock_committed_order, settings)

        InitiatePaymentListener(gateway)(event)

        assert event.is_propagation_stopped
        assert event.response == RedirectToUri("https://pay.example.com/checkout/abc", status_code=303)
        assert stock_committed_order.status == OrderItemStatus.PAYMENT_INITIATED.value

    def test_declined_payment_halts_with_message(
        self, stock_committed_order, cart, settings, gateway, session_store
    ):
        stock_committed_order.payment_provider = "paypal"
        gateway.configure(should_succeed=False, failure_reason="Account locked")
        event = PaymentEvent(cart, stock_committed_order, settings)

        InitiatePaymentListener(gateway, session_store)(event)

        assert event.is_propagation_stopped
        assert event.response == CART_DISPLAY
        assert stock_committed_order.status == OrderItemStatus.STOCK_COMMITTED.value
        flashes = session_store.pop_flash_messages(cart.pid)
        assert flashes[0].message == "The payment could not be started: Account locked"


class TestFinishOrderListener:
    def test_finish_clears_and_stores_the_cart(self, prepared_order, cart, settings, session_store):
        prepared_order.record_creation(cart, "ORD-1")
        prepared_order.commit_stock()
        prepared_order.initiate_payment()

        FinishOrderListener(session_store)(FinishEvent(cart, prepared_order, settings))

        assert prepared_order.status == OrderItemStatus.FINISHED.value
        assert session_store.restore(cart.pid).count == 0

    def test_finish_confirms_the_order_to_the_customer(self, prepared_order, cart, settings, session_store):
        prepared_order.record_creation(cart, "ORD-7")
        prepared_order.commit_stock()
        prepared_order.initiate_payment()

        FinishOrderListener(session_store)(FinishEvent(cart, prepared_order, settings))

        flashes = session_store.pop_flash_messages(cart.pid)
        assert [(f.message, f.severity) for f in flashes] == [
            ("Your order ORD-7 has been created.", Severity.OK)
        ]


class TestProcessOrderCreateListener:
    def test_runs_handlers_in_order(self, cart, order_item, settings):
        calls = []
        listener = ProcessOrderCreateListener(
            [
                lambda e: calls.append("create"),
                lambda e: calls.append("stock"),
                lambda e: calls.append("payment"),
                lambda e: calls.append("finish"),
            ]
        )

        listener(ProcessOrderCreateEvent(cart, order_item, settings))

        assert calls == ["create", "stock", "payment", "finish"]

    def test_stops_after_a_halting_handler(self, cart, order_item, settings):
        calls = []

        def halt(event):
            calls.append("stock")
            event.stop_propagation(CART_DISPLAY)

        listener = ProcessOrderCreateListener([lambda e: calls.append("create"), halt, lambda e: calls.append("payment")])
        event = ProcessOrderCreateEvent(cart, order_item, settings)

        listener(event)

        assert calls == ["create", "stock"]
        assert event.response == CART_DISPLAY
