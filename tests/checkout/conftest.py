import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Settings and adapters
# ---------------------------------------------------------------------------
@pytest.fixture
def make_settings():
    from checkout.settings import CheckoutSettings

    def _make(**overrides):
        data = {
            "cart": {"pid": 7},
            "order": {"pid": 9, "number_prefix": "ORD-"},
        }
        data.update(overrides)
        return CheckoutSettings(**data)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def session_store():
    from checkout.cart.session import InMemoryCartSessionStore, set_session_store

    store = InMemoryCartSessionStore()
    set_session_store(store)
    return store


@pytest.fixture
def stock_service():
    from checkout.stock import set_stock_service
    from checkout.stock.memory_adapter import InMemoryStockService

    service = InMemoryStockService({"TSHIRT-BLK-M": 10, "MUG-WHT": 5})
    set_stock_service(service)
    return service


@pytest.fixture
def gateway():
    from checkout.payment.gateway import set_gateway
    from checkout.payment.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


# ---------------------------------------------------------------------------
# Cart and order data
# ---------------------------------------------------------------------------
@pytest.fixture
def cart(settings, session_store):
    from checkout.cart.cart import Cart

    cart = Cart.create(pid=settings.cart.pid)
    cart.add_product("TSHIRT-BLK-M", "Black T-Shirt (M)", 2, 19.99)
    cart.add_product("MUG-WHT", "White Mug", 1, 8.50)
    cart.select_payment(1, "Prepayment")
    session_store.write(cart)
    return cart


@pytest.fixture
def order_item():
    from checkout.order.item import OrderItem

    return OrderItem(
        email="jane.doe@example.com",
        accept_terms_and_conditions=True,
        additional={"newsletter": "1"},
    )


@pytest.fixture
def billing_address():
    from checkout.order.item import BillingAddress

    return BillingAddress(
        first_name="Jane",
        last_name="Doe",
        street="Hauptstraße 1",
        zip="10115",
        city="Berlin",
        country="DE",
    )


@pytest.fixture
def shipping_address():
    from checkout.order.item import ShippingAddress

    return ShippingAddress(
        first_name="John",
        last_name="Doe",
        street="Lindenallee 5",
        zip="50667",
        city="Köln",
        country="DE",
    )


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------
@pytest.fixture
def dispatcher(session_store, stock_service, gateway):
    from checkout.listeners import register_default_listeners
    from checkout.pipeline.dispatcher import EventDispatcher

    return register_default_listeners(
        EventDispatcher(),
        session_store=session_store,
        stock_service=stock_service,
        gateway=gateway,
    )


@pytest.fixture
def make_controller(dispatcher, session_store, settings):
    from checkout.controller.order import OrderController
    from checkout.validation.gate import ValidationGate

    def _make(settings=settings, validation_gate=None):
        return OrderController(
            dispatcher=dispatcher,
            settings=settings,
            session_store=session_store,
            validation_gate=validation_gate or ValidationGate.from_settings(settings),
        )

    return _make
