"""Default listeners for the checkout stages."""

from checkout.listeners.finish import FinishOrderListener, ProcessOrderCreateListener
from checkout.listeners.order import OrderNumberSequence, PersistOrderListener
from checkout.listeners.payment import InitiatePaymentListener
from checkout.listeners.stock import CheckStockListener, DecrementStockListener
from checkout.pipeline.events import (
    CheckStockEvent,
    CreateEvent,
    FinishEvent,
    PaymentEvent,
    ProcessOrderCreateEvent,
    StockEvent,
)


def register_default_listeners(
    dispatcher,
    *,
    session_store=None,
    stock_service=None,
    gateway=None,
    order_numbers: OrderNumberSequence | None = None,
):
    """Subscribe the default listener of every stage to ``dispatcher``.

    Collaborators left as None are looked up from their factories on each
    call. Returns the dispatcher.
    """
    persist = PersistOrderListener(order_numbers)
    decrement = DecrementStockListener(stock_service, session_store)
    payment = InitiatePaymentListener(gateway, session_store)
    finish = FinishOrderListener(session_store)

    dispatcher.subscribe(CheckStockEvent, CheckStockListener(stock_service, session_store))
    dispatcher.subscribe(CreateEvent, persist)
    dispatcher.subscribe(StockEvent, decrement)
    dispatcher.subscribe(PaymentEvent, payment)
    dispatcher.subscribe(FinishEvent, finish)
    dispatcher.subscribe(
        ProcessOrderCreateEvent,
        ProcessOrderCreateListener([persist, decrement, payment, finish]),
    )
    return dispatcher


__all__ = [
    "CheckStockListener",
    "DecrementStockListener",
    "FinishOrderListener",
    "InitiatePaymentListener",
    "OrderNumberSequence",
    "PersistOrderListener",
    "ProcessOrderCreateListener",
    "register_default_listeners",
]
