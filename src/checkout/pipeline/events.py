"""Stoppable checkout stage events.

Each stage of the checkout pipeline is announced by one event type. Events
carry the cart, the order item and a snapshot of the checkout settings, and
are mutable: listeners may change the order item in place, fill in a
``response`` and stop propagation. The pipeline reads the stop flag right
after the dispatch of each stage.
"""

from enum import Enum


class Stage(Enum):
    STOCK_CHECK = "stock_check"
    CREATE = "create"
    STOCK_DECREMENT = "stock_decrement"
    PAYMENT = "payment"
    FINISH = "finish"
    PROCESS_ORDER_CREATE = "process_order_create"


class StoppableEvent:
    stage: Stage

    def __init__(self) -> None:
        self._propagation_stopped = False
        self.response = None

    @property
    def is_propagation_stopped(self) -> bool:
        return self._propagation_stopped

    def stop_propagation(self, response=None) -> None:
        """Halt the pipeline; ``response`` is what the caller should answer with."""
        if response is not None:
            self.response = response
        self._propagation_stopped = True


class CheckoutEvent(StoppableEvent):
    def __init__(self, cart, order_item, settings) -> None:
        super().__init__()
        self.cart = cart
        self.order_item = order_item
        self.settings = settings

    def __repr__(self) -> str:
        return f"<{type(self).__name__} stage={self.stage.value} stopped={self.is_propagation_stopped}>"


class CheckStockEvent(CheckoutEvent):
    """Stock levels are checked against the cart before anything is created."""

    stage = Stage.STOCK_CHECK


class CreateEvent(CheckoutEvent):
    """The order item is persisted."""

    stage = Stage.CREATE


class StockEvent(CheckoutEvent):
    """The stock change implied by the stock check is committed."""

    stage = Stage.STOCK_DECREMENT


class PaymentEvent(CheckoutEvent):
    """The payment transaction is prepared with the selected provider."""

    stage = Stage.PAYMENT


class FinishEvent(CheckoutEvent):
    """Final bookkeeping: the order is marked finished and the cart cleared."""

    stage = Stage.FINISH


class ProcessOrderCreateEvent(CheckoutEvent):
    """Single notification covering create, stock decrement, payment and finish."""

    stage = Stage.PROCESS_ORDER_CREATE


SPLIT_UP_STAGE_EVENTS = (CreateEvent, StockEvent, PaymentEvent, FinishEvent)
