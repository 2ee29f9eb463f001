"""Finish stage and the combined listener for the monolithic checkout."""

import structlog
from protean.utils.globals import current_domain

from checkout.cart.session import FlashMessage, Severity, get_session_store
from checkout.messages import translate
from checkout.order.item import OrderItem

logger = structlog.get_logger(__name__)


class FinishOrderListener:
    def __init__(self, session_store=None) -> None:
        self._session_store = session_store

    @property
    def session_store(self):
        return self._session_store or get_session_store()

    def __call__(self, event) -> None:
        order_item = event.order_item
        order_item.finish()
        current_domain.repository_for(OrderItem).add(order_item)

        event.cart.clear()
        self.session_store.write(event.cart)
        self.session_store.add_flash_message(
            event.cart.pid,
            FlashMessage(translate("tx_cart.ok.order.created", order_number=order_item.order_number), Severity.OK),
        )

        logger.info("Order finished", order_number=order_item.order_number, cart_pid=event.cart.pid)


class ProcessOrderCreateListener:
    """Runs create, stock decrement, payment and finish for one ProcessOrderCreateEvent.

    The pipeline does not check for a halt in between. A handler that stops
    the event still ends the run, since the remaining handlers depend on the
    state the stopped one would have produced.
    """

    def __init__(self, handlers) -> None:
        self.handlers = list(handlers)

    def __call__(self, event) -> None:
        for handler in self.handlers:
            handler(event)
            if event.is_propagation_stopped:
                logger.debug("Order processing stopped", handler=type(handler).__name__)
                return
