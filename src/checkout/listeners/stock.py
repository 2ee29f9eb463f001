"""Stock listeners: check availability before the order exists, commit it after."""

import structlog
from protean.utils.globals import current_domain

from checkout.cart.session import FlashMessage, Severity, get_session_store
from checkout.controller.responses import CART_DISPLAY
from checkout.messages import translate
from checkout.order.item import OrderItem
from checkout.stock import get_stock_service

logger = structlog.get_logger(__name__)


class _StockListener:
    def __init__(self, stock_service=None, session_store=None) -> None:
        self._stock_service = stock_service
        self._session_store = session_store

    @property
    def stock_service(self):
        return self._stock_service or get_stock_service()

    @property
    def session_store(self):
        return self._session_store or get_session_store()


class CheckStockListener(_StockListener):
    """Halts the checkout with a redirect to the cart if any line is short on stock."""

    def __call__(self, event) -> None:
        shortages = self.stock_service.shortages(event.cart)
        if not shortages:
            return

        for shortage in shortages:
            self.session_store.add_flash_message(
                event.cart.pid,
                FlashMessage(
                    translate(
                        "tx_cart.error.stock_handling.order",
                        title=shortage.title,
                        requested=shortage.requested,
                        available=shortage.available,
                    ),
                    Severity.ERROR,
                ),
            )

        logger.info(
            "Insufficient stock",
            cart_pid=event.cart.pid,
            skus=[shortage.sku for shortage in shortages],
        )
        event.stop_propagation(CART_DISPLAY)


class DecrementStockListener(_StockListener):
    def __call__(self, event) -> None:
        order_item = event.order_item

        if not self.stock_service.commit(event.cart):
            self.session_store.add_flash_message(
                event.cart.pid,
                FlashMessage(translate("tx_cart.error.stock_handling.decrement"), Severity.ERROR),
            )
            logger.warning("Stock decrement failed", order_number=order_item.order_number)
            event.stop_propagation(CART_DISPLAY)
            return

        order_item.commit_stock()
        current_domain.repository_for(OrderItem).add(order_item)
        logger.info("Stock committed", order_number=order_item.order_number)
