"""Payment stage: starts the transaction with the selected provider."""

import structlog
from protean.utils.globals import current_domain

from checkout.cart.session import FlashMessage, Severity, get_session_store
from checkout.controller.responses import CART_DISPLAY, RedirectToUri
from checkout.messages import translate
from checkout.order.item import OrderItem
from checkout.payment.gateway import get_gateway

logger = structlog.get_logger(__name__)


class InitiatePaymentListener:
    """Initiates the payment; halts when the provider takes over the customer.

    Payment methods without a provider (prepayment, invoice) need no gateway
    call and are marked initiated right away.
    """

    def __init__(self, gateway=None, session_store=None) -> None:
        self._gateway = gateway
        self._session_store = session_store

    @property
    def gateway(self):
        return self._gateway or get_gateway()

    @property
    def session_store(self):
        return self._session_store or get_session_store()

    def __call__(self, event) -> None:
        order_item = event.order_item

        if not order_item.payment_provider:
            order_item.initiate_payment()
            current_domain.repository_for(OrderItem).add(order_item)
            return

        result = self.gateway.initiate(order_item, event.cart)
        if not result.success:
            self.session_store.add_flash_message(
                event.cart.pid,
                FlashMessage(
                    translate("tx_cart.error.payment.initiate", reason=result.failure_reason),
                    Severity.ERROR,
                ),
            )
            logger.warning(
                "Payment initiation failed",
                order_number=order_item.order_number,
                provider=order_item.payment_provider,
                reason=result.failure_reason,
            )
            event.stop_propagation(CART_DISPLAY)
            return

        order_item.initiate_payment(result.transaction_id)
        current_domain.repository_for(OrderItem).add(order_item)
        logger.info(
            "Payment initiated",
            order_number=order_item.order_number,
            provider=order_item.payment_provider,
            transaction_id=result.transaction_id,
        )

        if result.redirect_url:
            event.stop_propagation(RedirectToUri(result.redirect_url, status_code=303))
