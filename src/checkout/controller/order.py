"""Order controller: the create and show actions of the checkout.

``create()`` is the order-creation workflow:

1. the validation gate checks the submitted arguments (all-or-nothing);
2. order item and billing address must be present and the cart non-empty;
3. the checkout pipeline for the configured mode runs the stages;
4. if no stage halted, the customer is sent to the success URL of the
   selected payment method or the confirmation view is rendered.

Each outcome is returned as a response object (see ``responses``).
"""

import structlog

from checkout.cart.session import FlashMessage, Severity
from checkout.controller.responses import CART_DISPLAY, Halted, RedirectToUri, Render
from checkout.messages import translate
from checkout.payment.redirects import resolve_success_redirect, type_plugin_settings
from checkout.pipeline.pipeline import pipeline_for
from checkout.utils.logging import bind_checkout_context, reset_checkout_context

logger = structlog.get_logger(__name__)


class OrderController:
    def __init__(self, dispatcher, settings, session_store, validation_gate) -> None:
        self.dispatcher = dispatcher
        self.settings = settings
        self.session_store = session_store
        self.validation_gate = validation_gate

    def create(self, order_item=None, billing_address=None, shipping_address=None):
        tokens = bind_checkout_context(cart_pid=self.settings.cart.pid)
        try:
            return self._create(order_item, billing_address, shipping_address)
        finally:
            reset_checkout_context(tokens)

    def _create(self, order_item, billing_address, shipping_address):
        gate_result = self.validation_gate.validate(
            {
                "order_item": order_item,
                "billing_address": billing_address,
                "shipping_address": shipping_address,
            }
        )
        if not gate_result.is_valid:
            return self.error_action(gate_result.errors())

        if order_item is None or billing_address is None:
            logger.info(
                "Order item or billing address missing",
                has_order_item=order_item is not None,
                has_billing_address=billing_address is not None,
            )
            return CART_DISPLAY

        cart = self.session_store.restore(self.settings.cart.pid)
        if cart.count == 0:
            logger.info("Cart is empty")
            return CART_DISPLAY

        if not cart.shipping_same_as_billing and shipping_address is None:
            return self.error_action({"shipping_address": ["A shipping address is required"]})

        pipeline = pipeline_for(self.dispatcher, self.settings.features)
        result = pipeline.run(cart, order_item, billing_address, shipping_address, self.settings)
        if result.stopped:
            return Halted(stage=result.stage, response=result.response)

        payment_settings = type_plugin_settings(self.settings, cart, "payments")
        redirect = resolve_success_redirect(order_item.payment_id, payment_settings)
        if redirect is not None:
            logger.info("Redirecting to payment success page", url=redirect.url)
            return RedirectToUri(redirect.url, status_code=redirect.status_code)

        return Render("Cart/Order/Create", {"cart": cart, "order_item": order_item})

    def show(self, order_item):
        return Render("Cart/Order/Show", {"order_item": order_item})

    def error_action(self, errors=None):
        """Flash the generic validation message and go back to the cart."""
        logger.info("Order rejected by validation", errors=errors or {})
        self.session_store.add_flash_message(
            self.settings.cart.pid,
            FlashMessage(translate("tx_cart.error.validation"), Severity.ERROR),
        )
        return CART_DISPLAY
