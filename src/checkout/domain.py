"""Checkout bounded context: order finalisation for the shopping cart.

Handles the order-creation workflow: argument validation, the stoppable
checkout pipeline (stock check, create, stock decrement, payment, finish)
and the payment-specific success redirect.
"""

from protean.domain import Domain

from checkout.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

checkout = Domain(name="checkout")
