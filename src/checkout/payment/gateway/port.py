"""Payment gateway port (abstract interface).

The payment stage hands the order to a gateway adapter chosen by the
payment provider configured for the cart's payment method. Adapters either
start the transaction directly or ask for the customer to be sent to the
provider's own pages.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentInitiation:
    """Result of starting a payment transaction."""

    success: bool
    transaction_id: str | None = None
    redirect_url: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def initiate(self, order_item, cart) -> PaymentInitiation:
        """Start the payment transaction for a created order."""
        ...
