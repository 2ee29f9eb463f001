"""Configurable fake payment gateway for development and testing.

Simulates a provider without external calls. It can be configured at
runtime to fail, or to ask for an off-site redirect the way hosted payment
pages do.
"""

from uuid import uuid4

from checkout.payment.gateway.port import PaymentGateway, PaymentInitiation


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment declined"
        self.redirect_url: str | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Payment declined",
        redirect_url: str | None = None,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.redirect_url = redirect_url

    def initiate(self, order_item, cart) -> PaymentInitiation:
        self.calls.append(
            {
                "method": "initiate",
                "order_number": order_item.order_number,
                "payment_provider": order_item.payment_provider,
                "amount": order_item.gross,
                "currency": order_item.currency,
            }
        )

        if not self.should_succeed:
            return PaymentInitiation(success=False, failure_reason=self.failure_reason)

        return PaymentInitiation(
            success=True,
            transaction_id=f"fake_txn_{uuid4().hex[:12]}",
            redirect_url=self.redirect_url,
        )
