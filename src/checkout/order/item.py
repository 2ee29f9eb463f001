"""OrderItem aggregate: the order header finalised at checkout.

An OrderItem is built from the submitted form data, receives its billing and
(optionally) shipping address while the checkout pipeline runs, and becomes
a durable record when the create stage persists it. From then on only its
status moves forward:

    NEW → CREATED → STOCK_COMMITTED → PAYMENT_INITIATED → FINISHED
    CREATED → RECONCILIATION_REQUIRED (stock decrement halted after create)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Dict, Float, HasOne, Integer, String, Text

from checkout.domain import checkout
from checkout.order.events import (
    OrderItemCreated,
    OrderItemFinished,
    OrderItemPaymentInitiated,
    OrderItemReconciliationRequired,
    OrderItemStockCommitted,
)


class OrderItemStatus(Enum):
    NEW = "New"
    CREATED = "Created"
    STOCK_COMMITTED = "Stock_Committed"
    PAYMENT_INITIATED = "Payment_Initiated"
    FINISHED = "Finished"
    RECONCILIATION_REQUIRED = "Reconciliation_Required"


_VALID_TRANSITIONS = {
    OrderItemStatus.NEW: {OrderItemStatus.CREATED},
    OrderItemStatus.CREATED: {
        OrderItemStatus.STOCK_COMMITTED,
        OrderItemStatus.RECONCILIATION_REQUIRED,
    },
    OrderItemStatus.STOCK_COMMITTED: {OrderItemStatus.PAYMENT_INITIATED},
    OrderItemStatus.PAYMENT_INITIATED: {OrderItemStatus.FINISHED},
    OrderItemStatus.FINISHED: set(),  # Terminal
    OrderItemStatus.RECONCILIATION_REQUIRED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@checkout.entity(part_of="OrderItem")
class BillingAddress:
    """The address the invoice is issued to. Every order has exactly one."""

    salutation = String(max_length=50)
    first_name = String(required=True, max_length=255)
    last_name = String(required=True, max_length=255)
    company = String(max_length=255)
    street = String(required=True, max_length=255)
    zip = String(required=True, max_length=20)
    city = String(required=True, max_length=255)
    country = String(max_length=2)
    email = String(max_length=255)
    phone = String(max_length=50)
    additional = Dict(default=dict)
    pid = Integer()


@checkout.entity(part_of="OrderItem")
class ShippingAddress:
    """Delivery address; absent when the cart ships to the billing address."""

    salutation = String(max_length=50)
    first_name = String(required=True, max_length=255)
    last_name = String(required=True, max_length=255)
    company = String(max_length=255)
    street = String(required=True, max_length=255)
    zip = String(required=True, max_length=20)
    city = String(required=True, max_length=255)
    country = String(max_length=2)
    email = String(max_length=255)
    phone = String(max_length=50)
    additional = Dict(default=dict)
    pid = Integer()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@checkout.aggregate
class OrderItem:
    order_number = String(max_length=100)
    email = String(max_length=255)
    comment = Text()
    additional = Dict(default=dict)
    accept_terms_and_conditions = Boolean(default=False)
    cart_pid = Integer()
    pid = Integer()
    payment_id = Integer()
    payment_name = String(max_length=255)
    payment_provider = String(max_length=100)
    payment_transaction_id = String(max_length=255)
    currency = String(max_length=3, default="EUR")
    gross = Float(default=0.0)
    products = Text()  # JSON snapshot of the cart lines
    shipping_same_as_billing = Boolean(default=False)
    status = String(choices=OrderItemStatus, default=OrderItemStatus.NEW.value)
    halted_stage = String(max_length=50)
    billing_address = HasOne(BillingAddress)
    shipping_address = HasOne(ShippingAddress)
    created_at = DateTime()
    finished_at = DateTime()

    @invariant.post
    def shipping_address_conflicts_with_same_as_billing(self):
        if self.shipping_same_as_billing and self.shipping_address is not None:
            raise ValidationError(
                {"shipping_address": ["A shipping address cannot be set when shipping equals billing"]}
            )

    @invariant.post
    def shipping_destination_required_once_billing_is_attached(self):
        if self.billing_address is None:
            return
        if not self.shipping_same_as_billing and self.shipping_address is None:
            raise ValidationError(
                {"shipping_address": ["A shipping address is required unless shipping equals billing"]}
            )

    # -------------------------------------------------------------------
    # Address attachment (only while the order is still new)
    # -------------------------------------------------------------------
    def attach_addresses(self, billing_address, shipping_address=None, *, shipping_same_as_billing, storage_pid):
        """Attach the addresses and move them into the order's storage location.

        When shipping equals billing, any submitted shipping address is
        discarded and the order keeps none.
        """
        self._ensure_new("Addresses")

        if not shipping_same_as_billing and shipping_address is None:
            raise ValidationError(
                {"shipping_address": ["A shipping address is required unless shipping equals billing"]}
            )

        billing_address.pid = storage_pid
        if not shipping_same_as_billing:
            shipping_address.pid = storage_pid

        with atomic_change(self):
            self.pid = storage_pid
            self.billing_address = billing_address
            if shipping_same_as_billing:
                self.shipping_same_as_billing = True
                if self.shipping_address is not None:
                    self.shipping_address = None
            else:
                self.shipping_same_as_billing = False
                self.shipping_address = shipping_address

    def remove_shipping_address(self):
        """Drop the shipping address; the order ships to the billing address."""
        self._ensure_new("Addresses")
        with atomic_change(self):
            if self.shipping_address is not None:
                self.shipping_address = None
            self.shipping_same_as_billing = True

    def assign_cart(self, cart_pid, payment=None):
        """Link the order to the cart it is created from and copy the selected payment."""
        self._ensure_new("The cart reference")
        self.cart_pid = cart_pid
        if payment is not None:
            self.payment_id = payment.id
            self.payment_name = payment.name
            self.payment_provider = payment.provider

    # -------------------------------------------------------------------
    # Stage transitions
    # -------------------------------------------------------------------
    def record_creation(self, cart, order_number):
        """Snapshot the cart contents and mark the order as persisted."""
        self._transition_to(OrderItemStatus.CREATED)

        now = datetime.now(UTC)
        self.order_number = order_number
        self.products = json.dumps(
            [
                {
                    "sku": product.sku,
                    "title": product.title,
                    "quantity": product.quantity,
                    "price": product.price,
                }
                for product in cart.products
            ]
        )
        self.gross = cart.gross
        self.currency = cart.currency
        self.created_at = now

        self.raise_(
            OrderItemCreated(
                order_item_id=str(self.id),
                order_number=order_number,
                cart_pid=self.cart_pid,
                pid=self.pid,
                gross=self.gross,
                currency=self.currency,
                created_at=now,
            )
        )

    def commit_stock(self):
        self._transition_to(OrderItemStatus.STOCK_COMMITTED)
        self.raise_(OrderItemStockCommitted(order_item_id=str(self.id)))

    def initiate_payment(self, transaction_id=None):
        self._transition_to(OrderItemStatus.PAYMENT_INITIATED)
        self.payment_transaction_id = transaction_id

        self.raise_(
            OrderItemPaymentInitiated(
                order_item_id=str(self.id),
                payment_id=self.payment_id,
                payment_provider=self.payment_provider,
                transaction_id=transaction_id,
            )
        )

    def finish(self):
        self._transition_to(OrderItemStatus.FINISHED)
        now = datetime.now(UTC)
        self.finished_at = now
        self.raise_(OrderItemFinished(order_item_id=str(self.id), finished_at=now))

    def require_reconciliation(self, halted_stage):
        """Flag a persisted order whose checkout stopped before its stock was committed."""
        self._transition_to(OrderItemStatus.RECONCILIATION_REQUIRED)
        self.halted_stage = halted_stage
        self.raise_(
            OrderItemReconciliationRequired(
                order_item_id=str(self.id),
                halted_stage=halted_stage,
            )
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _ensure_new(self, what):
        if OrderItemStatus(self.status) != OrderItemStatus.NEW:
            raise ValidationError({"status": [f"{what} cannot change once the order has been created"]})

    def _transition_to(self, new_status):
        current = OrderItemStatus(self.status)
        if new_status not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {new_status.value}"]})
        self.status = new_status.value
