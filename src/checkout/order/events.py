"""Domain events for the OrderItem aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="OrderItem")
class OrderItemCreated:
    """An order item was persisted from the cart contents."""

    __version__ = 1

    order_item_id = Identifier(required=True)
    order_number = String(required=True)
    cart_pid = Integer()
    pid = Integer()
    gross = Float()
    currency = String(max_length=3)
    created_at = DateTime(required=True)


@checkout.event(part_of="OrderItem")
class OrderItemStockCommitted:
    """Stock levels were decremented for the ordered products."""

    __version__ = 1

    order_item_id = Identifier(required=True)


@checkout.event(part_of="OrderItem")
class OrderItemPaymentInitiated:
    """The payment transaction was prepared with the selected provider."""

    __version__ = 1

    order_item_id = Identifier(required=True)
    payment_id = Integer()
    payment_provider = String()
    transaction_id = String()


@checkout.event(part_of="OrderItem")
class OrderItemFinished:
    """Final bookkeeping for the order ran; the cart has been cleared."""

    __version__ = 1

    order_item_id = Identifier(required=True)
    finished_at = DateTime(required=True)


@checkout.event(part_of="OrderItem")
class OrderItemReconciliationRequired:
    """A stage halted after the order was persisted; the order needs manual reconciliation."""

    __version__ = 1

    order_item_id = Identifier(required=True)
    halted_stage = String(required=True)
