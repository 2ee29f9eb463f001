"""Message catalog for texts shown to the customer (flash messages).

Keys follow the ``tx_cart.*`` naming of the cart's language labels.
"""

MESSAGES: dict[str, str] = {
    "tx_cart.error.validation": "Please check your input. Some of the data you entered is not valid.",
    "tx_cart.error.stock_handling.order": (
        'Only {available} of "{title}" are available; you requested {requested}.'
    ),
    "tx_cart.error.stock_handling.decrement": "The stock for your order could not be reserved.",
    "tx_cart.error.payment.initiate": "The payment could not be started: {reason}",
    "tx_cart.ok.order.created": "Your order {order_number} has been created.",
}


def translate(key: str, **arguments) -> str:
    """Return the message for ``key`` with ``arguments`` filled in.

    Unknown keys are returned unchanged so a missing label stays visible.
    """
    message = MESSAGES.get(key)
    if message is None:
        return key
    return message.format(**arguments)
