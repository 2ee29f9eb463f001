"""Per-user state tracking for the checkout load test.

Each Locust user instance maintains its own state; no cross-user sharing.
"""

from dataclasses import dataclass


@dataclass
class CheckoutState:
    """Tracks state for a single simulated checkout."""

    item_count: int = 0
    orders_placed: int = 0
    redirected_to_cart: int = 0
