"""Checkout load test scenarios.

The cart lives in the server's session store, so concurrent users share
one cart. The journey tolerates the resulting redirects to the cart (a
cart emptied by another user's finished order) instead of failing on them.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import order_data, payment_data, product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CheckoutState


class CheckoutJourney(SequentialTaskSet):
    """Add Products -> Select Payment -> Place Order -> Show Cart.

    Generates events: OrderItemCreated, OrderItemStockCommitted,
    OrderItemPaymentInitiated, OrderItemFinished.
    """

    def on_start(self):
        self.state = CheckoutState()

    @task
    def add_product_1(self):
        self._add_product()

    @task
    def add_product_2(self):
        self._add_product()

    @task
    def select_payment(self):
        with self.client.put(
            "/cart/payment",
            json=payment_data(),
            catch_response=True,
            name="PUT /cart/payment",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Select payment failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def place_order(self):
        with self.client.post(
            "/cart/orders",
            json=order_data(),
            catch_response=True,
            allow_redirects=False,
            name="POST /cart/orders",
        ) as resp:
            if resp.status_code == 200:
                self.state.orders_placed += 1
            elif resp.status_code == 303 and resp.headers.get("location") == "/cart":
                self.state.redirected_to_cart += 1
                resp.success()
            else:
                resp.failure(f"Place order failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def show_cart(self):
        with self.client.get("/cart", catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200:
                resp.failure(f"Show cart failed: {resp.status_code}: {extract_error_detail(resp)}")
        self.interrupt()

    def _add_product(self):
        with self.client.post(
            "/cart/products",
            json=product_data(),
            catch_response=True,
            name="POST /cart/products",
        ) as resp:
            if resp.status_code == 200:
                self.state.item_count += 1
            else:
                resp.failure(f"Add product failed: {resp.status_code}: {extract_error_detail(resp)}")


class CheckoutUser(HttpUser):
    wait_time = between(0.5, 3.0)
    tasks = [CheckoutJourney]
