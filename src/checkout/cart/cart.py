"""Shopping cart: the customer's current session, restored from the cart session store.

The checkout only reads the cart: item count, the shipping-equals-billing
flag, the selected payment method and the billing country. The finish stage
is the one place that empties it once the order is complete.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, HasMany, Integer, String, ValueObject

from checkout.domain import checkout


@checkout.value_object(part_of="Cart")
class PaymentMethod:
    """The payment method selected in the cart, identified by its configured option id."""

    id = Integer(required=True)
    name = String(max_length=255)
    provider = String(max_length=100)


@checkout.entity(part_of="Cart")
class CartProduct:
    sku = String(required=True, max_length=100)
    title = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)


@checkout.aggregate
class Cart:
    pid = Integer(required=True)
    billing_country = String(max_length=2, default="de")
    currency = String(max_length=3, default="EUR")
    shipping_same_as_billing = Boolean(default=True)
    payment = ValueObject(PaymentMethod)
    products = HasMany(CartProduct)

    @invariant.post
    def product_skus_are_unique(self):
        skus = [product.sku for product in self.products]
        if len(skus) != len(set(skus)):
            raise ValidationError({"products": ["A product can only appear once in the cart"]})

    @classmethod
    def create(cls, pid, billing_country="de", currency="EUR"):
        return cls(pid=pid, billing_country=billing_country, currency=currency)

    @property
    def count(self) -> int:
        """Total number of units in the cart."""
        return sum(product.quantity for product in self.products)

    @property
    def gross(self) -> float:
        return round(sum(product.price * product.quantity for product in self.products), 2)

    def add_product(self, sku, title, quantity, price):
        """Add a product, or increase its quantity if the SKU is already in the cart."""
        existing = next((p for p in self.products if p.sku == sku), None)
        if existing:
            existing.quantity += quantity
        else:
            self.add_products(CartProduct(sku=sku, title=title, quantity=quantity, price=price))

    def select_payment(self, payment_id, name=None, provider=None):
        self.payment = PaymentMethod(id=payment_id, name=name, provider=provider)

    def ship_to_billing_address(self, same_as_billing=True):
        self.shipping_same_as_billing = same_as_billing

    def clear(self):
        """Remove all products from the cart."""
        products = list(self.products)
        if products:
            self.remove_products(products)
