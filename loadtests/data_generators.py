"""Faker-based data generators for the checkout load test.

Payloads match the field names of the Checkout API's Pydantic request
schemas and pass the address rules of the domain model.
"""

import random
import uuid

from faker import Faker

fake = Faker("de_DE")


def valid_email() -> str:
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def product_data() -> dict:
    """Generate AddProductRequest payload."""
    return {
        "sku": f"LT-{uuid.uuid4().hex[:8].upper()}",
        "title": fake.catch_phrase()[:255],
        "quantity": random.randint(1, 3),
        "price": round(random.uniform(1.0, 250.0), 2),
    }


def payment_data() -> dict:
    """Generate SelectPaymentRequest payload (prepayment, no provider)."""
    return {"payment_id": 1, "name": "Prepayment", "provider": None}


def address_data() -> dict:
    return {
        "salutation": random.choice(["Mr.", "Ms.", None]),
        "first_name": fake.first_name()[:255],
        "last_name": fake.last_name()[:255],
        "street": fake.street_address()[:255],
        "zip": fake.postcode()[:20],
        "city": fake.city()[:255],
        "country": "DE",
        "email": valid_email(),
        "additional": {},
    }


def order_data(with_shipping_address: bool = False) -> dict:
    """Generate CreateOrderRequest payload."""
    return {
        "order_item": {
            "email": valid_email(),
            "comment": fake.sentence() if random.random() < 0.3 else None,
            "accept_terms_and_conditions": True,
            "additional": {},
        },
        "billing_address": address_data(),
        "shipping_address": address_data() if with_shipping_address else None,
    }
