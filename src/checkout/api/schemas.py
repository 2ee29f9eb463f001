"""Pydantic request/response schemas for the Checkout API.

Payload fields are deliberately loose: required-ness and formats are the
business of the validation gate and the domain model, so a half-filled form
still reaches them and fails with the generic validation message.
"""

from typing import Any

from pydantic import BaseModel, Field


class AddressPayload(BaseModel):
    salutation: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    street: str | None = None
    zip: str | None = None
    city: str | None = None
    country: str | None = None
    email: str | None = None
    phone: str | None = None
    additional: dict[str, Any] = Field(default_factory=dict)


class OrderItemPayload(BaseModel):
    email: str | None = None
    comment: str | None = None
    accept_terms_and_conditions: bool = False
    additional: dict[str, Any] = Field(default_factory=dict)


class CreateOrderRequest(BaseModel):
    order_item: OrderItemPayload | None = None
    billing_address: AddressPayload | None = None
    shipping_address: AddressPayload | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_item": {
                        "email": "jane@example.com",
                        "accept_terms_and_conditions": True,
                        "additional": {"newsletter": "1"},
                    },
                    "billing_address": {
                        "first_name": "Jane",
                        "last_name": "Doe",
                        "street": "Hauptstraße 1",
                        "zip": "10115",
                        "city": "Berlin",
                        "country": "DE",
                    },
                    "shipping_address": None,
                }
            ]
        }
    }


class AddProductRequest(BaseModel):
    sku: str
    title: str
    quantity: int = Field(ge=1, default=1)
    price: float = Field(ge=0)


class SelectPaymentRequest(BaseModel):
    payment_id: int
    name: str | None = None
    provider: str | None = None


class ShippingPreferenceRequest(BaseModel):
    same_as_billing: bool = True


class FlashMessageResponse(BaseModel):
    message: str
    severity: str
    title: str = ""


class CartResponse(BaseModel):
    pid: int
    count: int
    gross: float
    currency: str
    shipping_same_as_billing: bool
    payment_id: int | None = None
    flash_messages: list[FlashMessageResponse] = Field(default_factory=list)
