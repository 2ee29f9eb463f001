"""FastAPI routes for the Checkout domain: cart display and order creation."""

from html import escape

from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from checkout.api.schemas import (
    AddProductRequest,
    CartResponse,
    CreateOrderRequest,
    FlashMessageResponse,
    SelectPaymentRequest,
    ShippingPreferenceRequest,
)
from checkout.controller.responses import Halted, Redirect, RedirectToUri, Render
from checkout.order.item import BillingAddress, OrderItem, ShippingAddress
from checkout.wiring import get_order_controller

# Plugin actions reachable by an internal redirect
_ACTION_URLS = {
    ("Cart\\Cart", "show"): "/cart",
}


def _build(model, payload):
    """Turn a request payload into a model instance (None stays None)."""
    if payload is None:
        return None
    return model(**payload.model_dump(exclude_none=True))


def _serialize(value):
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def _meta_refresh(uri: str, delay: int, status_code: int) -> HTMLResponse:
    target = escape(uri, quote=True)
    content = (
        "<!DOCTYPE html><html><head>"
        f'<meta http-equiv="refresh" content="{delay};url={target}"/>'
        "</head></html>"
    )
    return HTMLResponse(content=content, status_code=status_code, headers={"Location": uri})


def to_http_response(outcome) -> Response:
    """Translate a controller outcome into an HTTP response."""
    if isinstance(outcome, Halted):
        if outcome.response is None:
            return Response(status_code=204)
        return to_http_response(outcome.response)

    if isinstance(outcome, Redirect):
        url = _ACTION_URLS.get((outcome.controller, outcome.action), "/cart")
        return RedirectResponse(url=url, status_code=303)

    if isinstance(outcome, RedirectToUri):
        if outcome.status_code == 200:
            return _meta_refresh(outcome.uri, outcome.delay, outcome.status_code)
        return RedirectResponse(url=outcome.uri, status_code=outcome.status_code)

    if isinstance(outcome, Render):
        variables = {name: _serialize(value) for name, value in outcome.variables.items()}
        return JSONResponse(content=jsonable_encoder({"template": outcome.template, "variables": variables}))

    return outcome


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/cart/orders", tags=["orders"])


@order_router.post("")
async def create_order(body: CreateOrderRequest) -> Response:
    controller = get_order_controller()
    try:
        order_item = _build(OrderItem, body.order_item)
        billing_address = _build(BillingAddress, body.billing_address)
        shipping_address = _build(ShippingAddress, body.shipping_address)
    except ValidationError as exc:
        # A payload that cannot become a model is rejected like any invalid input
        return to_http_response(controller.error_action(exc.messages))

    return to_http_response(controller.create(order_item, billing_address, shipping_address))


@order_router.get("/{order_item_id}")
async def show_order(order_item_id: str) -> Response:
    try:
        order_item = current_domain.repository_for(OrderItem).get(order_item_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail=f"Order item {order_item_id} not found")

    return to_http_response(get_order_controller().show(order_item))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(cart, flash_messages=()) -> CartResponse:
    return CartResponse(
        pid=cart.pid,
        count=cart.count,
        gross=cart.gross,
        currency=cart.currency,
        shipping_same_as_billing=cart.shipping_same_as_billing,
        payment_id=cart.payment.id if cart.payment else None,
        flash_messages=[
            FlashMessageResponse(message=flash.message, severity=flash.severity.value, title=flash.title)
            for flash in flash_messages
        ],
    )


@cart_router.get("", response_model=CartResponse)
async def show_cart() -> CartResponse:
    """Cart display; queued flash messages are shown once."""
    controller = get_order_controller()
    pid = controller.settings.cart.pid
    cart = controller.session_store.restore(pid)
    return _cart_response(cart, controller.session_store.pop_flash_messages(pid))


@cart_router.post("/products", response_model=CartResponse)
async def add_product(body: AddProductRequest) -> CartResponse:
    controller = get_order_controller()
    cart = controller.session_store.restore(controller.settings.cart.pid)
    cart.add_product(body.sku, body.title, body.quantity, body.price)
    controller.session_store.write(cart)
    return _cart_response(cart)


@cart_router.put("/payment", response_model=CartResponse)
async def select_payment(body: SelectPaymentRequest) -> CartResponse:
    controller = get_order_controller()
    cart = controller.session_store.restore(controller.settings.cart.pid)
    cart.select_payment(body.payment_id, body.name, body.provider)
    controller.session_store.write(cart)
    return _cart_response(cart)


@cart_router.put("/shipping", response_model=CartResponse)
async def set_shipping_preference(body: ShippingPreferenceRequest) -> CartResponse:
    controller = get_order_controller()
    cart = controller.session_store.restore(controller.settings.cart.pid)
    cart.ship_to_billing_address(body.same_as_billing)
    controller.session_store.write(cart)
    return _cart_response(cart)
