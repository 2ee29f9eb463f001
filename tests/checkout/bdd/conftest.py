"""Shared BDD fixtures and step definitions for the checkout."""

import pytest
from checkout.controller.responses import CART_DISPLAY
from checkout.order.item import OrderItem
from checkout.pipeline.events import StockEvent
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def settings_overrides():
    """Settings collected by Given steps; applied when the order is placed."""
    return {}


@pytest.fixture()
def outcome():
    return {"result": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a cart with {count:d} products"))
def _(cart, count):
    assert cart.count == count


@given("the checkout dispatches separate stage events")
def _(settings_overrides):
    settings_overrides["features"] = {"split_up_process_order_create_event": True}


@given("the cart has been emptied")
def _(cart, session_store):
    cart.clear()
    session_store.write(cart)


@given(parsers.cfparse('only {quantity:d} "{sku}" are in stock'))
def _(stock_service, quantity, sku):
    stock_service.set_level(sku, quantity)


@given(parsers.cfparse('the stock of "{sku}" runs out before it is committed'))
def _(dispatcher, stock_service, sku):
    dispatcher.subscribe(StockEvent, lambda event: stock_service.set_level(sku, 0), priority=10)


@given("order comments are required")
def _(settings_overrides):
    settings_overrides["validation"] = {"order_item": {"fields": {"comment": {"validator": "NotEmpty"}}}}


@given(parsers.cfparse('payment method {payment_id:d} redirects to "{url}" on success'))
def _(settings_overrides, payment_id, url):
    settings_overrides["payments"] = {"options": {payment_id: {"redirects": {"success": {"url": url}}}}}


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def _(order_item, status):
    assert current_domain.repository_for(OrderItem).get(order_item.id).status == status


@then("the customer is sent back to the cart")
def _(outcome):
    assert outcome["result"] == CART_DISPLAY


@then("no order was created")
def _(order_item):
    assert current_domain.repository_for(OrderItem)._dao.query.all().items == []
    assert order_item.order_number is None


@then(parsers.cfparse('the customer sees the message "{message}"'))
@then(parsers.cfparse("the customer sees the message '{message}'"))
def _(session_store, cart, message):
    flashes = session_store.pop_flash_messages(cart.pid)
    assert message in [flash.message for flash in flashes]
