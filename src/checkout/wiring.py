"""Assembles the order controller from settings and the adapter factories.

Provides get_order_controller() / set_order_controller() so the web layer
and tests share one controller per process.
"""

from checkout.cart.session import get_session_store
from checkout.controller.order import OrderController
from checkout.listeners import register_default_listeners
from checkout.pipeline.dispatcher import EventDispatcher
from checkout.settings import get_settings
from checkout.validation.gate import ValidationGate


def build_order_controller(settings=None, dispatcher=None, session_store=None) -> OrderController:
    """Build a controller; a new dispatcher gets the default stage listeners.

    Validation rules are resolved here, so a misconfigured validator fails
    while the controller is built.
    """
    settings = settings or get_settings()
    session_store = session_store or get_session_store()
    if dispatcher is None:
        dispatcher = register_default_listeners(EventDispatcher(), session_store=session_store)

    return OrderController(
        dispatcher=dispatcher,
        settings=settings,
        session_store=session_store,
        validation_gate=ValidationGate.from_settings(settings),
    )


_current_controller: OrderController | None = None


def get_order_controller() -> OrderController:
    global _current_controller
    if _current_controller is None:
        _current_controller = build_order_controller()
    return _current_controller


def set_order_controller(controller: OrderController) -> None:
    global _current_controller
    _current_controller = controller


def reset_order_controller() -> None:
    global _current_controller
    _current_controller = None
