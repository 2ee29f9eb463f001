"""Cart session store: where the current shopping session lives between requests.

Provides get_session_store() / set_session_store() to swap implementations.
The in-memory store is the default and is what the tests use. Flash messages
are kept per cart pid next to the cart so that a redirect to the cart display
can show them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from checkout.cart.cart import Cart


class Severity(Enum):
    INFO = "info"
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class FlashMessage:
    message: str
    severity: Severity = Severity.INFO
    title: str = ""


class CartSessionStore(ABC):
    """Abstract cart session store."""

    @abstractmethod
    def restore(self, pid: int) -> Cart:
        """Return the cart stored for ``pid``, or a new empty cart."""
        ...

    @abstractmethod
    def write(self, cart: Cart) -> None:
        """Store the cart under its own pid."""
        ...

    @abstractmethod
    def add_flash_message(self, pid: int, message: FlashMessage) -> None: ...

    @abstractmethod
    def pop_flash_messages(self, pid: int) -> list[FlashMessage]:
        """Return and forget all flash messages queued for ``pid``."""
        ...


class InMemoryCartSessionStore(CartSessionStore):
    def __init__(self) -> None:
        self._carts: dict[int, Cart] = {}
        self._flash_messages: dict[int, list[FlashMessage]] = {}

    def restore(self, pid: int) -> Cart:
        cart = self._carts.get(pid)
        if cart is None:
            cart = Cart.create(pid=pid)
        return cart

    def write(self, cart: Cart) -> None:
        self._carts[cart.pid] = cart

    def add_flash_message(self, pid: int, message: FlashMessage) -> None:
        self._flash_messages.setdefault(pid, []).append(message)

    def pop_flash_messages(self, pid: int) -> list[FlashMessage]:
        return self._flash_messages.pop(pid, [])


_current_store: CartSessionStore | None = None


def get_session_store() -> CartSessionStore:
    """Return the current cart session store. Defaults to the in-memory store."""
    global _current_store
    if _current_store is None:
        _current_store = InMemoryCartSessionStore()
    return _current_store


def set_session_store(store: CartSessionStore) -> None:
    global _current_store
    _current_store = store


def reset_session_store() -> None:
    global _current_store
    _current_store = None
