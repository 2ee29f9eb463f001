"""Outcomes of a controller action.

The controller never writes HTTP itself; it returns one of these and the
web layer turns it into a response.
"""

from dataclasses import dataclass, field
from typing import Any

from checkout.pipeline.events import Stage


@dataclass(frozen=True)
class Redirect:
    """Redirect to another action of the plugin, e.g. the cart display."""

    action: str
    controller: str = "Cart\\Cart"
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RedirectToUri:
    uri: str
    status_code: int = 303
    delay: int = 0


@dataclass(frozen=True)
class Render:
    template: str
    variables: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Halted:
    """A stage listener stopped the checkout; ``response`` is what it produced."""

    stage: Stage
    response: Any = None


CART_DISPLAY = Redirect(action="show", controller="Cart\\Cart")
