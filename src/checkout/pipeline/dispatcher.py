"""Event dispatcher for the checkout stages.

Listeners are plain callables taking the event. They are registered per
event type and also receive events of subclasses. Within one dispatch,
listeners run by descending priority, then in registration order; once an
event reports propagation stopped, the remaining listeners are skipped.
"""

from collections.abc import Callable
from itertools import count

import structlog

from checkout.pipeline.events import StoppableEvent

logger = structlog.get_logger(__name__)

Listener = Callable[[object], None]


class EventDispatcher:
    def __init__(self) -> None:
        self._listeners: dict[type, list[tuple[int, int, Listener]]] = {}
        self._sequence = count()

    def subscribe(self, event_type: type, listener: Listener, priority: int = 0) -> None:
        self._listeners.setdefault(event_type, []).append((priority, next(self._sequence), listener))

    def unsubscribe(self, event_type: type, listener: Listener) -> None:
        registered = self._listeners.get(event_type, [])
        self._listeners[event_type] = [entry for entry in registered if entry[2] is not listener]

    def listeners_for(self, event) -> list[Listener]:
        entries = []
        for event_type in type(event).__mro__:
            entries.extend(self._listeners.get(event_type, []))
        entries.sort(key=lambda entry: (-entry[0], entry[1]))
        return [listener for _, _, listener in entries]

    def dispatch(self, event):
        """Invoke the listeners for ``event`` and return the same event."""
        stoppable = isinstance(event, StoppableEvent)

        for listener in self.listeners_for(event):
            if stoppable and event.is_propagation_stopped:
                break
            listener(event)

        if stoppable and event.is_propagation_stopped:
            logger.debug("Event propagation stopped", event_type=type(event).__name__)

        return event
