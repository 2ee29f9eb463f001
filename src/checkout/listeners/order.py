"""Create stage: turns the order item into a persisted order with a number."""

from itertools import count

import structlog
from protean.utils.globals import current_domain

from checkout.order.item import OrderItem

logger = structlog.get_logger(__name__)


class OrderNumberSequence:
    """Running order numbers, counted separately per storage pid."""

    def __init__(self, start: int = 1) -> None:
        self._start = start
        self._counters: dict[int, count] = {}

    def next_number(self, pid) -> int:
        if pid not in self._counters:
            self._counters[pid] = count(self._start)
        return next(self._counters[pid])


class PersistOrderListener:
    def __init__(self, sequence: OrderNumberSequence | None = None) -> None:
        self.sequence = sequence or OrderNumberSequence()

    def __call__(self, event) -> None:
        order_item = event.order_item
        settings = event.settings

        number = self.sequence.next_number(order_item.pid)
        order_number = f"{settings.order.number_prefix}{number}"

        order_item.record_creation(event.cart, order_number)
        current_domain.repository_for(OrderItem).add(order_item)

        logger.info(
            "Order created",
            order_item_id=str(order_item.id),
            order_number=order_number,
            pid=order_item.pid,
            gross=order_item.gross,
        )
