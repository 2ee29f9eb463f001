"""Checkout pipeline: drives the order stages over one (cart, order item) pair.

Two variants share one entry point, ``run()``:

- SplitUpCheckoutPipeline dispatches create, stock decrement, payment and
  finish as separate events and stops right after the first stage whose
  event reports propagation stopped.
- MonolithicCheckoutPipeline dispatches a single ProcessOrderCreateEvent
  covering the same four stages, without intermediate halting.

Both variants first dispatch the stock check, then attach the addresses to
the order item. ``pipeline_for()`` picks the variant once per checkout from
the ``split_up_process_order_create_event`` feature flag.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import structlog
from protean.utils.globals import current_domain

from checkout.order.item import OrderItem, OrderItemStatus
from checkout.pipeline.events import (
    SPLIT_UP_STAGE_EVENTS,
    CheckStockEvent,
    ProcessOrderCreateEvent,
    Stage,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    stopped: bool
    stage: Stage | None = None
    response: Any = None


class CheckoutPipeline(ABC):
    def __init__(self, dispatcher) -> None:
        self.dispatcher = dispatcher

    def run(self, cart, order_item, billing_address, shipping_address, settings) -> PipelineResult:
        snapshot = settings.model_copy(deep=True)

        stock_check = self._dispatch(CheckStockEvent(cart, order_item, snapshot))
        if stock_check.is_propagation_stopped:
            return self._halted(stock_check)

        order_item.assign_cart(cart.pid, cart.payment)
        order_item.attach_addresses(
            billing_address,
            shipping_address,
            shipping_same_as_billing=cart.shipping_same_as_billing,
            storage_pid=snapshot.order.pid,
        )
        logger.debug(
            "Addresses attached",
            storage_pid=snapshot.order.pid,
            shipping_same_as_billing=cart.shipping_same_as_billing,
        )

        return self.process(cart, order_item, snapshot)

    @abstractmethod
    def process(self, cart, order_item, settings) -> PipelineResult:
        """Run the stages after address attachment."""
        ...

    def _dispatch(self, event):
        logger.debug("Dispatching checkout stage", stage=event.stage.value)
        return self.dispatcher.dispatch(event)

    def _halted(self, event) -> PipelineResult:
        logger.info(
            "Checkout halted",
            stage=event.stage.value,
            order_status=event.order_item.status,
        )
        return PipelineResult(stopped=True, stage=event.stage, response=event.response)

    def _flag_for_reconciliation(self, order_item, stage):
        """The order exists but its stock was never committed; keep it, flagged."""
        if OrderItemStatus(order_item.status) is not OrderItemStatus.CREATED:
            return

        order_item.require_reconciliation(stage.value)
        current_domain.repository_for(OrderItem).add(order_item)
        logger.warning(
            "Order requires reconciliation",
            order_item_id=str(order_item.id),
            order_number=order_item.order_number,
            halted_stage=stage.value,
        )


class SplitUpCheckoutPipeline(CheckoutPipeline):
    def process(self, cart, order_item, settings) -> PipelineResult:
        for event_class in SPLIT_UP_STAGE_EVENTS:
            event = self._dispatch(event_class(cart, order_item, settings))
            if event.is_propagation_stopped:
                if event.stage is Stage.STOCK_DECREMENT:
                    self._flag_for_reconciliation(order_item, event.stage)
                return self._halted(event)

        return PipelineResult(stopped=False)


class MonolithicCheckoutPipeline(CheckoutPipeline):
    def process(self, cart, order_item, settings) -> PipelineResult:
        event = self._dispatch(ProcessOrderCreateEvent(cart, order_item, settings))
        if event.is_propagation_stopped:
            # No-op unless the stop came between create and stock commit
            self._flag_for_reconciliation(order_item, event.stage)
            return self._halted(event)
        return PipelineResult(stopped=False)


def pipeline_for(dispatcher, features) -> CheckoutPipeline:
    """Return the pipeline variant selected by the feature flags."""
    if features.split_up_process_order_create_event:
        return SplitUpCheckoutPipeline(dispatcher)
    return MonolithicCheckoutPipeline(dispatcher)
