"""Application service: Pickup use case (CONFIRMED -> PICKED_UP).

The reservation taken at confirmation keeps holding the units; only the
pickup time is recorded.
"""

from __future__ import annotations

import structlog

from rentals.application.order_transition import OrderTransitionHandler
from rentals.domain.model.order import OrderAction, RentalOrder

logger = structlog.get_logger(__name__)


class PickupOrderHandler(OrderTransitionHandler):

    action = OrderAction.PICKUP

    def _apply(self, order: RentalOrder, **options) -> None:
        order.mark_picked_up(self._clock.now())
        self._order_repo.save(order)
        logger.info("Order picked up", order_id=order.id, at=order.picked_up_at.isoformat())
