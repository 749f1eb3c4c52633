"""Application service: Send Quotation use case (QUOTATION -> SENT)."""

from __future__ import annotations

import structlog

from rentals.application.order_transition import OrderTransitionHandler
from rentals.domain.model.order import OrderAction, RentalOrder

logger = structlog.get_logger(__name__)


class SendOrderHandler(OrderTransitionHandler):

    action = OrderAction.SEND

    def _apply(self, order: RentalOrder, **options) -> None:
        order.send()
        self._order_repo.save(order)
        logger.info("Quotation sent", order_id=order.id)
