"""Application service: Cancel Order use case.

QUOTATION and SENT orders hold nothing, so cancelling them is a status
change.  CONFIRMED orders release their reservations, which frees the
units immediately.  Picked-up rentals cannot be cancelled, only returned.
"""

from __future__ import annotations

import structlog

from rentals.application.locking import DEFAULT_LOCKS, ProductLockRegistry
from rentals.application.order_transition import MAX_LOCK_ATTEMPTS, OrderTransitionHandler
from rentals.domain.model.order import OrderAction, RentalOrder
from rentals.domain.ports import Clock
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_service import AvailabilityService
from rentals.domain.service.reservation_service import ReservationService

logger = structlog.get_logger(__name__)


class CancelOrderHandler(OrderTransitionHandler):

    action = OrderAction.CANCEL

    def __init__(
        self,
        order_repo: OrderRepository,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        clock: Clock,
        locks: ProductLockRegistry = DEFAULT_LOCKS,
        max_attempts: int = MAX_LOCK_ATTEMPTS,
    ) -> None:
        super().__init__(order_repo, clock, locks, max_attempts)
        self._reservations = ReservationService(
            reservation_repo,
            AvailabilityService(inventory_repo, reservation_repo),
        )

    def _apply(self, order: RentalOrder, **options) -> None:
        order.cancel()
        released = self._reservations.release_for_order(order, self._clock.now())
        try:
            self._order_repo.save(order)
        except Exception:
            self._reservations.restore(released)
            raise

        logger.info("Order cancelled", order_id=order.id, released=len(released))
