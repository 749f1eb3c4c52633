"""Application service: Confirm Order use case.

Confirmation is the authoritative hold point.  QUOTATION and SENT orders
hold nothing; here availability is re-checked and one reservation per
line is written, all while the product locks are held.
"""

from __future__ import annotations

import structlog

from rentals.application.dto import OrderDTO
from rentals.application.locking import DEFAULT_LOCKS, ProductLockRegistry
from rentals.application.order_transition import MAX_LOCK_ATTEMPTS, OrderTransitionHandler
from rentals.domain.exceptions import AvailabilityError
from rentals.domain.model.order import OrderAction, RentalOrder
from rentals.domain.ports import Clock
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_service import AvailabilityService
from rentals.domain.service.reservation_service import ReservationService

logger = structlog.get_logger(__name__)


class ConfirmOrderHandler(OrderTransitionHandler):

    action = OrderAction.CONFIRM

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
        now = self._clock.now()

        # Reserve inventory first (domain service validates availability)
        created = self._reservations.reserve_for_order(order, now)

        # Then transition the order
        order.confirm()
        try:
            self._order_repo.save(order)
        except Exception:
            self._reservations.release(created, now)
            raise

        logger.info(
            "Order confirmed",
            order_id=order.id,
            reservations=[r.id for r in created],
        )

    def _conflicts_exhausted(self, order_id: int) -> OrderDTO:
        raise AvailabilityError(
            f"Could not confirm order #{order_id}: inventory is being reserved "
            f"by other requests, try again"
        )
