"""Application service: Return use case (PICKED_UP -> RETURNED).

Records when the units came back, charges a late fee if they came back
after the planned end, and releases the reservations.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from rentals.application.locking import DEFAULT_LOCKS, ProductLockRegistry
from rentals.application.order_transition import MAX_LOCK_ATTEMPTS, OrderTransitionHandler
from rentals.domain.exceptions import ValidationError
from rentals.domain.model.order import OrderAction, RentalOrder
from rentals.domain.model.value_objects import Money, as_utc
from rentals.domain.ports import Clock, SettingsProvider
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_service import AvailabilityService
from rentals.domain.service.late_fee import compute_late_fee
from rentals.domain.service.reservation_service import ReservationService

logger = structlog.get_logger(__name__)


class ReturnOrderHandler(OrderTransitionHandler):

    action = OrderAction.RETURN

    def __init__(
        self,
        order_repo: OrderRepository,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        clock: Clock,
        settings: SettingsProvider,
        locks: ProductLockRegistry = DEFAULT_LOCKS,
        max_attempts: int = MAX_LOCK_ATTEMPTS,
    ) -> None:
        super().__init__(order_repo, clock, locks, max_attempts)
        self._settings = settings
        self._reservations = ReservationService(
            reservation_repo,
            AvailabilityService(inventory_repo, reservation_repo),
        )

    def _apply(
        self,
        order: RentalOrder,
        returned_at: datetime | None = None,
        **options,
    ) -> None:
        """Args:
        returned_at: When the units came back.  Defaults to now.
        """
        now = self._clock.now()
        returned_at = as_utc(returned_at) if returned_at is not None else now
        if order.picked_up_at is not None and returned_at < order.picked_up_at:
            raise ValidationError("Return time cannot be before pickup time")

        fee = compute_late_fee(order, self._settings.get_late_fee_config(), returned_at)
        order.mark_returned(returned_at, Money(fee, order.total.currency))

        released = self._reservations.release_for_order(order, now)
        try:
            self._order_repo.save(order)
        except Exception:
            self._reservations.restore(released)
            raise

        logger.info(
            "Order returned",
            order_id=order.id,
            late=fee > 0,
            late_fee=str(fee),
            released=len(released),
        )
