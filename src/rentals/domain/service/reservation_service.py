"""Domain service: Reservation holds for rental orders.

This service coordinates the cross-aggregate operation of holding or
releasing inventory for an order.  It lives in the domain layer because
the logic is a core business rule, not just orchestration.

Callers must hold the product locks for every line of the order while
calling ``reserve_for_order``; the availability check and the write are
only atomic under them.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from rentals.domain.exceptions import AvailabilityError, InvalidTransitionError
from rentals.domain.model.order import RentalOrder
from rentals.domain.model.reservation import Reservation
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_service import AvailabilityService

logger = structlog.get_logger(__name__)


class ReservationService:

    def __init__(
        self,
        reservation_repo: ReservationRepository,
        availability: AvailabilityService,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._availability = availability

    def reserve_for_order(self, order: RentalOrder, now: datetime) -> list[Reservation]:
        """Hold inventory for every line of the order.

        Uses a two-phase approach:
          Phase 1: validate that every line fits.  Fails fast before any
                   write.
          Phase 2: write one reservation per line.
        """
        if self.active_for_order(order):
            raise InvalidTransitionError(f"Order #{order.id} already holds inventory")

        # Phase 1: validate
        for line in order.lines:
            available = self._availability.available_quantity(line.product_id, line.period)
            if line.quantity.value > available:
                raise AvailabilityError(
                    f"Insufficient inventory for {line.product_name} "
                    f"(need {line.quantity}, have {available} available "
                    f"for {line.period})"
                )

        # Phase 2: write.  A failed write releases the holds already taken.
        created: list[Reservation] = []
        try:
            for line in order.lines:
                reservation = Reservation(
                    id=None,
                    product_id=line.product_id,
                    order_id=order.id,  # type: ignore[arg-type]
                    quantity=line.quantity,
                    period=line.period,
                    created_at=now,
                )
                self._reservation_repo.add(reservation)
                created.append(reservation)
        except Exception:
            logger.warning(
                "Reservation write failed, releasing partial holds",
                order_id=order.id,
                written=len(created),
            )
            self.release(created, now)
            raise
        return created

    def release_for_order(self, order: RentalOrder, now: datetime) -> list[Reservation]:
        """Release every active hold of the order.

        Already released reservations are skipped, so releasing twice
        never frees capacity twice.
        """
        return self.release(self.active_for_order(order), now)

    def release(self, reservations: list[Reservation], now: datetime) -> list[Reservation]:
        """Release *reservations*, all or nothing.

        If a save fails, the holds released so far are restored before the
        error propagates.
        """
        released: list[Reservation] = []
        for reservation in reservations:
            if not reservation.release(now):
                continue
            try:
                self._reservation_repo.save(reservation)
            except Exception:
                reservation.released_at = None
                self.restore(released)
                raise
            released.append(reservation)
        return released

    def restore(self, reservations: list[Reservation]) -> None:
        """Undo ``release`` after a failed transition."""
        for reservation in reservations:
            reservation.released_at = None
            self._reservation_repo.save(reservation)

    def active_for_order(self, order: RentalOrder) -> list[Reservation]:
        if order.id is None:
            return []
        return [r for r in self._reservation_repo.list_for_order(order.id) if r.is_active]
