"""Application service: availability queries (read-only)."""

from __future__ import annotations

from datetime import datetime

from rentals.domain.model.value_objects import Quantity, RentalPeriod
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_service import AvailabilityService


class CheckAvailabilityHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._availability = AvailabilityService(inventory_repo, reservation_repo)

    def handle(self, product_id: str, start: datetime, end: datetime, quantity: int) -> bool:
        """True if *quantity* units can be held over ``[start, end]``.

        Raises ValidationError for a non-positive quantity or an empty
        window; those are input errors, not availability answers.
        """
        return self._availability.is_available(
            product_id, RentalPeriod.of(start, end), Quantity(quantity)
        )

    def available_quantity(self, product_id: str, start: datetime, end: datetime) -> int:
        return self._availability.available_quantity(product_id, RentalPeriod.of(start, end))
