"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rentals.domain.model.value_objects import RentalPeriod
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_service import AvailabilityService


@dataclass(frozen=True)
class InventoryLineDTO:
    product_name: str
    on_hand: int
    reserved: int
    available: int


class ShowInventoryHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._availability = AvailabilityService(inventory_repo, reservation_repo)

    def handle(self, start: datetime, end: datetime) -> list[InventoryLineDTO]:
        """Ledger rows with what is reserved and free over ``[start, end]``."""
        period = RentalPeriod.of(start, end)
        lines: list[InventoryLineDTO] = []
        for item in self._inventory_repo.list_all():
            reserved = self._availability.reserved_quantity(item.product_id, period)
            lines.append(
                InventoryLineDTO(
                    product_name=item.product_name,
                    on_hand=item.quantity_on_hand,
                    reserved=reserved,
                    available=max(0, item.quantity_on_hand - reserved),
                )
            )
        return lines
