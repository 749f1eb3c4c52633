"""Domain service: Availability Engine.

Pure computation over the inventory ledger and the active reservations.
It never writes; the lifecycle handlers call it while holding the
product locks so a check and the write that follows it are atomic.
"""

from __future__ import annotations

from collections.abc import Iterable

from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import Quantity, RentalPeriod
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.reservation_repository import ReservationRepository


def overlapping(
    reservations: Iterable[Reservation], period: RentalPeriod
) -> list[Reservation]:
    """Active reservations whose period shares at least one instant with *period*."""
    return [r for r in reservations if r.is_active and r.period.overlaps(period)]


def peak_concurrent(reservations: Iterable[Reservation]) -> int:
    """Largest number of units held at any single instant.

    Sweep over start/end events.  Starts sort before ends at the same
    instant because bounds are inclusive.
    """
    events: list[tuple] = []
    for r in reservations:
        if not r.is_active:
            continue
        events.append((r.period.start, 0, r.quantity.value))
        events.append((r.period.end, 1, -r.quantity.value))
    events.sort(key=lambda e: (e[0], e[1]))

    peak = current = 0
    for _, _, delta in events:
        current += delta
        peak = max(peak, current)
    return peak


class AvailabilityService:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._reservation_repo = reservation_repo

    def quantity_on_hand(self, product_id: str) -> int:
        """Units owned.  A product without a ledger row owns none."""
        inv = self._inventory_repo.get_by_product_id(product_id)
        return inv.quantity_on_hand if inv is not None else 0

    def reserved_quantity(self, product_id: str, period: RentalPeriod) -> int:
        active = self._reservation_repo.list_active_for_product(product_id)
        return sum(r.quantity.value for r in overlapping(active, period))

    def available_quantity(self, product_id: str, period: RentalPeriod) -> int:
        """Units of *product_id* that can still be held for the whole window."""
        on_hand = self.quantity_on_hand(product_id)
        if on_hand == 0:
            return 0
        return max(0, on_hand - self.reserved_quantity(product_id, period))

    def is_available(
        self, product_id: str, period: RentalPeriod, quantity: Quantity
    ) -> bool:
        return quantity.value <= self.available_quantity(product_id, period)

    def peak_reserved(self, product_id: str) -> int:
        return peak_concurrent(self._reservation_repo.list_active_for_product(product_id))
