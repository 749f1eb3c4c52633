"""Abstract repository for Reservation records.

Only the order lifecycle writes here; the availability engine reads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.reservation import Reservation


class ReservationRepository(ABC):

    @abstractmethod
    def list_active_for_product(self, product_id: str) -> list[Reservation]:
        """Return the unreleased reservations on a product."""

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[Reservation]:
        """Return every reservation an order ever took, released or not."""

    @abstractmethod
    def add(self, reservation: Reservation) -> None:
        """Persist a new reservation, assigning its ID."""

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist changes to an existing reservation."""
