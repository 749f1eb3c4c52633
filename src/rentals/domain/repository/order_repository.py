"""Abstract repository for the RentalOrder aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.order import OrderStatus, RentalOrder


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> RentalOrder | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_by_status(self, status: OrderStatus) -> list[RentalOrder]:
        """Return every order currently in *status*."""

    @abstractmethod
    def save(self, order: RentalOrder) -> None:
        """Persist a new or updated order."""
