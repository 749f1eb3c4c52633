"""Reservation: a logical hold of N units of a product for a time window.

Reservations are append-only records.  Releasing one stamps
``released_at`` rather than deleting it, so the store keeps a history of
every hold an order ever took.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rentals.domain.model.value_objects import Quantity, RentalPeriod


@dataclass
class Reservation:

    id: int | None
    product_id: str
    order_id: int
    quantity: Quantity
    period: RentalPeriod
    created_at: datetime
    released_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.released_at is None

    def release(self, at: datetime) -> bool:
        """Close the hold.  Returns False if it was already released."""
        if self.released_at is not None:
            return False
        self.released_at = at
        return True
