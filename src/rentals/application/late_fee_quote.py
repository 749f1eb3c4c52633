"""Application service: late fee for an order, returned or not.

For a returned order this is the fee that was charged.  For a rental
still out it is what the customer would owe if the units came back at
*as_of* (default: now).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.order import OrderStatus
from rentals.domain.model.value_objects import as_utc
from rentals.domain.ports import Clock, SettingsProvider
from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.service.late_fee import compute_late_fee


class LateFeeQuoteHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        settings: SettingsProvider,
        clock: Clock,
    ) -> None:
        self._order_repo = order_repo
        self._settings = settings
        self._clock = clock

    def handle(self, order_id: int, as_of: datetime | None = None) -> Decimal:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        if order.status == OrderStatus.RETURNED and order.late_fee is not None:
            return order.late_fee.amount
        if order.status != OrderStatus.PICKED_UP:
            return Decimal("0.00")

        return compute_late_fee(
            order,
            self._settings.get_late_fee_config(),
            returned_at=as_utc(as_of) if as_of is not None else self._clock.now(),
        )
