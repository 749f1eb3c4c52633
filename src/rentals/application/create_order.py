"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
The new order is a QUOTATION: availability is checked so customers are
not quoted for units that are already booked, but nothing is held until
the order is confirmed.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from rentals.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from rentals.domain.exceptions import AvailabilityError, EntityNotFoundError, ValidationError
from rentals.domain.model.order import RentalLine, RentalOrder
from rentals.domain.model.value_objects import Quantity, RentalPeriod
from rentals.domain.ports import Clock
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_service import AvailabilityService

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        clock: Clock,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._availability = AvailabilityService(inventory_repo, reservation_repo)
        self._clock = clock

    def handle(
        self,
        customer_id: str,
        vendor_id: str,
        item_specs: list[OrderItemSpec],
        start: datetime,
        end: datetime,
        coupon_code: str | None = None,
    ) -> OrderDTO:
        """Create a new rental quotation.

        Steps:
        1. Resolve each product name to one of the vendor's products.
        2. Build RentalLines with *current* prices (snapshot).
        3. Check every line against current availability.
        4. Let the RentalOrder aggregate validate all business rules.
        5. Persist and return a DTO.
        """
        period = RentalPeriod.of(start, end)
        lines: list[RentalLine] = []

        for spec in item_specs:
            product = self._product_repo.get_by_name(spec.product_name)
            if product is None:
                raise EntityNotFoundError(f"Product not found: '{spec.product_name}'")
            if product.vendor_id != vendor_id:
                raise ValidationError(
                    f"Product '{product.name}' is not listed by vendor '{vendor_id}'"
                )

            lines.append(
                RentalLine(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=Quantity(spec.quantity),
                    unit_price=product.price,  # <-- price snapshot
                    period=period,
                )
            )

        for line in lines:
            available = self._availability.available_quantity(line.product_id, line.period)
            if line.quantity.value > available:
                raise AvailabilityError(
                    f"{line.product_name} is not available for the requested dates "
                    f"(need {line.quantity}, have {available} available)"
                )

        order = RentalOrder.create(
            customer_id=customer_id,
            vendor_id=vendor_id,
            lines=lines,
            created_at=self._clock.now(),
            coupon_code=coupon_code,
        )
        self._order_repo.save(order)

        logger.info(
            "Quotation created",
            order_id=order.id,
            customer_id=order.customer_id,
            vendor_id=order.vendor_id,
            total=str(order.total),
        )
        return order_to_dto(order)
