"""Application service: products that can still be rented for a window."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rentals.domain.model.value_objects import RentalPeriod
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_service import AvailabilityService


@dataclass(frozen=True)
class AvailableProductDTO:
    product_id: str
    product_name: str
    vendor_id: str
    price: str
    available: int


class ListAvailableProductsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._product_repo = product_repo
        self._availability = AvailabilityService(inventory_repo, reservation_repo)

    def handle(
        self,
        start: datetime,
        end: datetime,
        vendor_id: str | None = None,
        min_quantity: int = 1,
    ) -> list[AvailableProductDTO]:
        period = RentalPeriod.of(start, end)
        result: list[AvailableProductDTO] = []
        for product in self._product_repo.list_all():
            if vendor_id is not None and product.vendor_id != vendor_id:
                continue
            available = self._availability.available_quantity(product.id, period)
            if available >= min_quantity:
                result.append(
                    AvailableProductDTO(
                        product_id=product.id,
                        product_name=product.name,
                        vendor_id=product.vendor_id,
                        price=str(product.price),
                        available=available,
                    )
                )
        return result
