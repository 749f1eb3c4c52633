"""Application service: Set Inventory use case.

Brings a product's ledger to an absolute quantity by restocking or
writing off the difference.  Write-offs take the product lock and may
not drop below the units currently held by reservations.
"""

from __future__ import annotations

import structlog

from rentals.application.locking import DEFAULT_LOCKS, ProductLockRegistry
from rentals.domain.exceptions import EntityNotFoundError, ValidationError
from rentals.domain.model.inventory import InventoryItem
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.service.availability_service import AvailabilityService

logger = structlog.get_logger(__name__)


class SetInventoryHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
        locks: ProductLockRegistry = DEFAULT_LOCKS,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._product_repo = product_repo
        self._availability = AvailabilityService(inventory_repo, reservation_repo)
        self._locks = locks

    def handle(self, product_name: str, quantity: int) -> None:
        """Set the quantity on hand for a product."""
        if quantity < 0:
            raise ValidationError("Quantity on hand cannot be negative")

        product = self._product_repo.get_by_name(product_name)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{product_name}'")

        with self._locks.hold([product.id]):
            item = self._inventory_repo.get_by_product_id(product.id)
            if item is None:
                item = InventoryItem(product_id=product.id, product_name=product.name)

            previous = item.quantity_on_hand
            delta = quantity - previous
            if delta > 0:
                item.restock(delta)
            elif delta < 0:
                item.write_off(-delta, held=self._availability.peak_reserved(product.id))
            self._inventory_repo.save(item)

        logger.info(
            "Inventory updated",
            product_id=product.id,
            previous=previous,
            quantity_on_hand=quantity,
        )
