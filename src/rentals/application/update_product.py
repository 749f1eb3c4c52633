"""Application service: Reprice Product use case."""

from __future__ import annotations

import structlog

from rentals.domain.exceptions import EntityNotFoundError, UnauthorizedError
from rentals.domain.model.actor import Actor, AdminActor, VendorActor
from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, new_price: str, actor: Actor) -> Product:
        """Change a product's rental price.

        Only the listing vendor (or an admin) may reprice.  Quotations
        and orders keep the price they were created with.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        owns = isinstance(actor, VendorActor) and actor.vendor_id == product.vendor_id
        if not (owns or isinstance(actor, AdminActor)):
            raise UnauthorizedError(f"Not allowed to reprice product '{product.name}'")

        old_price = product.price
        product.update_price(Money.of(new_price, old_price.currency))
        self._product_repo.save(product)

        logger.info(
            "Product repriced",
            product_id=product.id,
            old_price=str(old_price),
            new_price=str(product.price),
        )
        return product
