"""Application service: Add Product use case."""

from __future__ import annotations

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.inventory import InventoryItem
from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._product_repo = product_repo
        self._inventory_repo = inventory_repo

    def handle(self, vendor_id: str, name: str, price: str, quantity: int = 0) -> Product:
        """List a new rentable product and open its ledger row."""
        if not vendor_id or not vendor_id.strip():
            raise ValidationError("Vendor is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if quantity < 0:
            raise ValidationError("Initial quantity cannot be negative")

        existing = self._product_repo.get_by_name(name)
        if existing is not None:
            raise ValidationError(f"Product '{name}' already exists")

        price_money = Money.of(price)
        if price_money.amount <= 0:
            raise ValidationError("Product price must be greater than zero")

        # Auto-assign ID based on existing products
        all_products = self._product_repo.list_all()
        if all_products:
            next_id = str(max(int(p.id) for p in all_products) + 1)
        else:
            next_id = "1"

        product = Product(
            id=next_id,
            vendor_id=vendor_id.strip(),
            name=name.strip(),
            price=price_money,
        )
        self._product_repo.save(product)
        self._inventory_repo.save(
            InventoryItem(
                product_id=product.id,
                product_name=product.name,
                quantity_on_hand=quantity,
            )
        )
        return product
