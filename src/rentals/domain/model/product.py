"""Product aggregate.

Products live independently of orders. Each one is listed by a single
vendor; how many units exist is tracked separately by the inventory
ledger, not here.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.value_objects import Money


@dataclass
class Product:
    """A rentable product in a vendor's catalog.

    ``price`` is the rental price of one unit for one rental period.
    """

    id: str
    vendor_id: str
    name: str
    price: Money

    def update_price(self, new_price: Money) -> None:
        """Change the rental price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price
