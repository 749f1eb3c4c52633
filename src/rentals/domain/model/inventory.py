"""InventoryItem aggregate: the ledger of owned units per product.

Reservations are logical holds over time windows and never touch these
numbers.  Only explicit restocks and write-offs (loss, damage) do.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentals.domain.exceptions import ValidationError


@dataclass
class InventoryItem:
    """Aggregate root for the inventory ledger.

    Invariant: ``quantity_on_hand`` is always >= 0.
    """

    product_id: str
    product_name: str
    quantity_on_hand: int = 0

    def __post_init__(self) -> None:
        if self.quantity_on_hand < 0:
            raise ValidationError("Quantity on hand cannot be negative")

    def restock(self, quantity: int) -> None:
        """Add newly acquired units."""
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.quantity_on_hand += quantity

    def write_off(self, quantity: int, held: int = 0) -> None:
        """Remove lost or damaged units.

        ``held`` is the peak number of units concurrently held by active
        reservations; the ledger may not drop below it.
        """
        if quantity <= 0:
            raise ValidationError("Write-off quantity must be positive")
        if quantity > self.quantity_on_hand:
            raise ValidationError(
                f"Cannot write off {quantity} of {self.product_name} "
                f"(only {self.quantity_on_hand} on hand)"
            )
        if self.quantity_on_hand - quantity < held:
            raise ValidationError(
                f"Cannot write off {quantity} of {self.product_name}: "
                f"{held} units are held by active reservations"
            )
        self.quantity_on_hand -= quantity
