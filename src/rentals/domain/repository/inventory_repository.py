"""Abstract repository for the InventoryItem aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.inventory import InventoryItem


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_product_id(self, product_id: str) -> InventoryItem | None:
        """Return the ledger row for a product, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every ledger row."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Persist a new or updated ledger row."""
