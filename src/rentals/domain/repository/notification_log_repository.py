"""Abstract repository for the expiry notification log."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.notification import NotificationKind, NotificationRecord


class NotificationLogRepository(ABC):

    @abstractmethod
    def has_record(self, order_id: int, kind: NotificationKind) -> bool:
        """True if *kind* was already sent for the order."""

    @abstractmethod
    def add(self, record: NotificationRecord) -> None:
        """Remember a successful notification."""
