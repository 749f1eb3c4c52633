"""Collaborators the core consumes but does not implement.

Concrete adapters live in ``rentals.infrastructure``; tests use fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.notification import NotificationKind


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timezone-aware instant."""


class NotificationSink(ABC):

    @abstractmethod
    def notify(self, order_id: int, kind: NotificationKind) -> None:
        """Deliver a notification.  Raise on failure so it is retried."""


@dataclass(frozen=True)
class LateFeeConfig:
    """Late fee settings.

    ``rate`` is the fraction of the daily-rate proxy charged per day late.
    Returns within ``grace_period_hours`` of the planned end are free.
    """

    rate: Decimal
    grace_period_hours: int = 0

    def __post_init__(self) -> None:
        if self.rate < 0:
            raise ValidationError("Late fee rate cannot be negative")
        if self.grace_period_hours < 0:
            raise ValidationError("Late fee grace period cannot be negative")

    @property
    def grace_period(self) -> timedelta:
        return timedelta(hours=self.grace_period_hours)


class SettingsProvider(ABC):

    @abstractmethod
    def get_late_fee_config(self) -> LateFeeConfig:
        """Return the current late fee configuration."""
