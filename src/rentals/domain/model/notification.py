"""Time-based rental notifications and the log that deduplicates them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationKind(Enum):
    EXPIRING_SOON = "EXPIRING_SOON"
    OVERDUE = "OVERDUE"


@dataclass(frozen=True)
class NotificationRecord:
    """One successful notification of *kind* for an order."""

    order_id: int
    kind: NotificationKind
    sent_at: datetime
