"""Notification sink that records rental reminders in the log.

Email delivery is owned by another service; this adapter is the hand-off
point and emits one structured event per reminder.
"""

from __future__ import annotations

import structlog

from rentals.domain.model.notification import NotificationKind
from rentals.domain.ports import NotificationSink

logger = structlog.get_logger(__name__)

_MESSAGES = {
    NotificationKind.EXPIRING_SOON: "Rental period ending soon",
    NotificationKind.OVERDUE: "Rental overdue, late fees apply",
}


class LoggingNotificationSink(NotificationSink):

    def notify(self, order_id: int, kind: NotificationKind) -> None:
        logger.info(_MESSAGES[kind], order_id=order_id, kind=kind.value)
