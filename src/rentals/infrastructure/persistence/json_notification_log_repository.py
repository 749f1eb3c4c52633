"""JSON-file-backed implementation of NotificationLogRepository."""

from __future__ import annotations

from pathlib import Path

from rentals.domain.model.notification import NotificationKind, NotificationRecord
from rentals.domain.repository.notification_log_repository import NotificationLogRepository
from rentals.infrastructure.persistence.json_file import JsonFile


class JsonNotificationLogRepository(NotificationLogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def has_record(self, order_id: int, kind: NotificationKind) -> bool:
        return any(
            raw["order_id"] == order_id and raw["kind"] == kind.value
            for raw in self._file.read()
        )

    def add(self, record: NotificationRecord) -> None:
        with self._file.editing() as records:
            records.append(
                {
                    "order_id": record.order_id,
                    "kind": record.kind.value,
                    "sent_at": record.sent_at.isoformat(),
                }
            )
