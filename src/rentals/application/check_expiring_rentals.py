"""Application service: one expiry sweep over rentals that are out.

Invoked by the background scheduler (or by hand from the CLI) to warn
about PICKED_UP orders whose planned end is close or already past.
Each (order, kind) is notified at most once; the notification log
remembers what went out.  A failed delivery is not logged, so the next
sweep retries it.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

import structlog

from rentals.domain.model.notification import NotificationKind, NotificationRecord
from rentals.domain.model.order import OrderStatus, RentalOrder
from rentals.domain.ports import Clock, NotificationSink
from rentals.domain.repository.notification_log_repository import NotificationLogRepository
from rentals.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)

DEFAULT_LOOKAHEAD = timedelta(minutes=10)
DEFAULT_BUDGET_SECONDS = 30.0


@dataclass(frozen=True)
class ExpirySweepResult:
    due: int = 0
    sent: int = 0
    failed: int = 0
    already_notified: int = 0
    budget_exhausted: bool = False


class CheckExpiringRentalsHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        notification_log: NotificationLogRepository,
        sink: NotificationSink,
        clock: Clock,
        lookahead: timedelta = DEFAULT_LOOKAHEAD,
        budget_seconds: float = DEFAULT_BUDGET_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._order_repo = order_repo
        self._log = notification_log
        self._sink = sink
        self._clock = clock
        self._lookahead = lookahead
        self._budget_seconds = budget_seconds
        self._monotonic = monotonic

    def handle(self) -> ExpirySweepResult:
        now = self._clock.now()
        deadline = self._monotonic() + self._budget_seconds

        due = sent = failed = already = 0
        exhausted = False

        for order in self._order_repo.list_by_status(OrderStatus.PICKED_UP):
            if self._monotonic() > deadline:
                exhausted = True
                logger.warning("Expiry sweep budget exhausted", processed=due)
                break

            kind = self._threshold(order, now)
            if kind is None:
                continue
            due += 1

            if self._log.has_record(order.id, kind):  # type: ignore[arg-type]
                already += 1
                continue

            try:
                self._sink.notify(order.id, kind)  # type: ignore[arg-type]
            except Exception as exc:
                failed += 1
                logger.error(
                    "Rental expiry notification failed",
                    order_id=order.id,
                    kind=kind.value,
                    error=str(exc),
                )
                continue

            self._log.add(NotificationRecord(order_id=order.id, kind=kind, sent_at=now))  # type: ignore[arg-type]
            sent += 1

        result = ExpirySweepResult(
            due=due,
            sent=sent,
            failed=failed,
            already_notified=already,
            budget_exhausted=exhausted,
        )
        logger.info(
            "Expiry sweep complete",
            due=due,
            sent=sent,
            failed=failed,
            already_notified=already,
            as_of=now.isoformat(),
        )
        return result

    def _threshold(self, order: RentalOrder, now) -> NotificationKind | None:
        end = order.planned_end
        if end < now:
            return NotificationKind.OVERDUE
        if end <= now + self._lookahead:
            return NotificationKind.EXPIRING_SOON
        return None
