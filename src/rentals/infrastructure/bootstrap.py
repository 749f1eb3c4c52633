"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import threading
from datetime import timedelta
from functools import lru_cache

from rentals.application.check_expiring_rentals import CheckExpiringRentalsHandler
from rentals.application.locking import ProductLockRegistry
from rentals.application.transition_order import TransitionOrderHandler
from rentals.infrastructure.clock import SystemClock
from rentals.infrastructure.config import EnvSettingsProvider, Settings
from rentals.infrastructure.notifications import LoggingNotificationSink
from rentals.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from rentals.infrastructure.persistence.json_notification_log_repository import (
    JsonNotificationLogRepository,
)
from rentals.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from rentals.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from rentals.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)
from rentals.infrastructure.scheduler import ExpiryScheduler


@lru_cache(maxsize=None)
def settings() -> Settings:
    return Settings.from_env()


def settings_provider() -> EnvSettingsProvider:
    return EnvSettingsProvider(settings())


def clock() -> SystemClock:
    return SystemClock()


@lru_cache(maxsize=None)
def product_locks() -> ProductLockRegistry:
    return ProductLockRegistry(timeout=settings().lock_timeout_seconds)


# --- Repositories -------------------------------------------------------------


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(settings().data_dir / "products.json")


def inventory_repository() -> JsonInventoryRepository:
    return JsonInventoryRepository(settings().data_dir / "inventory.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().data_dir / "orders.json")


def reservation_repository() -> JsonReservationRepository:
    return JsonReservationRepository(settings().data_dir / "reservations.json")


def notification_log_repository() -> JsonNotificationLogRepository:
    return JsonNotificationLogRepository(settings().data_dir / "notification_log.json")


# --- Use cases ----------------------------------------------------------------


def transition_order_handler() -> TransitionOrderHandler:
    return TransitionOrderHandler(
        order_repo=order_repository(),
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
        clock=clock(),
        settings=settings_provider(),
        locks=product_locks(),
    )


def check_expiring_rentals_handler() -> CheckExpiringRentalsHandler:
    cfg = settings()
    return CheckExpiringRentalsHandler(
        order_repo=order_repository(),
        notification_log=notification_log_repository(),
        sink=LoggingNotificationSink(),
        clock=clock(),
        lookahead=timedelta(minutes=cfg.expiry_lookahead_minutes),
        budget_seconds=cfg.sweep_budget_seconds,
    )


# --- Process-wide scheduler ---------------------------------------------------

_scheduler: ExpiryScheduler | None = None
_scheduler_guard = threading.Lock()


def expiry_scheduler() -> ExpiryScheduler:
    """The single expiry scheduler of this process."""
    global _scheduler
    with _scheduler_guard:
        if _scheduler is None:
            _scheduler = ExpiryScheduler(
                sweep=lambda: check_expiring_rentals_handler().handle()
            )
        return _scheduler
