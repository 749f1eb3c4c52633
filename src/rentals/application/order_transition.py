"""Shared plumbing for order lifecycle use cases.

Every transition runs the same way:
1. Load the order and fail fast (not found, unauthorized, illegal
   transition) without taking any lock.
2. Take the locks of the order's products.
3. Re-load and re-check, since another request may have moved the order
   while we waited, then apply the transition and persist.

Lock timeouts are retried a bounded number of times.
"""

from __future__ import annotations

import structlog

from rentals.application.dto import OrderDTO, order_to_dto
from rentals.application.locking import DEFAULT_LOCKS, ProductLockRegistry
from rentals.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from rentals.domain.model.actor import Actor
from rentals.domain.model.order import OrderAction, RentalOrder
from rentals.domain.ports import Clock
from rentals.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)

MAX_LOCK_ATTEMPTS = 3


def load_order(
    order_repo: OrderRepository,
    order_id: int,
    actor: Actor,
    action: OrderAction,
) -> RentalOrder:
    """Fetch an order the actor may act on and that permits *action*.

    Checks run in order: existence, authorization, transition legality.
    """
    order = order_repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    order.authorize(actor, action)
    order.ensure_can(action)
    return order


class OrderTransitionHandler:

    action: OrderAction

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Clock,
        locks: ProductLockRegistry = DEFAULT_LOCKS,
        max_attempts: int = MAX_LOCK_ATTEMPTS,
    ) -> None:
        self._order_repo = order_repo
        self._clock = clock
        self._locks = locks
        self._max_attempts = max_attempts

    def handle(self, order_id: int, actor: Actor, **options) -> OrderDTO:
        order = load_order(self._order_repo, order_id, actor, self.action)
        product_ids = [line.product_id for line in order.lines]

        for attempt in range(1, self._max_attempts + 1):
            try:
                with self._locks.hold(product_ids):
                    order = load_order(self._order_repo, order_id, actor, self.action)
                    self._apply(order, **options)
                    return order_to_dto(order)
            except ConcurrencyConflictError:
                logger.warning(
                    "Order transition lost a lock race",
                    order_id=order_id,
                    action=self.action.value,
                    attempt=attempt,
                )
        return self._conflicts_exhausted(order_id)

    def _apply(self, order: RentalOrder, **options) -> None:
        raise NotImplementedError

    def _conflicts_exhausted(self, order_id: int) -> OrderDTO:
        raise ConcurrencyConflictError(
            f"Could not {self.action.value} order #{order_id}: products are busy"
        )
