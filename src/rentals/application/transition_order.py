"""Application service: single entry point for order lifecycle actions.

Dispatches ``(order_id, action, actor)`` to the use case that owns the
action.  Callers that already know the action can use those handlers
directly.
"""

from __future__ import annotations

from rentals.application.cancel_order import CancelOrderHandler
from rentals.application.confirm_order import ConfirmOrderHandler
from rentals.application.dto import OrderDTO
from rentals.application.locking import DEFAULT_LOCKS, ProductLockRegistry
from rentals.application.order_transition import OrderTransitionHandler
from rentals.application.pickup_order import PickupOrderHandler
from rentals.application.return_order import ReturnOrderHandler
from rentals.application.send_order import SendOrderHandler
from rentals.domain.exceptions import ValidationError
from rentals.domain.model.actor import Actor
from rentals.domain.model.order import OrderAction
from rentals.domain.ports import Clock, SettingsProvider
from rentals.domain.repository.inventory_repository import InventoryRepository
from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.repository.reservation_repository import ReservationRepository


class TransitionOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        clock: Clock,
        settings: SettingsProvider,
        locks: ProductLockRegistry = DEFAULT_LOCKS,
    ) -> None:
        self._handlers: dict[OrderAction, OrderTransitionHandler] = {
            OrderAction.SEND: SendOrderHandler(order_repo, clock, locks),
            OrderAction.CONFIRM: ConfirmOrderHandler(
                order_repo, inventory_repo, reservation_repo, clock, locks
            ),
            OrderAction.PICKUP: PickupOrderHandler(order_repo, clock, locks),
            OrderAction.RETURN: ReturnOrderHandler(
                order_repo, inventory_repo, reservation_repo, clock, settings, locks
            ),
            OrderAction.CANCEL: CancelOrderHandler(
                order_repo, inventory_repo, reservation_repo, clock, locks
            ),
        }

    def handle(
        self,
        order_id: int,
        action: OrderAction | str,
        actor: Actor,
        **options,
    ) -> OrderDTO:
        """Apply *action* to the order on behalf of *actor*.

        Raises EntityNotFoundError, UnauthorizedError,
        InvalidTransitionError or AvailabilityError; on any of them the
        order and its reservations are left untouched.
        """
        return self._handlers[_parse_action(action)].handle(order_id, actor, **options)


def _parse_action(action: OrderAction | str) -> OrderAction:
    if isinstance(action, OrderAction):
        return action
    try:
        return OrderAction(action.strip().lower())
    except ValueError as exc:
        valid = ", ".join(a.value for a in OrderAction)
        raise ValidationError(f"Unknown action '{action}'. Expected one of: {valid}") from exc
