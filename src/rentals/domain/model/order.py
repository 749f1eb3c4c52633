"""RentalOrder aggregate: the core of the domain.

The order owns its rental lines and its lifecycle.  Every legal
(status, action) pair lives in ``_ALLOWED_FROM``; anything else is an
InvalidTransitionError and leaves the order as it was.

Reservation side effects are NOT performed here.  The application
handlers coordinate them through the reservation service before calling
the matching transition method.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from rentals.domain.exceptions import (
    InvalidTransitionError,
    UnauthorizedError,
    ValidationError,
)
from rentals.domain.model.actor import Actor, AdminActor, CustomerActor, VendorActor
from rentals.domain.model.value_objects import Money, Quantity, RentalPeriod


class OrderStatus(Enum):
    QUOTATION = "QUOTATION"
    SENT = "SENT"
    CONFIRMED = "CONFIRMED"
    PICKED_UP = "PICKED_UP"
    RETURNED = "RETURNED"
    CANCELLED = "CANCELLED"


class OrderAction(Enum):
    SEND = "send"
    CONFIRM = "confirm"
    PICKUP = "pickup"
    RETURN = "return"
    CANCEL = "cancel"


# Statuses whose orders count against available inventory.
HOLD_STATUSES = frozenset({OrderStatus.CONFIRMED, OrderStatus.PICKED_UP})

_ALLOWED_FROM: dict[OrderAction, frozenset[OrderStatus]] = {
    OrderAction.SEND: frozenset({OrderStatus.QUOTATION}),
    OrderAction.CONFIRM: frozenset({OrderStatus.QUOTATION, OrderStatus.SENT}),
    OrderAction.PICKUP: frozenset({OrderStatus.CONFIRMED}),
    OrderAction.RETURN: frozenset({OrderStatus.PICKED_UP}),
    OrderAction.CANCEL: frozenset(
        {OrderStatus.QUOTATION, OrderStatus.SENT, OrderStatus.CONFIRMED}
    ),
}

_TARGET: dict[OrderAction, OrderStatus] = {
    OrderAction.SEND: OrderStatus.SENT,
    OrderAction.CONFIRM: OrderStatus.CONFIRMED,
    OrderAction.PICKUP: OrderStatus.PICKED_UP,
    OrderAction.RETURN: OrderStatus.RETURNED,
    OrderAction.CANCEL: OrderStatus.CANCELLED,
}

# Customers may only walk away from their own orders.
_CUSTOMER_ACTIONS = frozenset({OrderAction.CANCEL})


@dataclass
class RentalLine:
    """Captures the price snapshot of a product at order-creation time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    period: RentalPeriod

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50


@dataclass
class RentalOrder:
    """Aggregate root for rental orders.

    Use the ``RentalOrder.create()`` factory for new orders.  The
    ``__init__`` is intentionally simple so the repository can
    reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer_id: str
    vendor_id: str
    lines: list[RentalLine]
    status: OrderStatus = OrderStatus.QUOTATION
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    picked_up_at: datetime | None = None
    actual_return_at: datetime | None = None
    late_fee: Money | None = None
    coupon_code: str | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_id: str,
        vendor_id: str,
        lines: list[RentalLine],
        created_at: datetime | None = None,
        coupon_code: str | None = None,
    ) -> RentalOrder:
        """Create a new quotation, enforcing all invariants."""
        if not customer_id or not customer_id.strip():
            raise ValidationError("Customer is required")
        if not vendor_id or not vendor_id.strip():
            raise ValidationError("Vendor is required")

        if not lines:
            raise ValidationError("Order must contain at least one item")
        if len(lines) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        seen: set[str] = set()
        for line in lines:
            if line.product_id in seen:
                raise ValidationError(
                    f"Product '{line.product_name}' appears more than once"
                )
            seen.add(line.product_id)

        order = RentalOrder(
            id=None,
            customer_id=customer_id.strip(),
            vendor_id=vendor_id.strip(),
            lines=list(lines),
            coupon_code=coupon_code.strip() if coupon_code else None,
        )
        if created_at is not None:
            order.created_at = created_at
        return order

    # --- Authorization --------------------------------------------------------

    def authorize(self, actor: Actor, action: OrderAction) -> None:
        """Raise UnauthorizedError unless *actor* may perform *action*."""
        if isinstance(actor, AdminActor):
            return
        if isinstance(actor, VendorActor) and actor.vendor_id == self.vendor_id:
            return
        if (
            isinstance(actor, CustomerActor)
            and actor.customer_id == self.customer_id
            and action in _CUSTOMER_ACTIONS
        ):
            return
        raise UnauthorizedError(
            f"Not allowed to {action.value} order #{self.id}"
        )

    # --- State transitions ----------------------------------------------------

    def can(self, action: OrderAction) -> bool:
        return self.status in _ALLOWED_FROM[action]

    def ensure_can(self, action: OrderAction) -> None:
        if not self.can(action):
            allowed = ", ".join(sorted(s.value for s in _ALLOWED_FROM[action]))
            raise InvalidTransitionError(
                f"Cannot {action.value} order #{self.id}: current status is "
                f"{self.status.value}, expected one of {allowed}"
            )

    def send(self) -> None:
        """QUOTATION -> SENT."""
        self._advance(OrderAction.SEND)

    def confirm(self) -> None:
        """QUOTATION|SENT -> CONFIRMED.

        Reservations must be written *before* calling this.
        """
        self._advance(OrderAction.CONFIRM)

    def mark_picked_up(self, at: datetime) -> None:
        """CONFIRMED -> PICKED_UP."""
        self._advance(OrderAction.PICKUP)
        self.picked_up_at = at

    def mark_returned(self, at: datetime, late_fee: Money) -> None:
        """PICKED_UP -> RETURNED, recording when and what the delay cost."""
        self._advance(OrderAction.RETURN)
        self.actual_return_at = at
        self.late_fee = late_fee

    def cancel(self) -> None:
        """QUOTATION|SENT|CONFIRMED -> CANCELLED.

        A picked-up rental can only be returned, never cancelled.
        """
        self._advance(OrderAction.CANCEL)

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        result = Money.zero(self.lines[0].unit_price.currency if self.lines else "USD")
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def planned_end(self) -> datetime:
        return max(line.period.end for line in self.lines)

    @property
    def planned_start(self) -> datetime:
        return min(line.period.start for line in self.lines)

    @property
    def holds_inventory(self) -> bool:
        return self.status in HOLD_STATUSES

    # --- Internal helpers -----------------------------------------------------

    def _advance(self, action: OrderAction) -> None:
        self.ensure_can(action)
        self.status = _TARGET[action]
