"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentals.domain.model.order import RentalOrder


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (product name + quantity)."""

    product_name: str
    quantity: int


@dataclass(frozen=True)
class RentalLineDTO:
    """Output: a single rental line as displayed to the user."""

    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    start: str
    end: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete rental order as displayed to the user."""

    id: int
    customer_id: str
    vendor_id: str
    status: str
    items: list[RentalLineDTO]
    total: str
    planned_end: str
    created_at: str
    picked_up_at: str | None = None
    actual_return_at: str | None = None
    late_fee: str | None = None
    coupon_code: str | None = None


_TIME_FORMAT = "%Y-%m-%d %H:%M UTC"


def order_to_dto(order: RentalOrder) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_id=order.customer_id,
        vendor_id=order.vendor_id,
        status=order.status.value,
        items=[
            RentalLineDTO(
                product_name=line.product_name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
                start=line.period.start.strftime(_TIME_FORMAT),
                end=line.period.end.strftime(_TIME_FORMAT),
            )
            for line in order.lines
        ],
        total=str(order.total),
        planned_end=order.planned_end.strftime(_TIME_FORMAT),
        created_at=order.created_at.strftime(_TIME_FORMAT),
        picked_up_at=_fmt(order.picked_up_at),
        actual_return_at=_fmt(order.actual_return_at),
        late_fee=str(order.late_fee) if order.late_fee is not None else None,
        coupon_code=order.coupon_code,
    )


def _fmt(value) -> str | None:
    return value.strftime(_TIME_FORMAT) if value is not None else None
