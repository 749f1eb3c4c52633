"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from rentals.domain.model.order import OrderStatus, RentalLine, RentalOrder
from rentals.domain.model.value_objects import Money, Quantity, RentalPeriod
from rentals.domain.repository.order_repository import OrderRepository
from rentals.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        return max((o["id"] for o in self._file.read()), default=0) + 1

    def get_by_id(self, order_id: int) -> RentalOrder | None:
        for raw in self._file.read():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_by_status(self, status: OrderStatus) -> list[RentalOrder]:
        return [
            self._to_domain(raw)
            for raw in self._file.read()
            if raw["status"] == status.value
        ]

    def save(self, order: RentalOrder) -> None:
        with self._file.editing() as orders:
            if order.id is None:
                order.id = max((o["id"] for o in orders), default=0) + 1

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    break
            else:
                orders.append(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: RentalOrder) -> dict:
        return {
            "id": order.id,
            "customer_id": order.customer_id,
            "vendor_id": order.vendor_id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "picked_up_at": _iso(order.picked_up_at),
            "actual_return_at": _iso(order.actual_return_at),
            "late_fee": str(order.late_fee.amount) if order.late_fee is not None else None,
            "coupon_code": order.coupon_code,
            "lines": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                    "start": line.period.start.isoformat(),
                    "end": line.period.end.isoformat(),
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> RentalOrder:
        lines = [
            RentalLine(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                period=RentalPeriod(
                    datetime.fromisoformat(i["start"]),
                    datetime.fromisoformat(i["end"]),
                ),
            )
            for i in raw["lines"]
        ]
        currency = lines[0].unit_price.currency if lines else "USD"
        return RentalOrder(
            id=raw["id"],
            customer_id=raw["customer_id"],
            vendor_id=raw["vendor_id"],
            lines=lines,
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            picked_up_at=_parse(raw.get("picked_up_at")),
            actual_return_at=_parse(raw.get("actual_return_at")),
            late_fee=(
                Money(Decimal(raw["late_fee"]), currency)
                if raw.get("late_fee") is not None
                else None
            ),
            coupon_code=raw.get("coupon_code"),
        )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
