"""JSON-file-backed implementation of ReservationRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import Quantity, RentalPeriod
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.infrastructure.persistence.json_file import JsonFile


class JsonReservationRepository(ReservationRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ReservationRepository interface --------------------------------------

    def list_active_for_product(self, product_id: str) -> list[Reservation]:
        return [
            self._to_domain(raw)
            for raw in self._file.read()
            if raw["product_id"] == product_id and raw.get("released_at") is None
        ]

    def list_for_order(self, order_id: int) -> list[Reservation]:
        return [
            self._to_domain(raw)
            for raw in self._file.read()
            if raw["order_id"] == order_id
        ]

    def add(self, reservation: Reservation) -> None:
        with self._file.editing() as records:
            reservation.id = max((r["id"] for r in records), default=0) + 1
            records.append(self._to_raw(reservation))

    def save(self, reservation: Reservation) -> None:
        if reservation.id is None:
            self.add(reservation)
            return
        self._file.upsert(self._to_raw(reservation), key=lambda raw: raw["id"])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "product_id": reservation.product_id,
            "order_id": reservation.order_id,
            "quantity": reservation.quantity.value,
            "start": reservation.period.start.isoformat(),
            "end": reservation.period.end.isoformat(),
            "created_at": reservation.created_at.isoformat(),
            "released_at": (
                reservation.released_at.isoformat()
                if reservation.released_at is not None
                else None
            ),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Reservation:
        released = raw.get("released_at")
        return Reservation(
            id=raw["id"],
            product_id=raw["product_id"],
            order_id=raw["order_id"],
            quantity=Quantity(raw["quantity"]),
            period=RentalPeriod(
                datetime.fromisoformat(raw["start"]),
                datetime.fromisoformat(raw["end"]),
            ),
            created_at=datetime.fromisoformat(raw["created_at"]),
            released_at=datetime.fromisoformat(released) if released else None,
        )
