"""Unit tests for the availability engine."""

from datetime import datetime, timezone

from rentals.domain.model.inventory import InventoryItem
from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import Quantity, RentalPeriod
from rentals.domain.service.availability_service import (
    AvailabilityService,
    overlapping,
    peak_concurrent,
)
from tests.fakes import FakeInventoryRepository, FakeReservationRepository


def day(n: int) -> datetime:
    return datetime(2026, 3, n, tzinfo=timezone.utc)


def _reservation(
    qty: int, start: int, end: int, product_id: str = "1", order_id: int = 1
) -> Reservation:
    return Reservation(
        id=None,
        product_id=product_id,
        order_id=order_id,
        quantity=Quantity(qty),
        period=RentalPeriod(day(start), day(end)),
        created_at=day(1),
    )


def _service(
    on_hand: int, reservations: list[Reservation] | None = None
) -> tuple[AvailabilityService, FakeReservationRepository]:
    inventory = FakeInventoryRepository(
        [InventoryItem(product_id="1", product_name="Tent", quantity_on_hand=on_hand)]
    )
    reservation_repo = FakeReservationRepository(reservations)
    return AvailabilityService(inventory, reservation_repo), reservation_repo


class TestAvailableQuantity:

    def test_basic_booking(self):
        svc, _ = _service(3, [_reservation(2, 1, 5)])
        window = RentalPeriod(day(3), day(4))
        assert svc.available_quantity("1", window) == 1
        assert not svc.is_available("1", window, Quantity(2))
        assert svc.is_available("1", window, Quantity(1))

    def test_adjacent_window_touching_end_overlaps(self):
        svc, _ = _service(3, [_reservation(3, 1, 5)])
        assert not svc.is_available("1", RentalPeriod(day(5), day(8)), Quantity(3))
        assert svc.is_available("1", RentalPeriod(day(6), day(8)), Quantity(3))

    def test_window_touching_start_overlaps(self):
        svc, _ = _service(1, [_reservation(1, 5, 8)])
        assert svc.available_quantity("1", RentalPeriod(day(1), day(5))) == 0

    def test_no_reservations_means_everything_free(self):
        svc, _ = _service(4)
        assert svc.available_quantity("1", RentalPeriod(day(1), day(2))) == 4

    def test_unknown_product_has_nothing(self):
        svc, _ = _service(4)
        assert svc.available_quantity("missing", RentalPeriod(day(1), day(2))) == 0
        assert svc.quantity_on_hand("missing") == 0

    def test_released_reservations_do_not_count(self):
        held = _reservation(3, 1, 5)
        svc, _ = _service(3, [held])
        held.release(day(2))
        assert svc.available_quantity("1", RentalPeriod(day(3), day(4))) == 3

    def test_other_products_do_not_count(self):
        svc, _ = _service(2, [_reservation(2, 1, 5, product_id="2")])
        assert svc.available_quantity("1", RentalPeriod(day(1), day(5))) == 2

    def test_never_negative_when_ledger_shrank(self):
        svc, _ = _service(1, [_reservation(3, 1, 5)])
        assert svc.available_quantity("1", RentalPeriod(day(2), day(3))) == 0

    def test_reserved_sums_every_overlapping_hold(self):
        svc, _ = _service(10, [_reservation(2, 1, 3), _reservation(3, 2, 6, order_id=2)])
        assert svc.reserved_quantity("1", RentalPeriod(day(2), day(2).replace(hour=12))) == 5


class TestOverlapping:

    def test_filters_inactive_and_disjoint(self):
        a = _reservation(1, 1, 3)
        b = _reservation(1, 6, 8)
        c = _reservation(1, 2, 4)
        c.release(day(1))
        assert overlapping([a, b, c], RentalPeriod(day(2), day(5))) == [a]


class TestPeakConcurrent:

    def test_empty(self):
        assert peak_concurrent([]) == 0

    def test_disjoint_holds_do_not_stack(self):
        assert peak_concurrent([_reservation(2, 1, 3), _reservation(3, 4, 6)]) == 3

    def test_overlapping_holds_stack(self):
        assert peak_concurrent([_reservation(2, 1, 5), _reservation(3, 4, 6)]) == 5

    def test_touching_holds_stack(self):
        assert peak_concurrent([_reservation(2, 1, 3), _reservation(2, 3, 6)]) == 4

    def test_released_holds_ignored(self):
        released = _reservation(5, 1, 5)
        released.release(day(1))
        assert peak_concurrent([released, _reservation(1, 2, 3)]) == 1

    def test_peak_reserved_reads_active_holds(self):
        svc, _ = _service(3, [_reservation(2, 1, 5), _reservation(1, 3, 7, order_id=2)])
        assert svc.peak_reserved("1") == 3
