"""Integration tests for the ConfirmOrder use case."""

from datetime import datetime, timezone

import pytest

from rentals.application.confirm_order import ConfirmOrderHandler
from rentals.application.locking import ProductLockRegistry
from rentals.application.send_order import SendOrderHandler
from rentals.domain.exceptions import (
    AvailabilityError,
    EntityNotFoundError,
    InvalidTransitionError,
    UnauthorizedError,
)
from rentals.domain.model.actor import AdminActor, CustomerActor, VendorActor
from rentals.domain.model.order import OrderStatus
from tests.fakes import BrokenOrderRepository, FlakyReservationRepository, Marketplace

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
START = datetime(2026, 3, 2, tzinfo=timezone.utc)
END = datetime(2026, 3, 6, tzinfo=timezone.utc)
ADMIN = AdminActor()


def _handler(m: Marketplace, locks: ProductLockRegistry | None = None) -> ConfirmOrderHandler:
    return ConfirmOrderHandler(
        m.orders, m.inventory, m.reservations, m.clock, locks=locks or ProductLockRegistry()
    )


class TestConfirmHappyPath:

    def test_confirms_quotation_and_reserves_every_line(self):
        m = Marketplace(NOW)
        order_id = m.quote({"Tent": 2, "Stove": 1}, START, END)

        dto = _handler(m).handle(order_id, ADMIN)

        assert dto.status == "CONFIRMED"
        assert m.orders.get_by_id(order_id).status == OrderStatus.CONFIRMED
        held = m.reservations.list_for_order(order_id)
        assert sorted((r.product_id, r.quantity.value) for r in held) == [("1", 2), ("2", 1)]
        assert all(r.created_at == NOW and r.is_active for r in held)

    def test_confirms_sent_quotation(self):
        m = Marketplace(NOW)
        order_id = m.quote({"Tent": 1}, START, END)
        SendOrderHandler(m.orders, m.clock).handle(order_id, ADMIN)

        assert _handler(m).handle(order_id, ADMIN).status == "CONFIRMED"

    def test_owning_vendor_may_confirm(self):
        m = Marketplace(NOW)
        order_id = m.quote({"Tent": 1}, START, END)
        assert _handler(m).handle(order_id, VendorActor("vend-1")).status == "CONFIRMED"

    def test_confirmed_units_leave_the_pool(self):
        m = Marketplace(NOW)
        order_id = m.quote({"Tent": 3}, START, END)
        _handler(m).handle(order_id, ADMIN)
        assert m.active_holds("1") == 3


class TestConfirmRejections:

    def test_unknown_order(self):
        m = Marketplace(NOW)
        with pytest.raises(EntityNotFoundError, match="Order #42 not found"):
            _handler(m).handle(42, ADMIN)

    def test_customer_cannot_confirm(self):
        m = Marketplace(NOW)
        order_id = m.quote({"Tent": 1}, START, END)
        with pytest.raises(UnauthorizedError):
            _handler(m).handle(order_id, CustomerActor("cust-1"))
        assert m.reservations.all() == []

    def test_other_vendor_cannot_confirm(self):
        m = Marketplace(NOW)
        order_id = m.quote({"Tent": 1}, START, END)
        with pytest.raises(UnauthorizedError):
            _handler(m).handle(order_id, VendorActor("vend-2"))

    def test_double_confirm_rejected_without_second_hold(self):
        m = Marketplace(NOW)
        order_id = m.quote({"Tent": 1}, START, END)
        handler = _handler(m)
        handler.handle(order_id, ADMIN)

        with pytest.raises(InvalidTransitionError, match="current status is CONFIRMED"):
            handler.handle(order_id, ADMIN)
        assert len(m.reservations.list_for_order(order_id)) == 1

    def test_units_taken_since_quotation(self):
        m = Marketplace(NOW)
        first = m.quote({"Tent": 2}, START, END)
        second = m.quote({"Tent": 2, "Stove": 1}, START, END, customer_id="cust-2")
        handler = _handler(m)
        handler.handle(first, ADMIN)

        with pytest.raises(AvailabilityError, match="Insufficient inventory for Tent"):
            handler.handle(second, ADMIN)

        assert m.orders.get_by_id(second).status == OrderStatus.QUOTATION
        assert m.reservations.list_for_order(second) == []
        assert m.active_holds("2") == 0

    def test_non_overlapping_windows_share_units(self):
        m = Marketplace(NOW)
        first = m.quote({"Kayak": 1}, START, END, vendor_id="vend-2")
        later = m.quote(
            {"Kayak": 1},
            datetime(2026, 3, 7, tzinfo=timezone.utc),
            datetime(2026, 3, 9, tzinfo=timezone.utc),
            vendor_id="vend-2",
        )
        handler = _handler(m)
        handler.handle(first, ADMIN)
        assert handler.handle(later, ADMIN).status == "CONFIRMED"


class TestConfirmLocking:

    def test_busy_products_surface_as_availability_error(self):
        m = Marketplace(NOW)
        order_id = m.quote({"Tent": 1}, START, END)
        locks = ProductLockRegistry(timeout=0.01)

        with locks.hold(["1"]):
            with pytest.raises(AvailabilityError, match="try again"):
                _handler(m, locks).handle(order_id, ADMIN)

        assert m.orders.get_by_id(order_id).status == OrderStatus.QUOTATION
        assert m.reservations.all() == []

    def test_locks_are_free_after_failure(self):
        m = Marketplace(NOW)
        first = m.quote({"Tent": 3}, START, END)
        second = m.quote({"Tent": 1}, START, END)
        locks = ProductLockRegistry(timeout=0.01)
        handler = _handler(m, locks)
        handler.handle(first, ADMIN)

        with pytest.raises(AvailabilityError):
            handler.handle(second, ADMIN)
        with locks.hold(["1"]):
            pass


class TestConfirmCompensation:

    def test_failed_save_releases_new_holds(self):
        orders = BrokenOrderRepository()
        m = Marketplace(NOW, order_repo=orders)
        order_id = m.quote({"Tent": 2, "Stove": 1}, START, END)
        orders.broken = True

        with pytest.raises(OSError):
            _handler(m).handle(order_id, ADMIN)

        assert m.active_holds("1") == 0
        assert m.active_holds("2") == 0
        orders.broken = False
        assert m.orders.get_by_id(order_id).status == OrderStatus.QUOTATION

    def test_failed_reservation_write_leaves_no_holds(self):
        reservations = FlakyReservationRepository()
        m = Marketplace(NOW, reservation_repo=reservations)
        order_id = m.quote({"Tent": 2, "Stove": 1}, START, END)
        reservations.fail_on_write(2)

        with pytest.raises(OSError):
            _handler(m).handle(order_id, ADMIN)

        assert m.orders.get_by_id(order_id).status == OrderStatus.QUOTATION
        assert m.active_holds("1") == 0
        assert m.active_holds("2") == 0

    def test_confirm_succeeds_after_failed_reservation_write(self):
        reservations = FlakyReservationRepository()
        m = Marketplace(NOW, reservation_repo=reservations)
        order_id = m.quote({"Tent": 2, "Stove": 1}, START, END)
        reservations.fail_on_write(2)
        with pytest.raises(OSError):
            _handler(m).handle(order_id, ADMIN)

        assert _handler(m).handle(order_id, ADMIN).status == "CONFIRMED"
        assert m.active_holds("1") == 2
        assert m.active_holds("2") == 1
