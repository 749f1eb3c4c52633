"""Tests for the single lifecycle entry point."""

from datetime import datetime, timedelta, timezone

import pytest

from rentals.application.locking import ProductLockRegistry
from rentals.application.transition_order import TransitionOrderHandler
from rentals.domain.exceptions import (
    EntityNotFoundError,
    InvalidTransitionError,
    UnauthorizedError,
    ValidationError,
)
from rentals.domain.model.actor import AdminActor, CustomerActor, VendorActor
from rentals.domain.model.order import OrderAction, OrderStatus
from tests.fakes import Marketplace

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
START = datetime(2026, 3, 2, tzinfo=timezone.utc)
END = datetime(2026, 3, 6, tzinfo=timezone.utc)
ADMIN = AdminActor()


def _setup() -> tuple[TransitionOrderHandler, Marketplace, int]:
    m = Marketplace(NOW)
    order_id = m.quote({"Tent": 2}, START, END)
    handler = TransitionOrderHandler(
        m.orders, m.inventory, m.reservations, m.clock, m.settings, locks=ProductLockRegistry()
    )
    return handler, m, order_id


class TestFullLifecycle:

    def test_quotation_to_returned(self):
        handler, m, order_id = _setup()

        assert handler.handle(order_id, "send", ADMIN).status == "SENT"
        assert handler.handle(order_id, "confirm", ADMIN).status == "CONFIRMED"
        assert m.active_holds("1") == 2

        m.clock.set(START)
        assert handler.handle(order_id, OrderAction.PICKUP, ADMIN).status == "PICKED_UP"

        dto = handler.handle(
            order_id, OrderAction.RETURN, ADMIN, returned_at=END + timedelta(days=2)
        )
        assert dto.status == "RETURNED"
        assert dto.late_fee == "$20.00"
        assert m.active_holds("1") == 0

    def test_action_names_are_case_insensitive(self):
        handler, _, order_id = _setup()
        assert handler.handle(order_id, " Confirm ", ADMIN).status == "CONFIRMED"


class TestErrorPrecedence:

    def test_unknown_action(self):
        handler, _, order_id = _setup()
        with pytest.raises(ValidationError, match="Unknown action 'ship'"):
            handler.handle(order_id, "ship", ADMIN)

    def test_not_found_before_anything_else(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle(999, "pickup", CustomerActor("nobody"))

    def test_unauthorized_before_invalid_transition(self):
        handler, _, order_id = _setup()
        # pickup from QUOTATION is illegal too, but the actor is checked first
        with pytest.raises(UnauthorizedError):
            handler.handle(order_id, "pickup", VendorActor("vend-2"))

    def test_invalid_transition_for_authorized_actor(self):
        handler, m, order_id = _setup()
        with pytest.raises(InvalidTransitionError):
            handler.handle(order_id, "return", VendorActor("vend-1"))
        assert m.orders.get_by_id(order_id).status == OrderStatus.QUOTATION

    def test_customer_only_cancels(self):
        handler, _, order_id = _setup()
        with pytest.raises(UnauthorizedError):
            handler.handle(order_id, "send", CustomerActor("cust-1"))
        assert handler.handle(order_id, "cancel", CustomerActor("cust-1")).status == "CANCELLED"
