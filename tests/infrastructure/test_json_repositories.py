"""Round trips through the JSON-file repositories."""

import json
import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from rentals.domain.model.inventory import InventoryItem
from rentals.domain.model.notification import NotificationKind, NotificationRecord
from rentals.domain.model.order import OrderStatus, RentalLine, RentalOrder
from rentals.domain.model.product import Product
from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import Money, Quantity, RentalPeriod
from rentals.infrastructure.persistence.json_file import JsonFile
from rentals.infrastructure.persistence.json_inventory_repository import JsonInventoryRepository
from rentals.infrastructure.persistence.json_notification_log_repository import (
    JsonNotificationLogRepository,
)
from rentals.infrastructure.persistence.json_order_repository import JsonOrderRepository
from rentals.infrastructure.persistence.json_product_repository import JsonProductRepository
from rentals.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
PERIOD = RentalPeriod(datetime(2026, 3, 2, tzinfo=timezone.utc), datetime(2026, 3, 6, tzinfo=timezone.utc))


def _order() -> RentalOrder:
    line = RentalLine("1", "Tent", Quantity(2), Money.of("350.00"), PERIOD)
    return RentalOrder.create("cust-1", "vend-1", [line], created_at=NOW, coupon_code="SPRING")


class TestJsonFile:

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "things.json"
        JsonFile(path)
        assert json.loads(path.read_text()) == []

    def test_editing_persists(self, tmp_path):
        f = JsonFile(tmp_path / "things.json")
        with f.editing() as records:
            records.append({"id": 1})
        assert f.read() == [{"id": 1}]

    def test_failed_edit_is_discarded(self, tmp_path):
        f = JsonFile(tmp_path / "things.json")
        try:
            with f.editing() as records:
                records.append({"id": 1})
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert f.read() == []

    def test_upsert_replaces_by_key(self, tmp_path):
        f = JsonFile(tmp_path / "things.json")
        f.upsert({"id": 1, "v": "a"}, key=lambda r: r["id"])
        f.upsert({"id": 2, "v": "b"}, key=lambda r: r["id"])
        f.upsert({"id": 1, "v": "c"}, key=lambda r: r["id"])
        assert f.read() == [{"id": 1, "v": "c"}, {"id": 2, "v": "b"}]

    def test_concurrent_appends_are_not_lost(self, tmp_path):
        path = tmp_path / "things.json"

        def append(n: int) -> None:
            with JsonFile(path).editing() as records:
                records.append({"id": n})

        workers = [threading.Thread(target=append, args=(n,)) for n in range(20)]
        for w in workers:
            w.start()
        for w in workers:
            w.join()
        assert sorted(r["id"] for r in JsonFile(path).read()) == list(range(20))


class TestJsonProductRepository:

    def test_round_trip(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(Product(id="1", vendor_id="vend-1", name="Tent", price=Money.of("19.99")))

        loaded = repo.get_by_id("1")
        assert loaded.price == Money.of("19.99")
        assert repo.get_by_name("TENT").id == "1"
        assert repo.get_by_id("2") is None

    def test_save_updates_in_place(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        product = Product(id="1", vendor_id="vend-1", name="Tent", price=Money.of("19.99"))
        repo.save(product)
        product.update_price(Money.of("25"))
        repo.save(product)
        assert len(repo.list_all()) == 1
        assert repo.get_by_id("1").price.amount == Decimal("25")


class TestJsonInventoryRepository:

    def test_round_trip(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        repo.save(InventoryItem(product_id="1", product_name="Tent", quantity_on_hand=3))
        item = repo.get_by_product_id("1")
        item.restock(2)
        repo.save(item)
        assert repo.get_by_product_id("1").quantity_on_hand == 5
        assert len(repo.list_all()) == 1


class TestJsonOrderRepository:

    def test_assigns_ids(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        assert repo.next_id() == 1
        first, second = _order(), _order()
        repo.save(first)
        repo.save(second)
        assert (first.id, second.id) == (1, 2)
        assert repo.next_id() == 3

    def test_round_trip_keeps_every_field(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.save(order)
        order.confirm()
        order.mark_picked_up(NOW + timedelta(days=1))
        order.mark_returned(NOW + timedelta(days=7), Money.of("20.00"))
        repo.save(order)

        loaded = repo.get_by_id(order.id)
        assert loaded == order
        assert loaded.total == Money.of("700.00")
        assert loaded.lines[0].period == PERIOD

    def test_list_by_status(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        quoted, confirmed = _order(), _order()
        confirmed.confirm()
        repo.save(quoted)
        repo.save(confirmed)
        assert [o.id for o in repo.list_by_status(OrderStatus.CONFIRMED)] == [confirmed.id]
        assert repo.list_by_status(OrderStatus.RETURNED) == []


class TestJsonReservationRepository:

    def _reservation(self, product_id: str = "1", order_id: int = 1) -> Reservation:
        return Reservation(
            id=None,
            product_id=product_id,
            order_id=order_id,
            quantity=Quantity(2),
            period=PERIOD,
            created_at=NOW,
        )

    def test_add_assigns_ids(self, tmp_path):
        repo = JsonReservationRepository(tmp_path / "reservations.json")
        a, b = self._reservation(), self._reservation(order_id=2)
        repo.add(a)
        repo.add(b)
        assert (a.id, b.id) == (1, 2)

    def test_release_is_persisted_and_history_kept(self, tmp_path):
        repo = JsonReservationRepository(tmp_path / "reservations.json")
        held = self._reservation()
        repo.add(held)
        repo.add(self._reservation(product_id="2"))

        held.release(NOW)
        repo.save(held)

        assert repo.list_active_for_product("1") == []
        assert len(repo.list_active_for_product("2")) == 1
        history = repo.list_for_order(1)
        assert len(history) == 2
        assert next(r for r in history if r.id == held.id).released_at == NOW


class TestJsonNotificationLogRepository:

    def test_records_by_order_and_kind(self, tmp_path):
        repo = JsonNotificationLogRepository(tmp_path / "notification_log.json")
        repo.add(NotificationRecord(order_id=4, kind=NotificationKind.OVERDUE, sent_at=NOW))
        assert repo.has_record(4, NotificationKind.OVERDUE)
        assert not repo.has_record(4, NotificationKind.EXPIRING_SOON)
        assert not repo.has_record(5, NotificationKind.OVERDUE)
