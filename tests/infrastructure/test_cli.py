"""End-to-end tests of the command line against a temporary data dir."""

import pytest
import structlog
from click.testing import CliRunner

from rentals.infrastructure import bootstrap
from rentals.infrastructure.cli.main import cli

WINDOW = ["--start", "2099-03-02", "--end", "2099-03-06"]


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setenv("RENTALS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("RENTALS_LOG_LEVEL", "WARNING")
    bootstrap.settings.cache_clear()
    bootstrap.product_locks.cache_clear()
    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(cli, list(args))

    yield invoke

    bootstrap.settings.cache_clear()
    bootstrap.product_locks.cache_clear()
    # the CLI points structlog at the runner's stderr, which is gone now
    structlog.reset_defaults()


@pytest.fixture
def stocked(run):
    assert run("product", "add", "--vendor", "vend-1", "--name", "Tent",
               "--price", "350", "--quantity", "3").exit_code == 0
    assert run("product", "add", "--vendor", "vend-1", "--name", "Stove",
               "--price", "5", "--quantity", "2").exit_code == 0
    return run


class TestProductCommands:

    def test_add_and_list(self, run):
        result = run("product", "add", "--vendor", "vend-1", "--name", "Tent",
                     "--price", "350", "--quantity", "3")
        assert result.exit_code == 0, result.output
        assert "Product #1 'Tent' listed by vend-1 at $350.00 (3 units)" in result.output

        listing = run("product", "list")
        assert "Tent" in listing.output
        assert "$350.00" in listing.output

    def test_reprice_by_other_vendor_rejected(self, stocked):
        result = stocked("product", "update", "--id", "1", "--price", "1", "--as", "vendor:vend-9")
        assert result.exit_code == 1
        assert "Not allowed to reprice" in result.output


class TestOrderCommands:

    def test_full_rental(self, stocked):
        created = stocked("order", "create", "--customer", "cust-1", "--vendor", "vend-1",
                          "--items", "Tent:2", *WINDOW)
        assert created.exit_code == 0, created.output
        assert "Order #1 created  (status=QUOTATION)" in created.output
        assert "$700.00" in created.output

        assert stocked("order", "send", "--id", "1").exit_code == 0
        confirmed = stocked("order", "confirm", "--id", "1", "--as", "vendor:vend-1")
        assert confirmed.exit_code == 0, confirmed.output

        check = stocked("availability", "check", "--product", "Tent",
                        "--start", "2099-03-03", "--end", "2099-03-04", "--quantity", "2")
        assert "NOT available (1 free)" in check.output

        assert stocked("order", "pickup", "--id", "1").exit_code == 0
        returned = stocked("order", "return", "--id", "1", "--at", "2099-03-08")
        assert returned.exit_code == 0, returned.output
        assert "Late fee: $20.00" in returned.output

        fee = stocked("order", "late-fee", "--id", "1")
        assert "late fee: $20.00" in fee.output

        shown = stocked("order", "show", "--id", "1")
        assert "status=RETURNED" in shown.output

    def test_customer_cannot_confirm(self, stocked):
        stocked("order", "create", "--customer", "cust-1", "--vendor", "vend-1",
                "--items", "Tent:1", *WINDOW)
        result = stocked("order", "confirm", "--id", "1", "--as", "customer:cust-1")
        assert result.exit_code == 1
        assert "Not allowed to confirm order #1" in result.output

    def test_customer_cancels_own_order(self, stocked):
        stocked("order", "create", "--customer", "cust-1", "--vendor", "vend-1",
                "--items", "Tent:1", *WINDOW)
        result = stocked("order", "cancel", "--id", "1", "--as", "customer:cust-1")
        assert result.exit_code == 0, result.output
        assert "Order #1 cancelled." in result.output

    def test_invalid_transition_reported(self, stocked):
        stocked("order", "create", "--customer", "cust-1", "--vendor", "vend-1",
                "--items", "Tent:1", *WINDOW)
        result = stocked("order", "pickup", "--id", "1")
        assert result.exit_code == 1
        assert "current status is QUOTATION" in result.output

    def test_unknown_order(self, stocked):
        result = stocked("order", "show", "--id", "99")
        assert result.exit_code == 1
        assert "Order #99 not found" in result.output

    def test_malformed_actor(self, stocked):
        result = stocked("order", "cancel", "--id", "1", "--as", "root")
        assert result.exit_code == 2
        assert "Invalid actor" in result.output

    def test_malformed_items(self, stocked):
        result = stocked("order", "create", "--customer", "c", "--vendor", "vend-1",
                         "--items", "Tent", *WINDOW)
        assert result.exit_code == 2
        assert "Expected 'ProductName:Quantity'" in result.output

    def test_over_capacity_quotation_rejected(self, stocked):
        result = stocked("order", "create", "--customer", "c", "--vendor", "vend-1",
                         "--items", "Tent:4", *WINDOW)
        assert result.exit_code == 1
        assert "not available for the requested dates" in result.output


class TestInventoryAndAvailability:

    def test_set_and_show(self, stocked):
        assert stocked("inventory", "set", "--product", "Tent", "--quantity", "5").exit_code == 0
        shown = stocked("inventory", "show", *WINDOW)
        tent_row = next(line for line in shown.output.splitlines() if line.startswith("Tent"))
        assert tent_row.split() == ["Tent", "5", "0", "5"]

    def test_list_available(self, stocked):
        result = stocked("availability", "list", *WINDOW)
        assert "Tent" in result.output
        assert "Stove" in result.output


class TestSchedulerCommands:

    def test_check_with_nothing_out(self, stocked):
        result = stocked("scheduler", "check")
        assert result.exit_code == 0, result.output
        assert "0 rental(s) due" in result.output
