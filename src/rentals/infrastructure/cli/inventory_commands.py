"""CLI commands for the inventory ledger."""

from __future__ import annotations

from datetime import datetime, timedelta

import click

from rentals.application.set_inventory import SetInventoryHandler
from rentals.application.show_inventory import ShowInventoryHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import (
    clock,
    inventory_repository,
    product_locks,
    product_repository,
    reservation_repository,
)
from rentals.infrastructure.cli.options import DATETIME, as_utc


@click.command("set")
@click.option("--product", required=True, help="Product name.")
@click.option("--quantity", required=True, type=int, help="Units owned.")
def inventory_set(product: str, quantity: int) -> None:
    """Restock or write off units so the product owns QUANTITY."""
    handler = SetInventoryHandler(
        inventory_repo=inventory_repository(),
        product_repo=product_repository(),
        reservation_repo=reservation_repository(),
        locks=product_locks(),
    )

    try:
        handler.handle(product_name=product, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory for '{product}' set to {quantity}")


@click.command("show")
@click.option("--start", type=DATETIME, default=None, help="Window start (default: now).")
@click.option("--end", type=DATETIME, default=None, help="Window end (default: start + 1 day).")
def inventory_show(start: datetime | None, end: datetime | None) -> None:
    """Show units owned, reserved and free over a window."""
    start = as_utc(start) or clock().now()
    end = as_utc(end) or start + timedelta(days=1)

    handler = ShowInventoryHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
    )
    try:
        lines = handler.handle(start, end)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'Product':<20} {'On hand':>8} {'Reserved':>10} {'Available':>10}")
    click.echo("-" * 51)
    for line in lines:
        click.echo(
            f"{line.product_name:<20} {line.on_hand:>8} {line.reserved:>10} {line.available:>10}"
        )
