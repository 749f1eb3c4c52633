"""CLI commands for availability queries."""

from __future__ import annotations

from datetime import datetime

import click

from rentals.application.check_availability import CheckAvailabilityHandler
from rentals.application.list_available_products import ListAvailableProductsHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import (
    inventory_repository,
    product_repository,
    reservation_repository,
)
from rentals.infrastructure.cli.options import DATETIME, as_utc


@click.command("check")
@click.option("--product", required=True, help="Product name.")
@click.option("--start", required=True, type=DATETIME, help="Window start.")
@click.option("--end", required=True, type=DATETIME, help="Window end.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units wanted.")
def availability_check(product: str, start: datetime, end: datetime, quantity: int) -> None:
    """Check whether QUANTITY units of a product are free for a window."""
    found = product_repository().get_by_name(product)
    if found is None:
        raise click.ClickException(f"Product not found: '{product}'")

    handler = CheckAvailabilityHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
    )
    try:
        ok = handler.handle(found.id, as_utc(start), as_utc(end), quantity)
        free = handler.available_quantity(found.id, as_utc(start), as_utc(end))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    verdict = "available" if ok else "NOT available"
    click.echo(f"{found.name}: {quantity} unit(s) {verdict} ({free} free)")


@click.command("list")
@click.option("--start", required=True, type=DATETIME, help="Window start.")
@click.option("--end", required=True, type=DATETIME, help="Window end.")
@click.option("--vendor", default=None, help="Only this vendor's products.")
def availability_list(start: datetime, end: datetime, vendor: str | None) -> None:
    """List products with at least one free unit for a window."""
    handler = ListAvailableProductsHandler(
        product_repo=product_repository(),
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
    )
    try:
        rows = handler.handle(as_utc(start), as_utc(end), vendor_id=vendor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("Nothing available for that window.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10} {'Free':>6}")
    click.echo("-" * 45)
    for row in rows:
        click.echo(f"{row.product_id:<6} {row.product_name:<20} {row.price:>10} {row.available:>6}")
