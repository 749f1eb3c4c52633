"""CLI commands for the RentalOrder aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from rentals.application.create_order import CreateOrderHandler
from rentals.application.dto import OrderDTO, OrderItemSpec
from rentals.application.late_fee_quote import LateFeeQuoteHandler
from rentals.application.show_order import ShowOrderHandler
from rentals.domain.exceptions import DomainException
from rentals.domain.model.order import OrderAction
from rentals.infrastructure.bootstrap import (
    clock,
    inventory_repository,
    order_repository,
    product_repository,
    reservation_repository,
    settings_provider,
    transition_order_handler,
)
from rentals.infrastructure.cli.options import DATETIME, actor_option, as_utc, resolve_actor


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'Tent:3,Stove:5' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductName:Quantity'."
            )
        name, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{name}'."
            )
        specs.append(OrderItemSpec(product_name=name.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id}   Vendor: {dto.vendor_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.coupon_code:
        click.echo(f"Coupon:   {dto.coupon_code}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}  {'From':<20} {'Until':<20}")
    click.echo(f"  {'-'*90}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} "
            f"{item.line_total:>10}  {item.start:<20} {item.end:<20}"
        )
    click.echo(f"  {'-'*90}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")

    if dto.picked_up_at:
        click.echo(f"  Picked up: {dto.picked_up_at}")
    if dto.actual_return_at:
        click.echo(f"  Returned:  {dto.actual_return_at}  (planned {dto.planned_end})")
    if dto.late_fee is not None:
        click.echo(f"  Late fee:  {dto.late_fee}")


@click.command("create")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--vendor", required=True, help="Vendor ID.")
@click.option("--items", required=True, help="Items as 'Product:Qty,Product:Qty'.")
@click.option("--start", required=True, type=DATETIME, help="Rental start.")
@click.option("--end", required=True, type=DATETIME, help="Rental end.")
@click.option("--coupon", default=None, help="Coupon code to attach.")
def order_create(
    customer: str,
    vendor: str,
    items: str,
    start: datetime,
    end: datetime,
    coupon: str | None,
) -> None:
    """Create a rental quotation (holds nothing until confirmed)."""
    specs = _parse_items(items)

    handler = CreateOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
        clock=clock(),
    )

    try:
        dto = handler.handle(
            customer_id=customer,
            vendor_id=vendor,
            item_specs=specs,
            start=as_utc(start),
            end=as_utc(end),
            coupon_code=coupon,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


def _transition(order_id: int, action: OrderAction, actor: str, **options) -> OrderDTO:
    try:
        return transition_order_handler().handle(
            order_id, action, resolve_actor(actor), **options
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("send")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to send.")
@actor_option()
def order_send(order_id: int, actor: str) -> None:
    """Send a quotation to the customer."""
    _transition(order_id, OrderAction.SEND, actor)
    click.echo(f"Order #{order_id} sent.")


@click.command("confirm")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to confirm.")
@actor_option()
def order_confirm(order_id: int, actor: str) -> None:
    """Confirm an order (reserves inventory for its window)."""
    _transition(order_id, OrderAction.CONFIRM, actor)
    click.echo(f"Order #{order_id} confirmed: inventory reserved.")


@click.command("pickup")
@click.option("--id", "order_id", required=True, type=int, help="Order ID picked up.")
@actor_option()
def order_pickup(order_id: int, actor: str) -> None:
    """Record that the customer collected the items."""
    dto = _transition(order_id, OrderAction.PICKUP, actor)
    click.echo(f"Order #{order_id} picked up at {dto.picked_up_at}.")


@click.command("return")
@click.option("--id", "order_id", required=True, type=int, help="Order ID returned.")
@click.option("--at", "returned_at", type=DATETIME, default=None, help="Return time (default: now).")
@actor_option()
def order_return(order_id: int, returned_at: datetime | None, actor: str) -> None:
    """Record the return (releases inventory, charges late fees)."""
    dto = _transition(order_id, OrderAction.RETURN, actor, returned_at=as_utc(returned_at))
    click.echo(f"Order #{order_id} returned. Late fee: {dto.late_fee}")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@actor_option()
def order_cancel(order_id: int, actor: str) -> None:
    """Cancel an order (releases reserved inventory if confirmed)."""
    _transition(order_id, OrderAction.CANCEL, actor)
    click.echo(f"Order #{order_id} cancelled.")


@click.command("late-fee")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--as-of", "as_of", type=DATETIME, default=None, help="Hypothetical return time.")
def order_late_fee(order_id: int, as_of: datetime | None) -> None:
    """Show the late fee charged, or owed so far for a rental still out."""
    handler = LateFeeQuoteHandler(
        order_repo=order_repository(),
        settings=settings_provider(),
        clock=clock(),
    )
    try:
        fee = handler.handle(order_id, as_of=as_utc(as_of))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} late fee: ${fee:.2f}")
