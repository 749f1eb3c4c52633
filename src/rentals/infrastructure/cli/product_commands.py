"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from rentals.application.add_product import AddProductHandler
from rentals.application.update_product import UpdateProductHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import inventory_repository, product_repository
from rentals.infrastructure.cli.options import actor_option, resolve_actor


@click.command("add")
@click.option("--vendor", required=True, help="Listing vendor ID.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Rental price per unit (e.g. 15.00).")
@click.option("--quantity", default=0, show_default=True, type=int, help="Units owned.")
def product_add(vendor: str, name: str, price: str, quantity: int) -> None:
    """List a new rentable product."""
    handler = AddProductHandler(
        product_repo=product_repository(),
        inventory_repo=inventory_repository(),
    )

    try:
        product = handler.handle(vendor_id=vendor, name=name, price=price, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' listed by {product.vendor_id} "
        f"at {product.price} ({quantity} units)"
    )


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    repo = product_repository()
    products = repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Vendor':<12} {'Name':<20} {'Price':>10}")
    click.echo("-" * 51)
    for p in products:
        click.echo(f"{p.id:<6} {p.vendor_id:<12} {p.name:<20} {str(p.price):>10}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", required=True, help="New rental price (e.g. 29.99).")
@actor_option()
def product_update(product_id: str, price: str, actor: str) -> None:
    """Change a product's rental price."""
    handler = UpdateProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(product_id=product_id, new_price=price, actor=resolve_actor(actor))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} price updated to {product.price}")
