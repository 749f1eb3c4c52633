import click

from rentals.infrastructure.bootstrap import settings
from rentals.infrastructure.cli.availability_commands import (
    availability_check,
    availability_list,
)
from rentals.infrastructure.cli.inventory_commands import inventory_set, inventory_show
from rentals.infrastructure.cli.order_commands import (
    order_cancel,
    order_confirm,
    order_create,
    order_late_fee,
    order_pickup,
    order_return,
    order_send,
    order_show,
)
from rentals.infrastructure.cli.product_commands import product_add, product_list, product_update
from rentals.infrastructure.cli.scheduler_commands import scheduler_check, scheduler_run
from rentals.infrastructure.logging_config import configure_logging


@click.group()
def cli() -> None:
    """Rentals: rental marketplace inventory and orders"""
    configure_logging(settings().log_level)


@cli.group()
def order() -> None:
    """Manage rental orders."""


@cli.group()
def product() -> None:
    """Manage rentable products."""


@cli.group()
def inventory() -> None:
    """Manage the inventory ledger."""


@cli.group()
def availability() -> None:
    """Query availability over a rental window."""


@cli.group()
def scheduler() -> None:
    """Rental expiry reminders."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_confirm)
order.add_command(order_create)
order.add_command(order_late_fee)
order.add_command(order_pickup)
order.add_command(order_return)
order.add_command(order_send)
order.add_command(order_show)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
availability.add_command(availability_check)
availability.add_command(availability_list)
scheduler.add_command(scheduler_check)
scheduler.add_command(scheduler_run)
