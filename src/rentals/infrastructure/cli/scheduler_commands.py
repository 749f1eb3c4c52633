"""CLI commands for rental expiry reminders."""

from __future__ import annotations

import time

import click

from rentals.infrastructure.bootstrap import (
    check_expiring_rentals_handler,
    expiry_scheduler,
    settings,
)


@click.command("check")
def scheduler_check() -> None:
    """Run one expiry sweep now."""
    result = check_expiring_rentals_handler().handle()
    click.echo(
        f"{result.due} rental(s) due: {result.sent} notified, "
        f"{result.already_notified} already notified, {result.failed} failed"
    )


@click.command("run")
@click.option("--interval", type=float, default=None, help="Minutes between sweeps.")
def scheduler_run(interval: float | None) -> None:
    """Sweep for expiring rentals until interrupted."""
    minutes = interval or settings().scheduler_interval_minutes
    scheduler = expiry_scheduler()
    scheduler.start(minutes)
    click.echo(f"Expiry scheduler running every {minutes:g} minute(s). Ctrl-C to stop.")
    try:
        while scheduler.is_running():
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()
    click.echo("Expiry scheduler stopped.")
