"""Option types shared by the CLI command modules."""

from __future__ import annotations

from datetime import datetime

import click

from rentals.domain.exceptions import DomainException
from rentals.domain.model.actor import Actor, parse_actor
from rentals.domain.model.value_objects import as_utc as _to_utc

DATETIME = click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"])


def as_utc(value: datetime | None) -> datetime | None:
    """Command-line times carry no zone; they are read as UTC."""
    return None if value is None else _to_utc(value)


def actor_option(default: str = "admin"):
    return click.option(
        "--as",
        "actor",
        default=default,
        show_default=True,
        help="Acting user: 'admin', 'vendor:<id>' or 'customer:<id>'.",
    )


def resolve_actor(raw: str) -> Actor:
    try:
        return parse_actor(raw)
    except DomainException as exc:
        raise click.BadParameter(str(exc), param_hint="--as")
