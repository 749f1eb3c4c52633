"""Who is acting on an order.

Handlers receive one of these explicitly and authorize against it before
any mutation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from rentals.domain.exceptions import ValidationError


@dataclass(frozen=True)
class AdminActor:
    pass


@dataclass(frozen=True)
class VendorActor:
    vendor_id: str


@dataclass(frozen=True)
class CustomerActor:
    customer_id: str


Actor = Union[AdminActor, VendorActor, CustomerActor]


def parse_actor(raw: str) -> Actor:
    """Parse 'admin', 'vendor:<id>' or 'customer:<id>'."""
    role, _, ident = raw.strip().partition(":")
    role = role.lower()
    if role == "admin" and not ident:
        return AdminActor()
    if role == "vendor" and ident:
        return VendorActor(vendor_id=ident)
    if role == "customer" and ident:
        return CustomerActor(customer_id=ident)
    raise ValidationError(
        f"Invalid actor '{raw}'. Expected 'admin', 'vendor:<id>' or 'customer:<id>'."
    )
