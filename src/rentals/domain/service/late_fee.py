"""Late fee computation.

The daily rate is approximated as ``order_total / 7`` whatever the
actual rental length.  The delay beyond the grace period is charged per
started day.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from rentals.domain.model.order import RentalOrder
from rentals.domain.ports import LateFeeConfig

# TODO: confirm with product owners whether non-weekly rentals should use
# their real duration as the daily-rate baseline.
DAILY_RATE_BASELINE_DAYS = 7

_ONE_DAY = timedelta(days=1)
_CENTS = Decimal("0.01")


def late_days(planned_end: datetime, returned_at: datetime, grace: timedelta) -> int:
    """Started days of delay beyond the grace period.

    Zero when the return is on time or within the grace period.
    """
    delay = returned_at - planned_end
    if delay <= timedelta(0) or delay <= grace:
        return 0
    delay -= grace
    # ceil without going through float seconds
    return -((-delay) // _ONE_DAY)


def compute_late_fee(
    order: RentalOrder,
    config: LateFeeConfig,
    returned_at: datetime | None = None,
) -> Decimal:
    """Late fee for *order*, rounded to cents.

    *returned_at* defaults to the order's recorded return; an order that
    has not been returned yet owes nothing.
    """
    returned_at = returned_at or order.actual_return_at
    if returned_at is None:
        return Decimal("0.00")

    days = late_days(order.planned_end, returned_at, config.grace_period)
    if days == 0:
        return Decimal("0.00")

    daily = order.total.amount / DAILY_RATE_BASELINE_DAYS
    fee = daily * config.rate * days
    return fee.quantize(_CENTS, rounding=ROUND_HALF_UP)
