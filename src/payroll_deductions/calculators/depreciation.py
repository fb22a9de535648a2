"""Step-wise depreciation for uniform and equipment issuances.

Value remaining by whole months since delivery:

    months   remaining
    0-2      100%
    3-5       75%
    6-8       50%
    9-11      25%
    12+        0%
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from payroll_deductions.calculators.periods import months_between

# (minimum elapsed months, percent remaining), checked in order
DEPRECIATION_STEPS: tuple[tuple[int, int], ...] = (
    (12, 0),
    (9, 25),
    (6, 50),
    (3, 75),
)
FULL_VALUE_PERCENT = 100


def depreciation_percent(delivery_date: date, now: date | None = None) -> int:
    """Percent of the original value remaining at ``now``."""
    now = now or date.today()
    elapsed = months_between(delivery_date, now)
    for min_months, percent in DEPRECIATION_STEPS:
        if elapsed >= min_months:
            return percent
    return FULL_VALUE_PERCENT


def current_value(total_price: Decimal, delivery_date: date, now: date | None = None) -> Decimal:
    """Counted value of an issuance at ``now``."""
    return total_price * Decimal(depreciation_percent(delivery_date, now)) / Decimal(100)


def is_fully_depreciated(delivery_date: date, now: date | None = None) -> bool:
    return depreciation_percent(delivery_date, now) == 0
