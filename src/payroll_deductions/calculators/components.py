"""Helpers that turn attendance and bonus inputs into payroll amounts.

These cover the monthly manual entries of the payroll screen: a bonus given
as an amount or a percentage of basic salary, a penalty given as an amount,
a number of days, or a percentage, and the deduction for unpaid leave days.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any

from payroll_deductions.calculators.money import ZERO, round_to_cents, to_decimal
from payroll_deductions.exceptions import ValidationError

DEFAULT_WORK_DAYS = 30


class BonusType(str, Enum):
    AMOUNT = "amount"
    PERCENTAGE = "percentage"


class PenaltyType(str, Enum):
    AMOUNT = "amount"
    DAYS = "days"
    PERCENTAGE = "percentage"


def _non_negative(value: Any, field: str) -> Decimal:
    result = to_decimal(value, field)
    if result < 0:
        raise ValidationError(f"{field} must not be negative, got {result}", field=field)
    return result


def resolve_bonus(basic_salary: Decimal, kind: str | BonusType, value: Any) -> Decimal:
    """Bonus amount for a fixed value or a percentage of basic salary."""
    amount = _non_negative(value, "bonus_value")
    try:
        bonus_type = BonusType(getattr(kind, "value", kind))
    except ValueError:
        raise ValidationError(f"unknown bonus type {kind!r}", field="bonus_type")

    if bonus_type == BonusType.PERCENTAGE:
        return round_to_cents(basic_salary * amount / Decimal(100))
    return round_to_cents(amount)


def resolve_penalty(
    basic_salary: Decimal,
    kind: str | PenaltyType,
    value: Any,
    work_days_per_month: int = DEFAULT_WORK_DAYS,
) -> Decimal:
    """Penalty amount for a fixed value, a number of salary days, or a percentage."""
    amount = _non_negative(value, "penalty_value")
    try:
        penalty_type = PenaltyType(getattr(kind, "value", kind))
    except ValueError:
        raise ValidationError(f"unknown penalty type {kind!r}", field="penalty_type")

    if penalty_type == PenaltyType.DAYS:
        return round_to_cents(basic_salary / Decimal(work_days_per_month) * amount)
    if penalty_type == PenaltyType.PERCENTAGE:
        return round_to_cents(basic_salary * amount / Decimal(100))
    return round_to_cents(amount)


def leave_deduction_for(
    gross: Decimal, leave_days: Any, work_days_per_month: int = DEFAULT_WORK_DAYS
) -> Decimal:
    """Deduction for unpaid leave: a day's gross pay per leave day."""
    days = _non_negative(leave_days, "leave_days")
    if days == 0:
        return ZERO
    return round_to_cents(gross / Decimal(work_days_per_month) * days)
