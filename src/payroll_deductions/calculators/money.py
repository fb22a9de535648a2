"""Decimal helpers for monetary amounts.

Ledger values keep full Decimal precision; only persisted payroll entries and
display values are rounded to cents.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from payroll_deductions.exceptions import ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (half-up)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """Convert user input to Decimal, raising ValidationError if it is not a finite number."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number", field=field)
    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip() if isinstance(value, str) else str(value)
        try:
            result = Decimal(text)
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{field} must be a number, got {value!r}", field=field)
    if not result.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}", field=field)
    return result


def require_positive(value: Any, field: str = "amount") -> Decimal:
    """Convert to Decimal and require a strictly positive value."""
    result = to_decimal(value, field)
    if result <= 0:
        raise ValidationError(f"{field} must be positive, got {result}", field=field)
    return result


def parse_amount(value: Any) -> Decimal | None:
    """Lenient parse used by batch uploads: None for unparsable or non-positive input."""
    try:
        result = to_decimal(value)
    except ValidationError:
        return None
    return result if result > 0 else None


def require_positive_int(value: Any, field: str) -> int:
    """Convert to a strictly positive whole number."""
    count = to_decimal(value, field)
    if count != count.to_integral_value():
        raise ValidationError(f"{field} must be a whole number, got {value!r}", field=field)
    if count <= 0:
        raise ValidationError(f"{field} must be positive, got {count}", field=field)
    return int(count)
