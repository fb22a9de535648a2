"""Loan amortization: split a fixed amount into monthly installments.

Two calculation methods:
- auto: the caller fixes the installment count; the monthly payment is
  ``amount / installments`` kept at full Decimal precision.
- manual: the caller fixes the monthly payment; the count is
  ``ceil(amount / monthly_payment)`` and the final installment carries
  only the remainder.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal
from enum import Enum
from typing import Any

from payroll_deductions.calculators.money import (
    ZERO,
    require_positive,
    require_positive_int,
    to_decimal,
)
from payroll_deductions.exceptions import ValidationError


class CalculationMethod(str, Enum):
    """How a loan's installment plan was derived."""

    AUTO = "auto"
    MANUAL = "manual"


@dataclass(frozen=True)
class LoanPlan:
    """Installment plan for a loan amount."""

    amount: Decimal
    installments: int
    monthly_payment: Decimal
    method: CalculationMethod

    @property
    def final_installment(self) -> Decimal:
        """True amount of the last installment."""
        return installment_amount(
            self.amount, self.monthly_payment, self.installments, self.installments
        )

    def installment_amount(self, number: int) -> Decimal:
        return installment_amount(self.amount, self.monthly_payment, self.installments, number)


def parse_method(value: Any) -> CalculationMethod:
    try:
        return CalculationMethod(getattr(value, "value", value))
    except ValueError:
        raise ValidationError(
            f"calculation_method must be 'auto' or 'manual', got {value!r}",
            field="calculation_method",
        )


def parse_installments(value: Any) -> int:
    """Validate a positive whole installment count."""
    return require_positive_int(value, "installments_count")


def plan_loan(amount: Any, mode: Any, installments_or_monthly: Any) -> LoanPlan:
    """Compute the installment count and monthly payment for a loan.

    Raises:
        ValidationError: amount, installment count or monthly payment is not positive
    """
    method = parse_method(mode)
    total = require_positive(amount, "amount")

    if method == CalculationMethod.AUTO:
        installments = parse_installments(installments_or_monthly)
        monthly = total / Decimal(installments)
    else:
        monthly = require_positive(installments_or_monthly, "monthly_payment")
        installments = int((total / monthly).to_integral_value(rounding=ROUND_CEILING))

    return LoanPlan(
        amount=total,
        installments=installments,
        monthly_payment=monthly,
        method=method,
    )


def installment_amount(
    amount: Decimal, monthly_payment: Decimal, installments: int, number: int
) -> Decimal:
    """Amount due for installment ``number`` (1-based).

    Every installment is a full monthly payment except the last, which is
    whatever remains so the plan never collects more than ``amount``.
    """
    if number < 1 or number > installments:
        return ZERO
    if number == installments:
        return max(amount - monthly_payment * (installments - 1), ZERO)
    return min(monthly_payment, max(amount - monthly_payment * (number - 1), ZERO))
