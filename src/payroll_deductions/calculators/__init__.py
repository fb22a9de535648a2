"""Pure calculators for amortization, depreciation and payroll components."""

from payroll_deductions.calculators.amortization import (
    CalculationMethod,
    LoanPlan,
    installment_amount,
    plan_loan,
)
from payroll_deductions.calculators.components import (
    BonusType,
    PenaltyType,
    leave_deduction_for,
    resolve_bonus,
    resolve_penalty,
)
from payroll_deductions.calculators.depreciation import (
    current_value,
    depreciation_percent,
    is_fully_depreciated,
)
from payroll_deductions.calculators.money import round_to_cents

__all__ = [
    "BonusType",
    "CalculationMethod",
    "LoanPlan",
    "PenaltyType",
    "current_value",
    "depreciation_percent",
    "installment_amount",
    "is_fully_depreciated",
    "leave_deduction_for",
    "plan_loan",
    "resolve_bonus",
    "resolve_penalty",
    "round_to_cents",
]
