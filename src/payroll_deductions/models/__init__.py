"""ORM models for the deduction engine."""

from payroll_deductions.models.assets import UniformIssuance
from payroll_deductions.models.base import Base, ExactDecimal, TimestampMixin
from payroll_deductions.models.charges import MobileBill
from payroll_deductions.models.loans import Advance, Loan
from payroll_deductions.models.payroll import PayrollEntry
from payroll_deductions.models.training import CourseAssignment, TrainingDebt

__all__ = [
    "Advance",
    "Base",
    "CourseAssignment",
    "ExactDecimal",
    "Loan",
    "MobileBill",
    "PayrollEntry",
    "TimestampMixin",
    "TrainingDebt",
    "UniformIssuance",
]
