"""Deduction engine services."""

from payroll_deductions.services.advance_ledger import AdvanceLedger, AdvanceSummary
from payroll_deductions.services.loan_ledger import (
    InstallmentRow,
    InstallmentSchedule,
    InstallmentStatus,
    LoanLedger,
    LoanSummary,
)
from payroll_deductions.services.mobile_bill_batch import MobileBillBatch, UploadResult
from payroll_deductions.services.payroll_service import (
    PayrollInputs,
    PayrollMonthSummary,
    PayrollRunResult,
    PayrollService,
)
from payroll_deductions.services.state_machine import (
    AdvanceStateMachine,
    AdvanceStatus,
    LoanStateMachine,
    LoanStatus,
    MobileBillStateMachine,
    MobileBillStatus,
)
from payroll_deductions.services.training_debt_ledger import CourseCompletion, TrainingDebtLedger
from payroll_deductions.services.uniform_register import DepreciationRow, UniformRegister

__all__ = [
    "AdvanceLedger",
    "AdvanceStateMachine",
    "AdvanceStatus",
    "AdvanceSummary",
    "CourseCompletion",
    "DepreciationRow",
    "InstallmentRow",
    "InstallmentSchedule",
    "InstallmentStatus",
    "LoanLedger",
    "LoanStateMachine",
    "LoanStatus",
    "LoanSummary",
    "MobileBillBatch",
    "MobileBillStateMachine",
    "MobileBillStatus",
    "PayrollInputs",
    "PayrollMonthSummary",
    "PayrollRunResult",
    "PayrollService",
    "TrainingDebtLedger",
    "UniformRegister",
    "UploadResult",
]
