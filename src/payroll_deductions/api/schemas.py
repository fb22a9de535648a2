"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Plain notation in JSON ("100", not "1E+2") without losing precision
Money = Annotated[
    Decimal, PlainSerializer(lambda v: format(v, "f"), return_type=str, when_used="json")
]


# ============================================================================
# Loan schemas
# ============================================================================


class LoanCreate(BaseModel):
    """Schema for creating a loan or a loan request."""

    employee_id: str
    amount: Decimal
    calculation_method: str = "auto"
    installments_count: int | None = None
    monthly_payment: Decimal | None = None
    start_date: str
    notes: str = ""

    def plan_param(self) -> Any:
        if self.calculation_method == "manual":
            return self.monthly_payment
        return self.installments_count


class LoanEdit(BaseModel):
    """Schema for editing a loan's amount and plan."""

    amount: Decimal
    calculation_method: str = "auto"
    installments_count: int | None = None
    monthly_payment: Decimal | None = None

    def plan_param(self) -> Any:
        if self.calculation_method == "manual":
            return self.monthly_payment
        return self.installments_count


class LoanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    loan_id: UUID
    employee_id: str
    amount: Money
    installments_count: int
    monthly_payment: Money
    paid_installments: int
    paid_amount: Money
    remaining_amount: Money
    start_date: str
    status: str
    calculation_method: str
    notes: str


class InstallmentRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    number: int
    period_label: str
    amount: Money
    cumulative_paid: Money
    remaining: Money
    status: str


class LoanScheduleResponse(BaseModel):
    loan_id: UUID
    rows: list[InstallmentRowResponse]


class LoanSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_loans: int
    active_loans: int
    pending_loans: int
    completed_loans: int
    outstanding_amount: Money


# ============================================================================
# Advance schemas
# ============================================================================


class AdvanceCreate(BaseModel):
    employee_id: str
    amount: Decimal
    deduction_month: str
    request_date: date | None = None
    reason: str = ""


class AdvanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    advance_id: UUID
    employee_id: str
    amount: Money
    request_date: date
    deduction_month: str
    status: str
    reason: str


class AdvanceSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_advances: int
    pending_advances: int
    approved_amount: Money
    deducted_amount: Money


# ============================================================================
# Mobile bill schemas
# ============================================================================


class MobileBillRow(BaseModel):
    employee_id: str | None = None
    amount: Any = None


class MobileBillUpload(BaseModel):
    deduction_month: str
    rows: list[MobileBillRow]


class MobileBillCsvUpload(BaseModel):
    deduction_month: str
    csv_text: str


class UploadResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    batch_id: str
    added: int
    updated: int
    skipped: int
    processed: int


class MobileBillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mobile_bill_id: UUID
    employee_id: str
    amount: Money
    deduction_month: str
    status: str
    batch_id: str
    upload_date: date


# ============================================================================
# Uniform schemas
# ============================================================================


class UniformIssue(BaseModel):
    employee_id: str
    item_type: str
    quantity: int
    unit_price: Decimal
    delivery_date: date
    notes: str = ""


class UniformResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uniform_issuance_id: UUID
    employee_id: str
    item_type: str
    quantity: int
    unit_price: Money
    total_price: Money
    delivery_date: date
    notes: str
    archived_at: datetime | None = None


class DepreciationRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uniform_issuance_id: UUID
    employee_id: str
    item_type: str
    quantity: int
    total_price: Money
    delivery_date: date
    months_elapsed: int
    percent_remaining: int
    current_value: Money
    depreciation_amount: Money


class ArchiveResponse(BaseModel):
    archived: int


# ============================================================================
# Training schemas
# ============================================================================


class CourseCompletionRequest(BaseModel):
    employee_id: str
    course_name: str
    cost: Decimal = Decimal("0")
    actual_date: date


class TrainingDebtResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    training_debt_id: UUID
    employee_id: str
    course_name: str
    cost: Money
    actual_date: date
    expiry_date: date


class CourseCompletionResponse(BaseModel):
    employee_id: str
    course_name: str
    actual_date: date
    debt: TrainingDebtResponse | None = None
    debt_created: bool


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollRunRequest(BaseModel):
    """Manual payroll inputs for one employee and month."""

    employee_id: str
    month: int = Field(ge=1, le=12)
    year: int
    basic_salary: Decimal = Decimal("0")
    transport_allowance: Decimal = Decimal("0")
    incentives: Decimal = Decimal("0")
    station_allowance: Decimal = Decimal("0")
    mobile_allowance: Decimal = Decimal("0")
    living_allowance: Decimal = Decimal("0")
    overtime_pay: Decimal = Decimal("0")
    bonus_amount: Decimal = Decimal("0")
    employee_insurance: Decimal = Decimal("0")
    leave_days: Decimal = Decimal("0")
    leave_deduction: Decimal | None = None
    penalty_amount: Decimal = Decimal("0")
    employer_social_insurance: Decimal = Decimal("0")
    health_insurance: Decimal = Decimal("0")
    income_tax: Decimal = Decimal("0")


class PayrollEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payroll_entry_id: UUID
    employee_id: str
    month: int
    year: int
    basic_salary: Money
    transport_allowance: Money
    incentives: Money
    station_allowance: Money
    mobile_allowance: Money
    living_allowance: Money
    overtime_pay: Money
    bonus_amount: Money
    gross: Money
    employee_insurance: Money
    loan_payment: Money
    advance_amount: Money
    mobile_bill: Money
    leave_days: Money
    leave_deduction: Money
    penalty_amount: Money
    total_deductions: Money
    net_salary: Money
    total_earnings: Money
    employer_social_insurance: Money
    health_insurance: Money
    income_tax: Money
    advance_id: UUID | None = None
    mobile_bill_id: UUID | None = None
    processed_at: datetime | None = None


class PayrollSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    year: int
    headcount: int
    total_gross: Money
    total_bonus: Money
    total_deductions: Money
    total_net: Money
    total_loan_payments: Money
    total_advances: Money
    total_mobile_bills: Money
    total_employer_contributions: Money


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    field: str | None = None
    record_id: str | None = None
