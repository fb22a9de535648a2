"""Monthly payroll API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from payroll_deductions.api.dependencies import DbSession
from payroll_deductions.api.schemas import (
    ErrorResponse,
    PayrollEntryResponse,
    PayrollRunRequest,
    PayrollSummaryResponse,
)
from payroll_deductions.services.payroll_service import PayrollInputs, PayrollService

router = APIRouter(prefix="/payroll", tags=["payroll"])

Month = Annotated[int, Query(ge=1, le=12)]


@router.post(
    "/run",
    response_model=PayrollEntryResponse,
    responses={422: {"model": ErrorResponse}},
)
def run_payroll(db: DbSession, payload: PayrollRunRequest) -> PayrollEntryResponse:
    """Process (or reprocess) one employee's payroll for a month."""
    inputs = PayrollInputs(**payload.model_dump(exclude={"employee_id", "month", "year"}))
    entry = PayrollService(db).run_payroll(payload.employee_id, payload.month, payload.year, inputs)
    return PayrollEntryResponse.model_validate(entry)


@router.get("", response_model=list[PayrollEntryResponse])
def monthly_payroll(db: DbSession, month: Month, year: int) -> list[PayrollEntryResponse]:
    entries = PayrollService(db).monthly_payroll(month, year)
    return [PayrollEntryResponse.model_validate(entry) for entry in entries]


@router.get("/summary", response_model=PayrollSummaryResponse)
def monthly_summary(db: DbSession, month: Month, year: int) -> PayrollSummaryResponse:
    return PayrollSummaryResponse.model_validate(PayrollService(db).monthly_summary(month, year))


@router.get("/employees/{employee_id}", response_model=list[PayrollEntryResponse])
def employee_history(
    db: DbSession, employee_id: Annotated[str, Path()]
) -> list[PayrollEntryResponse]:
    entries = PayrollService(db).employee_history(employee_id)
    return [PayrollEntryResponse.model_validate(entry) for entry in entries]


@router.get(
    "/employees/{employee_id}/{year}/{month}",
    response_model=PayrollEntryResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_entry(
    db: DbSession,
    employee_id: Annotated[str, Path()],
    year: Annotated[int, Path()],
    month: Annotated[int, Path(ge=1, le=12)],
) -> PayrollEntryResponse:
    return PayrollEntryResponse.model_validate(PayrollService(db).get_entry(employee_id, month, year))
