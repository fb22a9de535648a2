"""Loan API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from payroll_deductions.api.dependencies import DbSession
from payroll_deductions.api.schemas import (
    ErrorResponse,
    InstallmentRowResponse,
    LoanCreate,
    LoanEdit,
    LoanResponse,
    LoanScheduleResponse,
    LoanSummaryResponse,
)
from payroll_deductions.services.loan_ledger import LoanLedger

router = APIRouter(prefix="/loans", tags=["loans"])

LoanId = Annotated[UUID, Path(description="Loan ID")]


@router.post(
    "",
    response_model=LoanResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
def create_loan(db: DbSession, payload: LoanCreate) -> LoanResponse:
    """Create an approved loan that starts repaying immediately."""
    loan = LoanLedger(db).create_loan(
        payload.employee_id,
        payload.amount,
        payload.calculation_method,
        payload.plan_param(),
        payload.start_date,
        payload.notes,
    )
    return LoanResponse.model_validate(loan)


@router.post(
    "/requests",
    response_model=LoanResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
def request_loan(db: DbSession, payload: LoanCreate) -> LoanResponse:
    """Submit a loan request awaiting approval."""
    loan = LoanLedger(db).request_loan(
        payload.employee_id,
        payload.amount,
        payload.calculation_method,
        payload.plan_param(),
        payload.start_date,
        payload.notes,
    )
    return LoanResponse.model_validate(loan)


@router.get("", response_model=list[LoanResponse])
def list_loans(
    db: DbSession,
    employee_id: Annotated[str | None, Query()] = None,
    loan_status: Annotated[str | None, Query(alias="status")] = None,
) -> list[LoanResponse]:
    loans = LoanLedger(db).list_loans(employee_id=employee_id, status=loan_status)
    return [LoanResponse.model_validate(loan) for loan in loans]


@router.get("/summary", response_model=LoanSummaryResponse)
def loan_summary(db: DbSession) -> LoanSummaryResponse:
    return LoanSummaryResponse.model_validate(LoanLedger(db).loan_summary())


@router.get(
    "/{loan_id}",
    response_model=LoanResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_loan(db: DbSession, loan_id: LoanId) -> LoanResponse:
    return LoanResponse.model_validate(LoanLedger(db).get_loan(loan_id))


@router.put(
    "/{loan_id}",
    response_model=LoanResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def edit_loan(db: DbSession, loan_id: LoanId, payload: LoanEdit) -> LoanResponse:
    """Re-plan a loan, keeping the payments already recorded."""
    loan = LoanLedger(db).edit_loan(
        loan_id, payload.amount, payload.calculation_method, payload.plan_param()
    )
    return LoanResponse.model_validate(loan)


@router.post(
    "/{loan_id}/approve",
    response_model=LoanResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def approve_loan(db: DbSession, loan_id: LoanId) -> LoanResponse:
    return LoanResponse.model_validate(LoanLedger(db).approve_loan(loan_id))


@router.post(
    "/{loan_id}/reject",
    response_model=LoanResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def reject_loan(db: DbSession, loan_id: LoanId) -> LoanResponse:
    return LoanResponse.model_validate(LoanLedger(db).reject_loan(loan_id))


@router.post(
    "/{loan_id}/payments",
    response_model=LoanResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def record_payment(db: DbSession, loan_id: LoanId) -> LoanResponse:
    """Record the next installment as paid."""
    return LoanResponse.model_validate(LoanLedger(db).record_payment(loan_id))


@router.get(
    "/{loan_id}/schedule",
    response_model=LoanScheduleResponse,
    responses={404: {"model": ErrorResponse}},
)
def loan_schedule(db: DbSession, loan_id: LoanId) -> LoanScheduleResponse:
    ledger = LoanLedger(db)
    schedule = ledger.list_installment_schedule(ledger.get_loan(loan_id))
    return LoanScheduleResponse(
        loan_id=loan_id,
        rows=[InstallmentRowResponse.model_validate(row) for row in schedule],
    )


@router.delete(
    "/{loan_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def delete_loan(db: DbSession, loan_id: LoanId) -> None:
    LoanLedger(db).delete_loan(loan_id)
