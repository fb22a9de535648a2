"""Salary advance API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from payroll_deductions.api.dependencies import DbSession
from payroll_deductions.api.schemas import (
    AdvanceCreate,
    AdvanceResponse,
    AdvanceSummaryResponse,
    ErrorResponse,
)
from payroll_deductions.services.advance_ledger import AdvanceLedger

router = APIRouter(prefix="/advances", tags=["advances"])

AdvanceId = Annotated[UUID, Path(description="Advance ID")]


@router.post(
    "",
    response_model=AdvanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def create_advance(db: DbSession, payload: AdvanceCreate) -> AdvanceResponse:
    advance = AdvanceLedger(db).create_advance(
        payload.employee_id,
        payload.amount,
        payload.deduction_month,
        request_date=payload.request_date,
        reason=payload.reason,
    )
    return AdvanceResponse.model_validate(advance)


@router.get("", response_model=list[AdvanceResponse])
def list_advances(
    db: DbSession,
    employee_id: Annotated[str | None, Query()] = None,
    advance_status: Annotated[str | None, Query(alias="status")] = None,
    month: Annotated[str | None, Query()] = None,
) -> list[AdvanceResponse]:
    advances = AdvanceLedger(db).list_advances(
        employee_id=employee_id, status=advance_status, month=month
    )
    return [AdvanceResponse.model_validate(a) for a in advances]


@router.get("/summary", response_model=AdvanceSummaryResponse)
def advance_summary(db: DbSession) -> AdvanceSummaryResponse:
    return AdvanceSummaryResponse.model_validate(AdvanceLedger(db).advance_summary())


@router.post(
    "/{advance_id}/approve",
    response_model=AdvanceResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def approve_advance(db: DbSession, advance_id: AdvanceId) -> AdvanceResponse:
    return AdvanceResponse.model_validate(AdvanceLedger(db).approve(advance_id))


@router.post(
    "/{advance_id}/reject",
    response_model=AdvanceResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def reject_advance(db: DbSession, advance_id: AdvanceId) -> AdvanceResponse:
    return AdvanceResponse.model_validate(AdvanceLedger(db).reject(advance_id))


@router.post(
    "/{advance_id}/deduct",
    response_model=AdvanceResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def deduct_advance(db: DbSession, advance_id: AdvanceId) -> AdvanceResponse:
    """Mark an approved advance as taken by payroll outside a payroll run."""
    return AdvanceResponse.model_validate(AdvanceLedger(db).mark_deducted(advance_id))


@router.delete(
    "/{advance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def delete_advance(db: DbSession, advance_id: AdvanceId) -> None:
    AdvanceLedger(db).delete(advance_id)
