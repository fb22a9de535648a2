"""Uniform issuance API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query, status

from payroll_deductions.api.dependencies import DbSession
from payroll_deductions.api.schemas import (
    ArchiveResponse,
    DepreciationRowResponse,
    ErrorResponse,
    UniformIssue,
    UniformResponse,
)
from payroll_deductions.services.uniform_register import UniformRegister

router = APIRouter(prefix="/uniforms", tags=["uniforms"])


@router.post(
    "",
    response_model=UniformResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
def issue_uniform(db: DbSession, payload: UniformIssue) -> UniformResponse:
    issuance = UniformRegister(db).issue(
        payload.employee_id,
        payload.item_type,
        payload.quantity,
        payload.unit_price,
        payload.delivery_date,
        payload.notes,
    )
    return UniformResponse.model_validate(issuance)


@router.get("", response_model=list[UniformResponse])
def list_uniforms(
    db: DbSession,
    employee_id: Annotated[str | None, Query()] = None,
    include_archived: Annotated[bool, Query()] = False,
) -> list[UniformResponse]:
    items = UniformRegister(db).list_issuances(employee_id, include_archived=include_archived)
    return [UniformResponse.model_validate(item) for item in items]


@router.get("/depreciation", response_model=list[DepreciationRowResponse])
def depreciation_report(
    db: DbSession,
    as_of: Annotated[date | None, Query()] = None,
    employee_id: Annotated[str | None, Query()] = None,
) -> list[DepreciationRowResponse]:
    """Current value of every live issuance as of the given date (default today)."""
    rows = UniformRegister(db).depreciation_report(as_of, employee_id)
    return [DepreciationRowResponse.model_validate(row) for row in rows]


@router.post("/archive", response_model=ArchiveResponse)
def archive_depreciated(
    db: DbSession,
    as_of: Annotated[date | None, Query()] = None,
) -> ArchiveResponse:
    return ArchiveResponse(archived=UniformRegister(db).archive_fully_depreciated(as_of))
