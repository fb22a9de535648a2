"""Mobile bill batch API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from payroll_deductions.api.dependencies import DbSession
from payroll_deductions.api.schemas import (
    ErrorResponse,
    MobileBillCsvUpload,
    MobileBillResponse,
    MobileBillUpload,
    UploadResultResponse,
)
from payroll_deductions.services.mobile_bill_batch import MobileBillBatch

router = APIRouter(prefix="/mobile-bills", tags=["mobile-bills"])

MobileBillId = Annotated[UUID, Path(description="Mobile bill ID")]


@router.post(
    "/upload",
    response_model=UploadResultResponse,
    responses={422: {"model": ErrorResponse}},
)
def upload_bills(db: DbSession, payload: MobileBillUpload) -> UploadResultResponse:
    """Merge a month's bills; invalid rows are counted as skipped."""
    rows = [(row.employee_id, row.amount) for row in payload.rows]
    result = MobileBillBatch(db).upload(rows, payload.deduction_month)
    return UploadResultResponse.model_validate(result)


@router.post(
    "/upload-csv",
    response_model=UploadResultResponse,
    responses={422: {"model": ErrorResponse}},
)
def upload_bills_csv(db: DbSession, payload: MobileBillCsvUpload) -> UploadResultResponse:
    result = MobileBillBatch(db).upload_csv(payload.csv_text, payload.deduction_month)
    return UploadResultResponse.model_validate(result)


@router.get("", response_model=list[MobileBillResponse])
def list_bills(
    db: DbSession,
    month: Annotated[str | None, Query()] = None,
    bill_status: Annotated[str | None, Query(alias="status")] = None,
    employee_id: Annotated[str | None, Query()] = None,
) -> list[MobileBillResponse]:
    bills = MobileBillBatch(db).list_bills(month=month, status=bill_status, employee_id=employee_id)
    return [MobileBillResponse.model_validate(bill) for bill in bills]


@router.post(
    "/{mobile_bill_id}/deduct",
    response_model=MobileBillResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def deduct_bill(db: DbSession, mobile_bill_id: MobileBillId) -> MobileBillResponse:
    return MobileBillResponse.model_validate(MobileBillBatch(db).mark_deducted(mobile_bill_id))


@router.delete(
    "/{mobile_bill_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def delete_bill(db: DbSession, mobile_bill_id: MobileBillId) -> None:
    MobileBillBatch(db).delete(mobile_bill_id)
