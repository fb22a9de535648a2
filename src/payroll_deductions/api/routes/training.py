"""Training debt API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query

from payroll_deductions.api.dependencies import DbSession
from payroll_deductions.api.schemas import (
    CourseCompletionRequest,
    CourseCompletionResponse,
    ErrorResponse,
    TrainingDebtResponse,
)
from payroll_deductions.services.training_debt_ledger import TrainingDebtLedger

router = APIRouter(prefix="/training", tags=["training"])


@router.post(
    "/courses",
    response_model=CourseCompletionResponse,
    responses={422: {"model": ErrorResponse}},
)
def record_actual_course(
    db: DbSession, payload: CourseCompletionRequest
) -> CourseCompletionResponse:
    """Record the date a course was taken; creates its debt the first time."""
    completion = TrainingDebtLedger(db).record_actual_course(
        payload.employee_id, payload.course_name, payload.cost, payload.actual_date
    )
    return CourseCompletionResponse(
        employee_id=completion.assignment.employee_id,
        course_name=completion.assignment.course_name,
        actual_date=completion.assignment.actual_date,
        debt=(
            TrainingDebtResponse.model_validate(completion.debt)
            if completion.debt is not None
            else None
        ),
        debt_created=completion.debt_created,
    )


@router.get("/debts", response_model=list[TrainingDebtResponse])
def list_debts(
    db: DbSession,
    employee_id: Annotated[str | None, Query()] = None,
    as_of: Annotated[date | None, Query()] = None,
) -> list[TrainingDebtResponse]:
    """Active (unexpired) debts, or every debt of one employee."""
    ledger = TrainingDebtLedger(db)
    debts = ledger.debts_for_employee(employee_id) if employee_id else ledger.active_debts(as_of)
    return [TrainingDebtResponse.model_validate(debt) for debt in debts]
