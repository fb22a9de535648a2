"""Shared plumbing for ledger services."""

from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy.orm import Session

from payroll_deductions.exceptions import NotFoundError, ValidationError
from payroll_deductions.models import Base

ModelT = TypeVar("ModelT", bound=Base)


def require_employee_id(employee_id: Any) -> str:
    """Validate an employee id supplied by master data."""
    if not isinstance(employee_id, str) or not employee_id.strip():
        raise ValidationError("employee_id is required", field="employee_id")
    return employee_id.strip()


class LedgerService:
    """Base for services that own one record type.

    Services never commit: they flush so constraint violations surface
    immediately, and the caller's session scope decides commit or rollback.
    """

    def __init__(self, session: Session):
        self.session = session

    def _get_or_raise(self, model: type[ModelT], record_id: Any, kind: str) -> ModelT:
        record = self.session.get(model, record_id)
        if record is None:
            raise NotFoundError(kind, record_id)
        return record
