"""Typed errors raised by the deduction engine.

Every error carries a machine-readable ``code`` plus the record id and/or
field that caused it, so API and UI callers can report the failing input
without parsing messages.
"""

from __future__ import annotations

from typing import Any


class DeductionEngineError(Exception):
    """Base class for all engine errors."""

    code: str = "ENGINE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        record_id: Any = None,
    ):
        self.message = message
        self.field = field
        self.record_id = record_id
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "detail": self.message,
            "code": self.code,
            "field": self.field,
            "record_id": str(self.record_id) if self.record_id is not None else None,
        }


class ValidationError(DeductionEngineError):
    """Raised for non-positive amounts, bad installment counts and malformed periods."""

    code = "VALIDATION_ERROR"


class NotFoundError(DeductionEngineError):
    """Raised when operating on a missing loan, advance, bill or entry."""

    code = "NOT_FOUND"

    def __init__(self, kind: str, record_id: Any):
        self.kind = kind
        super().__init__(f"{kind} {record_id} not found", record_id=record_id)


class InvalidTransitionError(DeductionEngineError):
    """Raised when a status change is not in the record's transition table."""

    code = "INVALID_TRANSITION"

    def __init__(
        self,
        from_status: str,
        to_status: str,
        reason: str | None = None,
        *,
        record_id: Any = None,
    ):
        self.from_status = getattr(from_status, "value", from_status)
        self.to_status = getattr(to_status, "value", to_status)
        self.reason = reason
        msg = f"Invalid transition from '{self.from_status}' to '{self.to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, field="status", record_id=record_id)


class DuplicatePeriodError(DeductionEngineError):
    """Raised when a second advance or bill is created for the same employee and month."""

    code = "DUPLICATE_PERIOD"

    def __init__(self, kind: str, employee_id: str, month: str, existing_id: Any = None):
        self.kind = kind
        self.employee_id = employee_id
        self.month = month
        super().__init__(
            f"{kind} already exists for employee {employee_id} in {month}",
            field="deduction_month",
            record_id=existing_id,
        )
