"""Status state machines for loans, advances and mobile bills."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from payroll_deductions.exceptions import InvalidTransitionError


class LoanStatus(str, Enum):
    """Loan status values."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    REJECTED = "rejected"


class AdvanceStatus(str, Enum):
    """Advance status values."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DEDUCTED = "deducted"


class MobileBillStatus(str, Enum):
    """Mobile bill status values."""

    PENDING = "pending"
    DEDUCTED = "deducted"


def _value(status: Any) -> str:
    return getattr(status, "value", status)


class StatusStateMachine:
    """Transition table lookup shared by the ledger state machines.

    Subclasses define ``VALID_TRANSITIONS`` as ``{from_status: [to_statuses]}``.
    """

    VALID_TRANSITIONS: ClassVar[dict[str, list[str]]] = {}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(_value(from_status), [])
        return _value(to_status) in [_value(s) for s in allowed]

    @classmethod
    def validate_transition(
        cls, from_status: str, to_status: str, record_id: Any = None
    ) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status, record_id=record_id)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return [_value(s) for s in cls.VALID_TRANSITIONS.get(_value(current_status), [])]

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(_value(status))


class LoanStateMachine(StatusStateMachine):
    """Loan lifecycle.

    Allowed transitions:
    - pending → active (approval)
    - pending → rejected
    - active → completed (final installment paid)
    - completed → active (an edit raises the amount above what was paid)
    """

    VALID_TRANSITIONS = {
        LoanStatus.PENDING.value: [LoanStatus.ACTIVE, LoanStatus.REJECTED],
        LoanStatus.ACTIVE.value: [LoanStatus.COMPLETED],
        LoanStatus.COMPLETED.value: [LoanStatus.ACTIVE],
        LoanStatus.REJECTED.value: [],  # Terminal state
    }

    # Statuses in which installments can be paid
    PAYABLE = {LoanStatus.ACTIVE.value, LoanStatus.COMPLETED.value}

    @classmethod
    def can_record_payment(cls, status: str) -> bool:
        return _value(status) in cls.PAYABLE


class AdvanceStateMachine(StatusStateMachine):
    """Advance lifecycle.

    Allowed transitions:
    - pending → approved
    - pending → rejected
    - approved → deducted
    """

    VALID_TRANSITIONS = {
        AdvanceStatus.PENDING.value: [AdvanceStatus.APPROVED, AdvanceStatus.REJECTED],
        AdvanceStatus.APPROVED.value: [AdvanceStatus.DEDUCTED],
        AdvanceStatus.REJECTED.value: [],  # Terminal state
        AdvanceStatus.DEDUCTED.value: [],  # Terminal state
    }

    # Statuses where amount and month can still be edited
    EDITABLE = {AdvanceStatus.PENDING.value}

    @classmethod
    def can_edit(cls, status: str) -> bool:
        return _value(status) in cls.EDITABLE


class MobileBillStateMachine(StatusStateMachine):
    """Mobile bill lifecycle: pending → deducted."""

    VALID_TRANSITIONS = {
        MobileBillStatus.PENDING.value: [MobileBillStatus.DEDUCTED],
        MobileBillStatus.DEDUCTED.value: [],  # Terminal state
    }
