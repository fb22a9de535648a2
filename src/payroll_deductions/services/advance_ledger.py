"""Advance ledger: one-shot salary advances deducted in full in one month.

Lifecycle: pending → approved → deducted, or pending → rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select

from payroll_deductions.calculators.money import ZERO, require_positive
from payroll_deductions.calculators.periods import normalize_year_month
from payroll_deductions.exceptions import DuplicatePeriodError, InvalidTransitionError
from payroll_deductions.models import Advance
from payroll_deductions.services.base import LedgerService, require_employee_id
from payroll_deductions.services.state_machine import AdvanceStateMachine, AdvanceStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvanceSummary:
    total_advances: int
    pending_advances: int
    approved_amount: Decimal
    deducted_amount: Decimal


class AdvanceLedger(LedgerService):
    """Owns advance records and their approval/deduction lifecycle."""

    def get_advance(self, advance_id: UUID) -> Advance:
        return self._get_or_raise(Advance, advance_id, "Advance")

    def _open_advance_for(
        self, employee_id: str, month: str, exclude_id: UUID | None = None
    ) -> Advance | None:
        """Any non-rejected advance for the employee and month."""
        query = select(Advance).where(
            Advance.employee_id == employee_id,
            Advance.deduction_month == month,
            Advance.status != AdvanceStatus.REJECTED.value,
        )
        if exclude_id is not None:
            query = query.where(Advance.advance_id != exclude_id)
        return self.session.scalars(query).first()

    def create_advance(
        self,
        employee_id: str,
        amount: Any,
        deduction_month: Any,
        request_date: date | None = None,
        reason: str = "",
    ) -> Advance:
        """Create a pending advance.

        Raises:
            ValidationError: amount not positive or month malformed
            DuplicatePeriodError: employee already has an advance for that month
        """
        employee_id = require_employee_id(employee_id)
        value = require_positive(amount, "amount")
        month = normalize_year_month(deduction_month, "deduction_month")

        existing = self._open_advance_for(employee_id, month)
        if existing is not None:
            raise DuplicatePeriodError("Advance", employee_id, month, existing.advance_id)

        advance = Advance(
            employee_id=employee_id,
            amount=value,
            request_date=request_date or date.today(),
            deduction_month=month,
            status=AdvanceStatus.PENDING.value,
            reason=reason or "",
        )
        self.session.add(advance)
        self.session.flush()
        logger.info(
            "Advance %s requested by %s: %s for %s", advance.advance_id, employee_id, value, month
        )
        return advance

    def update_advance(
        self,
        advance_id: UUID,
        amount: Any = None,
        deduction_month: Any = None,
        reason: str | None = None,
    ) -> Advance:
        """Edit a pending advance."""
        advance = self.get_advance(advance_id)
        if not AdvanceStateMachine.can_edit(advance.status):
            raise InvalidTransitionError(
                advance.status,
                advance.status,
                "only pending advances can be edited",
                record_id=advance.advance_id,
            )

        value = require_positive(amount, "amount") if amount is not None else advance.amount
        month = (
            normalize_year_month(deduction_month, "deduction_month")
            if deduction_month is not None
            else advance.deduction_month
        )
        if month != advance.deduction_month:
            clash = self._open_advance_for(advance.employee_id, month, exclude_id=advance.advance_id)
            if clash is not None:
                raise DuplicatePeriodError("Advance", advance.employee_id, month, clash.advance_id)

        advance.amount = value
        advance.deduction_month = month
        if reason is not None:
            advance.reason = reason
        self.session.flush()
        return advance

    def _transition(self, advance: Advance, to_status: AdvanceStatus) -> Advance:
        AdvanceStateMachine.validate_transition(
            advance.status, to_status, record_id=advance.advance_id
        )
        logger.info("Advance %s: %s -> %s", advance.advance_id, advance.status, to_status.value)
        advance.status = to_status.value
        self.session.flush()
        return advance

    def approve(self, advance_id: UUID) -> Advance:
        return self._transition(self.get_advance(advance_id), AdvanceStatus.APPROVED)

    def reject(self, advance_id: UUID) -> Advance:
        return self._transition(self.get_advance(advance_id), AdvanceStatus.REJECTED)

    def mark_deducted(self, advance_id: UUID) -> Advance:
        """Record that payroll consumed the advance (approved → deducted only)."""
        return self._transition(self.get_advance(advance_id), AdvanceStatus.DEDUCTED)

    def delete(self, advance_id: UUID) -> None:
        advance = self.get_advance(advance_id)
        if advance.status == AdvanceStatus.DEDUCTED.value:
            raise InvalidTransitionError(
                advance.status,
                "deleted",
                "deducted advances are part of a processed payroll",
                record_id=advance.advance_id,
            )
        self.session.delete(advance)
        self.session.flush()
        logger.info("Advance %s deleted", advance_id)

    def get_active_advance_for_month(self, employee_id: str, month: Any) -> Advance | None:
        """The approved advance due for deduction in ``month``, if any."""
        period = normalize_year_month(month)
        return self.session.scalars(
            select(Advance).where(
                Advance.employee_id == employee_id,
                Advance.deduction_month == period,
                Advance.status == AdvanceStatus.APPROVED.value,
            )
        ).first()

    def list_advances(
        self,
        employee_id: str | None = None,
        status: str | None = None,
        month: Any = None,
    ) -> list[Advance]:
        query = select(Advance)
        if employee_id:
            query = query.where(Advance.employee_id == employee_id)
        if status:
            query = query.where(Advance.status == getattr(status, "value", status))
        if month:
            query = query.where(Advance.deduction_month == normalize_year_month(month))
        return list(
            self.session.scalars(query.order_by(Advance.deduction_month, Advance.request_date))
        )

    def advance_summary(self) -> AdvanceSummary:
        advances = self.list_advances()

        def total(status: AdvanceStatus) -> Decimal:
            return sum((a.amount for a in advances if a.status == status.value), ZERO)

        return AdvanceSummary(
            total_advances=len(advances),
            pending_advances=sum(1 for a in advances if a.status == AdvanceStatus.PENDING.value),
            approved_amount=total(AdvanceStatus.APPROVED),
            deducted_amount=total(AdvanceStatus.DEDUCTED),
        )
