"""Loan ledger: loan records, installment payments and remaining balance.

Invariants maintained on every mutation:
- 0 <= paid_amount <= amount
- remaining_amount == max(amount - paid_amount, 0)
- status == completed iff paid_installments >= installments_count

The final installment collects only the true remainder, so uneven plans
(manual mode, or auto mode with a non-terminating division) never overpay.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import select

from payroll_deductions.calculators.amortization import installment_amount, plan_loan
from payroll_deductions.calculators.money import ZERO
from payroll_deductions.calculators.periods import add_months, normalize_year_month
from payroll_deductions.exceptions import InvalidTransitionError, ValidationError
from payroll_deductions.models import Loan
from payroll_deductions.services.base import LedgerService, require_employee_id
from payroll_deductions.services.state_machine import LoanStateMachine, LoanStatus

logger = logging.getLogger(__name__)


class InstallmentStatus(str, Enum):
    PAID = "paid"
    CURRENT = "current"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class InstallmentRow:
    """One row of a loan's installment schedule."""

    number: int
    period_label: str
    amount: Decimal
    cumulative_paid: Decimal
    remaining: Decimal
    status: InstallmentStatus


class InstallmentSchedule:
    """Lazy, finite, restartable installment schedule.

    Captures the loan's figures when created; every iteration regenerates
    the rows from that snapshot.
    """

    def __init__(
        self,
        amount: Decimal,
        monthly_payment: Decimal,
        installments_count: int,
        paid_installments: int,
        start_date: str,
    ):
        self.amount = amount
        self.monthly_payment = monthly_payment
        self.installments_count = installments_count
        self.paid_installments = paid_installments
        self.start_date = start_date

    @classmethod
    def from_loan(cls, loan: Loan) -> InstallmentSchedule:
        return cls(
            amount=loan.amount,
            monthly_payment=loan.monthly_payment,
            installments_count=loan.installments_count,
            paid_installments=loan.paid_installments,
            start_date=loan.start_date,
        )

    def __len__(self) -> int:
        return self.installments_count

    def __iter__(self) -> Iterator[InstallmentRow]:
        for number in range(1, self.installments_count + 1):
            yield self.row(number)

    def row(self, number: int) -> InstallmentRow:
        if number < 1 or number > self.installments_count:
            raise IndexError(f"installment {number} out of range 1..{self.installments_count}")

        if number <= self.paid_installments:
            status = InstallmentStatus.PAID
        elif number == self.paid_installments + 1:
            status = InstallmentStatus.CURRENT
        else:
            status = InstallmentStatus.UPCOMING

        scheduled = self.monthly_payment * number
        return InstallmentRow(
            number=number,
            period_label=add_months(self.start_date, number - 1),
            amount=installment_amount(
                self.amount, self.monthly_payment, self.installments_count, number
            ),
            cumulative_paid=min(scheduled, self.amount),
            remaining=max(self.amount - scheduled, ZERO),
            status=status,
        )


@dataclass(frozen=True)
class LoanSummary:
    """Headline loan figures for the loans overview."""

    total_loans: int
    active_loans: int
    pending_loans: int
    completed_loans: int
    outstanding_amount: Decimal


def next_payment(loan: Loan) -> Decimal:
    """Amount the next installment collects: a full payment, capped at the remainder.

    The final installment always settles exactly what is left.
    """
    if loan.paid_installments >= loan.installments_count:
        return ZERO
    outstanding = max(loan.amount - loan.paid_amount, ZERO)
    if loan.paid_installments + 1 == loan.installments_count:
        return outstanding
    return min(loan.monthly_payment, outstanding)


class LoanLedger(LedgerService):
    """Owns loan records and their repayment lifecycle."""

    def get_loan(self, loan_id: UUID) -> Loan:
        return self._get_or_raise(Loan, loan_id, "Loan")

    def create_loan(
        self,
        employee_id: str,
        amount: Any,
        mode: Any,
        param: Any,
        start_date: Any,
        notes: str = "",
    ) -> Loan:
        """Create an approved, active loan."""
        return self._build_loan(
            employee_id, amount, mode, param, start_date, notes, LoanStatus.ACTIVE
        )

    def request_loan(
        self,
        employee_id: str,
        amount: Any,
        mode: Any,
        param: Any,
        start_date: Any,
        notes: str = "",
    ) -> Loan:
        """Create a loan request awaiting approval."""
        return self._build_loan(
            employee_id, amount, mode, param, start_date, notes, LoanStatus.PENDING
        )

    def _build_loan(
        self,
        employee_id: str,
        amount: Any,
        mode: Any,
        param: Any,
        start_date: Any,
        notes: str,
        status: LoanStatus,
    ) -> Loan:
        employee_id = require_employee_id(employee_id)
        plan = plan_loan(amount, mode, param)
        start = normalize_year_month(start_date, "start_date")

        loan = Loan(
            employee_id=employee_id,
            amount=plan.amount,
            installments_count=plan.installments,
            monthly_payment=plan.monthly_payment,
            paid_installments=0,
            paid_amount=ZERO,
            remaining_amount=plan.amount,
            start_date=start,
            status=status.value,
            calculation_method=plan.method.value,
            notes=notes or "",
        )
        self.session.add(loan)
        self.session.flush()

        logger.info(
            "Loan %s created for %s: %s over %d installments (%s)",
            loan.loan_id,
            employee_id,
            plan.amount,
            plan.installments,
            status.value,
        )
        return loan

    def _transition(self, loan: Loan, to_status: LoanStatus) -> None:
        LoanStateMachine.validate_transition(loan.status, to_status, record_id=loan.loan_id)
        logger.info("Loan %s: %s -> %s", loan.loan_id, loan.status, to_status.value)
        loan.status = to_status.value

    def approve_loan(self, loan_id: UUID) -> Loan:
        loan = self.get_loan(loan_id)
        self._transition(loan, LoanStatus.ACTIVE)
        self.session.flush()
        return loan

    def reject_loan(self, loan_id: UUID) -> Loan:
        loan = self.get_loan(loan_id)
        self._transition(loan, LoanStatus.REJECTED)
        self.session.flush()
        return loan

    def record_payment(self, loan_id: UUID) -> Loan:
        """Record one installment payment.

        A fully paid loan is returned unchanged, so a double submission
        cannot overpay.

        Raises:
            NotFoundError: loan does not exist
            InvalidTransitionError: loan is pending or rejected
        """
        loan = self.get_loan(loan_id)
        if loan.paid_installments >= loan.installments_count:
            return loan
        if not LoanStateMachine.can_record_payment(loan.status):
            raise InvalidTransitionError(
                loan.status,
                LoanStatus.COMPLETED,
                "payments can only be recorded against an active loan",
                record_id=loan.loan_id,
            )

        payment = next_payment(loan)
        loan.paid_installments += 1
        loan.paid_amount = loan.paid_amount + payment
        loan.remaining_amount = max(loan.amount - loan.paid_amount, ZERO)

        logger.info(
            "Loan %s: installment %d/%d paid (%s), remaining %s",
            loan.loan_id,
            loan.paid_installments,
            loan.installments_count,
            payment,
            loan.remaining_amount,
        )

        if loan.paid_installments >= loan.installments_count:
            self._transition(loan, LoanStatus.COMPLETED)

        self.session.flush()
        return loan

    def edit_loan(self, loan_id: UUID, new_amount: Any, new_mode: Any, new_param: Any) -> Loan:
        """Re-plan a loan, keeping its payment history.

        Raises:
            ValidationError: new plan is invalid or would not exceed what was already paid
            InvalidTransitionError: loan was rejected
        """
        loan = self.get_loan(loan_id)
        if loan.status == LoanStatus.REJECTED.value:
            raise InvalidTransitionError(
                loan.status, loan.status, "rejected loans cannot be edited", record_id=loan.loan_id
            )

        plan = plan_loan(new_amount, new_mode, new_param)
        if loan.paid_installments > 0 and plan.amount <= loan.paid_amount:
            raise ValidationError(
                f"amount {plan.amount} must exceed the {loan.paid_amount} already paid",
                field="amount",
                record_id=loan.loan_id,
            )
        if plan.installments <= loan.paid_installments:
            raise ValidationError(
                f"plan of {plan.installments} installments does not exceed the "
                f"{loan.paid_installments} already paid",
                field="installments_count",
                record_id=loan.loan_id,
            )

        loan.amount = plan.amount
        loan.installments_count = plan.installments
        loan.monthly_payment = plan.monthly_payment
        loan.calculation_method = plan.method.value
        loan.remaining_amount = plan.amount - loan.paid_amount

        if loan.status == LoanStatus.COMPLETED.value:
            self._transition(loan, LoanStatus.ACTIVE)

        self.session.flush()
        logger.info(
            "Loan %s re-planned: %s over %d installments, remaining %s",
            loan.loan_id,
            plan.amount,
            plan.installments,
            loan.remaining_amount,
        )
        return loan

    def delete_loan(self, loan_id: UUID) -> None:
        """Delete a loan that has no repayment history."""
        loan = self.get_loan(loan_id)
        if loan.status == LoanStatus.COMPLETED.value or loan.paid_installments > 0:
            raise InvalidTransitionError(
                loan.status,
                "deleted",
                "loans with recorded payments are kept for history",
                record_id=loan.loan_id,
            )
        self.session.delete(loan)
        self.session.flush()
        logger.info("Loan %s deleted", loan_id)

    def list_loans(
        self, employee_id: str | None = None, status: str | None = None
    ) -> list[Loan]:
        query = select(Loan)
        if employee_id:
            query = query.where(Loan.employee_id == employee_id)
        if status:
            query = query.where(Loan.status == getattr(status, "value", status))
        query = query.order_by(Loan.start_date, Loan.created_at)
        return list(self.session.scalars(query).all())

    def active_loans_for(self, employee_id: str) -> list[Loan]:
        return self.list_loans(employee_id=employee_id, status=LoanStatus.ACTIVE)

    @staticmethod
    def scheduled_payment(loan: Loan) -> Decimal:
        """Installment this loan owes in the current month (0 unless active)."""
        if loan.status != LoanStatus.ACTIVE.value:
            return ZERO
        return next_payment(loan)

    def monthly_obligation(self, employee_id: str) -> Decimal:
        """Sum of scheduled installments across the employee's active loans."""
        return sum(
            (self.scheduled_payment(loan) for loan in self.active_loans_for(employee_id)),
            ZERO,
        )

    @staticmethod
    def list_installment_schedule(loan: Loan) -> InstallmentSchedule:
        return InstallmentSchedule.from_loan(loan)

    def loan_summary(self) -> LoanSummary:
        loans = self.list_loans()
        active = [loan for loan in loans if loan.status == LoanStatus.ACTIVE.value]
        return LoanSummary(
            total_loans=len(loans),
            active_loans=len(active),
            pending_loans=sum(1 for loan in loans if loan.status == LoanStatus.PENDING.value),
            completed_loans=sum(
                1 for loan in loans if loan.status == LoanStatus.COMPLETED.value
            ),
            outstanding_amount=sum((loan.remaining_amount for loan in active), ZERO),
        )
