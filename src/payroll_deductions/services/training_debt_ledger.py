"""Training debt ledger: recoverable course costs with a three-year term.

When an employee actually takes a planned course with a cost, the company
records a claim for that cost that expires three years after the course
date. No repayment schedule is tracked; only the claim and its expiry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import select

from payroll_deductions.calculators.money import ZERO, to_decimal
from payroll_deductions.calculators.periods import add_years
from payroll_deductions.exceptions import ValidationError
from payroll_deductions.models import CourseAssignment, TrainingDebt
from payroll_deductions.services.base import LedgerService, require_employee_id

logger = logging.getLogger(__name__)

DEBT_TERM_YEARS = 3
DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class CourseCompletion:
    """Outcome of recording an actual course date."""

    assignment: CourseAssignment
    debt: TrainingDebt | None
    debt_created: bool


@dataclass(frozen=True)
class EmployeeTrainingDebt:
    employee_id: str
    debts: list[TrainingDebt]
    total: Decimal


def months_remaining(debt: TrainingDebt, now: date | None = None) -> int:
    """Whole 30-day months until the debt expires (negative once expired)."""
    now = now or date.today()
    return round((debt.expiry_date - now).days / DAYS_PER_MONTH)


class TrainingDebtLedger(LedgerService):
    """Owns course assignments and the training debts they create."""

    def _assignment(self, employee_id: str, course_name: str) -> CourseAssignment | None:
        return self.session.scalars(
            select(CourseAssignment).where(
                CourseAssignment.employee_id == employee_id,
                CourseAssignment.course_name == course_name,
            )
        ).first()

    def _debt(self, employee_id: str, course_name: str) -> TrainingDebt | None:
        return self.session.scalars(
            select(TrainingDebt).where(
                TrainingDebt.employee_id == employee_id,
                TrainingDebt.course_name == course_name,
            )
        ).first()

    def assign_course(
        self, employee_id: str, course_name: str, actual_date: date | None = None
    ) -> CourseAssignment:
        """Assign an employee to a course, optionally with the date it was taken."""
        employee_id = require_employee_id(employee_id)
        if not course_name or not course_name.strip():
            raise ValidationError("course_name is required", field="course_name")
        course_name = course_name.strip()

        assignment = self._assignment(employee_id, course_name)
        if assignment is None:
            assignment = CourseAssignment(employee_id=employee_id, course_name=course_name)
            self.session.add(assignment)
        if actual_date is not None:
            assignment.actual_date = actual_date
        self.session.flush()
        return assignment

    def record_actual_course(
        self, employee_id: str, course_name: str, cost: Any, actual_date: date
    ) -> CourseCompletion:
        """Mark a planned course as taken and create its debt once.

        A free course (``cost <= 0``) still records the assignment but
        creates no debt. Once a debt exists, recording the same course again
        returns it and leaves the assignment's actual date as it was.
        """
        if actual_date is None:
            raise ValidationError("actual_date is required", field="actual_date")
        course_cost = to_decimal(cost, "cost") if cost is not None else ZERO

        assignment = self.assign_course(employee_id, course_name)
        existing = self._debt(assignment.employee_id, assignment.course_name)
        if existing is not None:
            return CourseCompletion(assignment=assignment, debt=existing, debt_created=False)

        assignment.actual_date = actual_date
        self.session.flush()
        if course_cost <= 0:
            return CourseCompletion(assignment=assignment, debt=None, debt_created=False)

        debt = TrainingDebt(
            employee_id=assignment.employee_id,
            course_name=assignment.course_name,
            cost=course_cost,
            actual_date=actual_date,
            expiry_date=add_years(actual_date, DEBT_TERM_YEARS),
        )
        self.session.add(debt)
        self.session.flush()
        logger.info(
            "Training debt %s for %s: %s (%s) until %s",
            debt.training_debt_id,
            debt.employee_id,
            debt.cost,
            debt.course_name,
            debt.expiry_date,
        )
        return CourseCompletion(assignment=assignment, debt=debt, debt_created=True)

    def debts_for_employee(self, employee_id: str) -> list[TrainingDebt]:
        return list(
            self.session.scalars(
                select(TrainingDebt)
                .where(TrainingDebt.employee_id == employee_id)
                .order_by(TrainingDebt.actual_date)
            )
        )

    def active_debts(self, now: date | None = None) -> list[TrainingDebt]:
        """Debts that have not yet expired."""
        now = now or date.today()
        return list(
            self.session.scalars(
                select(TrainingDebt)
                .where(TrainingDebt.expiry_date > now)
                .order_by(TrainingDebt.expiry_date)
            )
        )

    def debts_by_employee(self, now: date | None = None) -> list[EmployeeTrainingDebt]:
        grouped: dict[str, list[TrainingDebt]] = {}
        for debt in self.active_debts(now):
            grouped.setdefault(debt.employee_id, []).append(debt)
        return [
            EmployeeTrainingDebt(
                employee_id=employee_id,
                debts=debts,
                total=sum((d.cost for d in debts), ZERO),
            )
            for employee_id, debts in sorted(grouped.items())
        ]
