"""Tests for the training debt ledger."""

from datetime import date
from decimal import Decimal

import pytest

from payroll_deductions.exceptions import ValidationError
from payroll_deductions.services.training_debt_ledger import TrainingDebtLedger, months_remaining


class TestRecordActualCourse:
    def test_creates_debt_with_three_year_term(self, training_ledger: TrainingDebtLedger):
        completion = training_ledger.record_actual_course(
            "EMP001", "Forklift safety", Decimal("2500"), date(2025, 4, 10)
        )

        assert completion.debt_created is True
        assert completion.assignment.actual_date == date(2025, 4, 10)
        assert completion.debt.cost == Decimal("2500")
        assert completion.debt.expiry_date == date(2028, 4, 10)

    def test_repeat_returns_existing_debt(self, training_ledger: TrainingDebtLedger):
        first = training_ledger.record_actual_course(
            "EMP001", "Forklift safety", Decimal("2500"), date(2025, 4, 10)
        )

        second = training_ledger.record_actual_course(
            "EMP001", "Forklift safety", Decimal("3000"), date(2025, 5, 1)
        )

        assert second.debt_created is False
        assert second.debt is first.debt
        assert second.debt.cost == Decimal("2500")
        assert second.assignment.actual_date == date(2025, 4, 10)
        assert second.debt.actual_date == second.assignment.actual_date
        assert len(training_ledger.debts_for_employee("EMP001")) == 1

    def test_free_course_creates_no_debt(self, training_ledger: TrainingDebtLedger):
        completion = training_ledger.record_actual_course(
            "EMP001", "Induction", Decimal("0"), date(2025, 4, 10)
        )

        assert completion.debt is None
        assert completion.assignment.actual_date == date(2025, 4, 10)
        assert training_ledger.debts_for_employee("EMP001") == []

    def test_leap_day_expiry(self, training_ledger: TrainingDebtLedger):
        completion = training_ledger.record_actual_course(
            "EMP001", "First aid", Decimal("800"), date(2024, 2, 29)
        )

        assert completion.debt.expiry_date == date(2027, 3, 1)

    def test_requires_course_name(self, training_ledger: TrainingDebtLedger):
        with pytest.raises(ValidationError) as exc_info:
            training_ledger.record_actual_course("EMP001", " ", Decimal("800"), date(2025, 1, 1))

        assert exc_info.value.field == "course_name"

    def test_planned_assignment_gets_date_later(self, training_ledger: TrainingDebtLedger):
        planned = training_ledger.assign_course("EMP001", "Forklift safety")
        assert planned.actual_date is None

        completion = training_ledger.record_actual_course(
            "EMP001", "Forklift safety", Decimal("2500"), date(2025, 4, 10)
        )

        assert completion.assignment is planned
        assert planned.actual_date == date(2025, 4, 10)


class TestActiveDebts:
    def test_expired_debts_are_excluded(self, training_ledger: TrainingDebtLedger):
        training_ledger.record_actual_course("EMP001", "Old course", Decimal("100"), date(2021, 1, 1))
        training_ledger.record_actual_course("EMP001", "New course", Decimal("900"), date(2025, 1, 1))

        active = training_ledger.active_debts(date(2025, 6, 1))

        assert [d.course_name for d in active] == ["New course"]

    def test_months_remaining(self, training_ledger: TrainingDebtLedger):
        debt = training_ledger.record_actual_course(
            "EMP001", "Forklift safety", Decimal("2500"), date(2025, 1, 1)
        ).debt

        assert months_remaining(debt, date(2027, 1, 1)) == 12
        assert months_remaining(debt, date(2028, 1, 1)) == 0

    def test_debts_by_employee(self, training_ledger: TrainingDebtLedger):
        training_ledger.record_actual_course("EMP001", "A", Decimal("100"), date(2025, 1, 1))
        training_ledger.record_actual_course("EMP001", "B", Decimal("250"), date(2025, 2, 1))
        training_ledger.record_actual_course("EMP002", "A", Decimal("100"), date(2025, 1, 1))

        grouped = training_ledger.debts_by_employee(date(2025, 6, 1))

        assert [(g.employee_id, g.total) for g in grouped] == [
            ("EMP001", Decimal("350")),
            ("EMP002", Decimal("100")),
        ]
