"""Monthly payroll aggregation.

Pulls the month's loan installments, approved advance and pending mobile
bill out of their ledgers, combines them with the manual inputs of the
payroll screen, and persists one entry per employee per month. Consumed
advances and bills are marked ``deducted``; loans are only advanced by an
explicit ``LoanLedger.record_payment``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from payroll_deductions.calculators.components import leave_deduction_for
from payroll_deductions.calculators.money import ZERO, round_to_cents, to_decimal
from payroll_deductions.calculators.periods import period_key
from payroll_deductions.config import get_settings
from payroll_deductions.exceptions import NotFoundError, ValidationError
from payroll_deductions.models import Advance, MobileBill, PayrollEntry
from payroll_deductions.services.advance_ledger import AdvanceLedger
from payroll_deductions.services.base import LedgerService, require_employee_id
from payroll_deductions.services.loan_ledger import LoanLedger
from payroll_deductions.services.mobile_bill_batch import MobileBillBatch
from payroll_deductions.services.state_machine import AdvanceStatus, MobileBillStatus

logger = logging.getLogger(__name__)

EARNING_FIELDS = (
    "basic_salary",
    "transport_allowance",
    "incentives",
    "station_allowance",
    "mobile_allowance",
    "living_allowance",
    "overtime_pay",
)
EMPLOYER_FIELDS = ("employer_social_insurance", "health_insurance", "income_tax")


@dataclass
class PayrollInputs:
    """Manual monthly figures for one employee.

    ``leave_deduction`` is derived from ``leave_days`` when not given.
    """

    basic_salary: Any = ZERO
    transport_allowance: Any = ZERO
    incentives: Any = ZERO
    station_allowance: Any = ZERO
    mobile_allowance: Any = ZERO
    living_allowance: Any = ZERO
    overtime_pay: Any = ZERO
    bonus_amount: Any = ZERO
    employee_insurance: Any = ZERO
    leave_days: Any = ZERO
    leave_deduction: Any = None
    penalty_amount: Any = ZERO
    employer_social_insurance: Any = ZERO
    health_insurance: Any = ZERO
    income_tax: Any = ZERO

    def validated(self) -> dict[str, Decimal | None]:
        """All inputs as non-negative Decimals, rounded to cents."""
        values: dict[str, Decimal | None] = {}
        for f in fields(self):
            raw = getattr(self, f.name)
            if raw is None:
                if f.name != "leave_deduction":
                    raise ValidationError(f"{f.name} is required", field=f.name)
                values[f.name] = None
                continue
            amount = to_decimal(raw, f.name)
            if amount < 0:
                raise ValidationError(
                    f"{f.name} must not be negative, got {amount}", field=f.name
                )
            values[f.name] = amount if f.name == "leave_days" else round_to_cents(amount)
        return values


@dataclass
class PayrollRunResult:
    """Outcome of processing a month for many employees."""

    month: int
    year: int
    entries: list[PayrollEntry] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


@dataclass(frozen=True)
class PayrollMonthSummary:
    month: int
    year: int
    headcount: int
    total_gross: Decimal
    total_bonus: Decimal
    total_deductions: Decimal
    total_net: Decimal
    total_loan_payments: Decimal
    total_advances: Decimal
    total_mobile_bills: Decimal
    total_employer_contributions: Decimal


class PayrollService(LedgerService):
    """Computes and stores monthly payroll entries."""

    def __init__(self, session: Session, work_days_per_month: int | None = None):
        super().__init__(session)
        if work_days_per_month is None:
            work_days_per_month = get_settings().work_days_per_month
        self.work_days_per_month = work_days_per_month
        self.loans = LoanLedger(session)
        self.advances = AdvanceLedger(session)
        self.mobile_bills = MobileBillBatch(session)

    def _find_entry(self, employee_id: str, month: int, year: int) -> PayrollEntry | None:
        return self.session.scalars(
            select(PayrollEntry).where(
                PayrollEntry.employee_id == employee_id,
                PayrollEntry.year == year,
                PayrollEntry.month == month,
            )
        ).first()

    def _linked(
        self, entry: PayrollEntry | None, model: type, link: str, deducted: str
    ) -> Any:
        """The record ``entry`` already consumed through ``link``, if still deducted."""
        if entry is None or getattr(entry, link) is None:
            return None
        record = self.session.get(model, getattr(entry, link))
        if record is None or record.status != deducted:
            return None
        return record

    def run_payroll(
        self, employee_id: str, month: int, year: int, inputs: PayrollInputs
    ) -> PayrollEntry:
        """Compute, upsert and return the entry for one employee and month.

        Re-running overwrites the entry. An advance or bill the entry already
        links to stays deducted on it without being transitioned again.
        """
        employee_id = require_employee_id(employee_id)
        period = period_key(month, year)
        values = inputs.validated()

        entry = self._find_entry(employee_id, month, year)
        loan_payment = round_to_cents(self.loans.monthly_obligation(employee_id))
        advance = self._linked(entry, Advance, "advance_id", AdvanceStatus.DEDUCTED.value)
        if advance is None:
            advance = self.advances.get_active_advance_for_month(employee_id, period)
        bill = self._linked(entry, MobileBill, "mobile_bill_id", MobileBillStatus.DEDUCTED.value)
        if bill is None:
            bill = self.mobile_bills.get_pending_for_month(employee_id, period)
        advance_amount = round_to_cents(advance.amount) if advance else ZERO
        mobile_amount = round_to_cents(bill.amount) if bill else ZERO

        gross = sum((values[name] for name in EARNING_FIELDS), ZERO)
        leave_deduction = values["leave_deduction"]
        if leave_deduction is None:
            leave_deduction = leave_deduction_for(
                gross, values["leave_days"], self.work_days_per_month
            )

        total_deductions = (
            values["employee_insurance"]
            + loan_payment
            + advance_amount
            + mobile_amount
            + leave_deduction
            + values["penalty_amount"]
        )
        net = gross + values["bonus_amount"] - total_deductions
        if net < 0:
            logger.warning(
                "Negative net salary for %s in %s: %s (deductions %s)",
                employee_id,
                period,
                net,
                total_deductions,
            )

        if entry is None:
            entry = PayrollEntry(employee_id=employee_id, month=month, year=year)
            self.session.add(entry)
        else:
            logger.info("Reprocessing payroll for %s in %s", employee_id, period)

        for name in EARNING_FIELDS + EMPLOYER_FIELDS + ("bonus_amount", "employee_insurance"):
            setattr(entry, name, values[name])
        entry.penalty_amount = values["penalty_amount"]
        entry.leave_days = values["leave_days"]
        entry.leave_deduction = leave_deduction
        entry.loan_payment = loan_payment
        entry.advance_amount = advance_amount
        entry.mobile_bill = mobile_amount
        entry.gross = gross
        entry.total_deductions = total_deductions
        entry.net_salary = net
        entry.advance_id = advance.advance_id if advance else None
        entry.mobile_bill_id = bill.mobile_bill_id if bill else None
        entry.processed_at = datetime.now(timezone.utc)
        self.session.flush()

        if advance is not None and advance.status != AdvanceStatus.DEDUCTED.value:
            self.advances.mark_deducted(advance.advance_id)
        if bill is not None and bill.status != MobileBillStatus.DEDUCTED.value:
            self.mobile_bills.mark_deducted(bill.mobile_bill_id)

        logger.info(
            "Payroll %s for %s: gross=%s deductions=%s net=%s",
            period,
            employee_id,
            gross,
            total_deductions,
            net,
        )
        return entry

    def run_monthly_payroll(
        self, month: int, year: int, inputs_by_employee: Mapping[str, PayrollInputs]
    ) -> PayrollRunResult:
        """Process many employees; one failure does not stop the others."""
        period_key(month, year)
        result = PayrollRunResult(month=month, year=year)

        for employee_id, inputs in inputs_by_employee.items():
            savepoint = self.session.begin_nested()
            try:
                entry = self.run_payroll(employee_id, month, year, inputs)
            except Exception as exc:
                savepoint.rollback()
                logger.exception("Payroll failed for %s in %s-%02d", employee_id, year, month)
                result.errors[employee_id] = str(exc)
                continue
            savepoint.commit()
            result.entries.append(entry)

        logger.info(
            "Monthly payroll %s-%02d: %d processed, %d failed",
            year,
            month,
            len(result.entries),
            len(result.errors),
        )
        return result

    def get_entry(self, employee_id: str, month: int, year: int) -> PayrollEntry:
        entry = self._find_entry(employee_id, month, year)
        if entry is None:
            raise NotFoundError("payroll entry", f"{employee_id}/{period_key(month, year)}")
        return entry

    def monthly_payroll(self, month: int, year: int) -> list[PayrollEntry]:
        period_key(month, year)
        return list(
            self.session.scalars(
                select(PayrollEntry)
                .where(PayrollEntry.year == year, PayrollEntry.month == month)
                .order_by(PayrollEntry.employee_id)
            )
        )

    def employee_history(self, employee_id: str) -> list[PayrollEntry]:
        """All entries for an employee, newest period first."""
        return list(
            self.session.scalars(
                select(PayrollEntry)
                .where(PayrollEntry.employee_id == employee_id)
                .order_by(PayrollEntry.year.desc(), PayrollEntry.month.desc())
            )
        )

    def monthly_summary(self, month: int, year: int) -> PayrollMonthSummary:
        entries = self.monthly_payroll(month, year)

        def total(name: str) -> Decimal:
            return sum((getattr(e, name) for e in entries), ZERO)

        return PayrollMonthSummary(
            month=month,
            year=year,
            headcount=len(entries),
            total_gross=total("gross"),
            total_bonus=total("bonus_amount"),
            total_deductions=total("total_deductions"),
            total_net=total("net_salary"),
            total_loan_payments=total("loan_payment"),
            total_advances=total("advance_amount"),
            total_mobile_bills=total("mobile_bill"),
            total_employer_contributions=sum(
                (total(name) for name in EMPLOYER_FIELDS), ZERO
            ),
        )
