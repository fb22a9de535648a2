"""Recurring charge batch: monthly mobile bills uploaded in bulk.

At most one bill exists per (employee, deduction month). Re-uploading a
month updates amounts in place, so uploads are idempotent per employee and
month. Bad rows are counted as skipped and never abort the batch.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select

from payroll_deductions.calculators.money import parse_amount, require_positive
from payroll_deductions.calculators.periods import normalize_year_month
from payroll_deductions.exceptions import DuplicatePeriodError, InvalidTransitionError
from payroll_deductions.models import MobileBill
from payroll_deductions.services.base import LedgerService, require_employee_id
from payroll_deductions.services.state_machine import MobileBillStateMachine, MobileBillStatus

logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    """Aggregate outcome of a batch upload."""

    batch_id: str
    added: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def processed(self) -> int:
        return self.added + self.updated


def new_batch_id() -> str:
    return f"B{uuid4().hex[:8].upper()}"


class MobileBillBatch(LedgerService):
    """Owns mobile bill entries and their deduction status."""

    def get_bill(self, mobile_bill_id: UUID) -> MobileBill:
        return self._get_or_raise(MobileBill, mobile_bill_id, "MobileBill")

    def _find(self, employee_id: str, month: str) -> MobileBill | None:
        return self.session.scalars(
            select(MobileBill).where(
                MobileBill.employee_id == employee_id,
                MobileBill.deduction_month == month,
            )
        ).first()

    def upload(
        self,
        entries: Iterable[Any],
        deduction_month: Any,
        batch_id: str | None = None,
        upload_date: date | None = None,
    ) -> UploadResult:
        """Merge ``(employee_id, amount)`` rows into the given deduction month.

        Raises:
            ValidationError: deduction month missing or malformed
        """
        month = normalize_year_month(deduction_month, "deduction_month")
        result = UploadResult(batch_id=batch_id or new_batch_id())
        uploaded_on = upload_date or date.today()

        for row in entries:
            try:
                raw_employee, raw_amount = row[0], row[1]
            except (IndexError, KeyError, TypeError):
                result.skipped += 1
                continue

            employee_id = str(raw_employee).strip() if raw_employee is not None else ""
            amount = parse_amount(raw_amount)
            if not employee_id or amount is None:
                result.skipped += 1
                continue

            existing = self._find(employee_id, month)
            if existing is None:
                self.session.add(
                    MobileBill(
                        employee_id=employee_id,
                        amount=amount,
                        deduction_month=month,
                        status=MobileBillStatus.PENDING.value,
                        batch_id=result.batch_id,
                        upload_date=uploaded_on,
                    )
                )
                self.session.flush()
                result.added += 1
            elif existing.status == MobileBillStatus.DEDUCTED.value:
                # Already taken by payroll; the month's figure is final
                result.skipped += 1
            else:
                existing.amount = amount
                existing.batch_id = result.batch_id
                existing.upload_date = uploaded_on
                self.session.flush()
                result.updated += 1

        logger.info(
            "Mobile bill batch %s for %s: %d added, %d updated, %d skipped",
            result.batch_id,
            month,
            result.added,
            result.updated,
            result.skipped,
        )
        return result

    def upload_csv(
        self,
        text: str,
        deduction_month: Any,
        batch_id: str | None = None,
        upload_date: date | None = None,
    ) -> UploadResult:
        """Upload a two-column CSV (employee id, bill amount) with a header row."""
        month = normalize_year_month(deduction_month, "deduction_month")
        rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
        return self.upload(rows[1:], month, batch_id=batch_id, upload_date=upload_date)

    def add_bill(
        self, employee_id: str, amount: Any, deduction_month: Any, upload_date: date | None = None
    ) -> MobileBill:
        """Create a single bill, refusing a second one for the same month."""
        employee_id = require_employee_id(employee_id)
        value = require_positive(amount, "amount")
        month = normalize_year_month(deduction_month, "deduction_month")

        existing = self._find(employee_id, month)
        if existing is not None:
            raise DuplicatePeriodError("MobileBill", employee_id, month, existing.mobile_bill_id)

        bill = MobileBill(
            employee_id=employee_id,
            amount=value,
            deduction_month=month,
            status=MobileBillStatus.PENDING.value,
            batch_id=new_batch_id(),
            upload_date=upload_date or date.today(),
        )
        self.session.add(bill)
        self.session.flush()
        return bill

    def mark_deducted(self, mobile_bill_id: UUID) -> MobileBill:
        bill = self.get_bill(mobile_bill_id)
        MobileBillStateMachine.validate_transition(
            bill.status, MobileBillStatus.DEDUCTED, record_id=bill.mobile_bill_id
        )
        bill.status = MobileBillStatus.DEDUCTED.value
        self.session.flush()
        logger.info("Mobile bill %s deducted (%s)", bill.mobile_bill_id, bill.deduction_month)
        return bill

    def delete(self, mobile_bill_id: UUID) -> None:
        bill = self.get_bill(mobile_bill_id)
        if bill.status != MobileBillStatus.PENDING.value:
            raise InvalidTransitionError(
                bill.status,
                "deleted",
                "deducted bills are part of a processed payroll",
                record_id=bill.mobile_bill_id,
            )
        self.session.delete(bill)
        self.session.flush()

    def get_pending_for_month(self, employee_id: str, month: Any) -> MobileBill | None:
        bill = self._find(employee_id, normalize_year_month(month))
        if bill is None or bill.status != MobileBillStatus.PENDING.value:
            return None
        return bill

    def list_bills(
        self,
        month: Any = None,
        status: str | None = None,
        employee_id: str | None = None,
    ) -> list[MobileBill]:
        query = select(MobileBill)
        if month:
            query = query.where(MobileBill.deduction_month == normalize_year_month(month))
        if status:
            query = query.where(MobileBill.status == getattr(status, "value", status))
        if employee_id:
            query = query.where(MobileBill.employee_id == employee_id)
        return list(
            self.session.scalars(query.order_by(MobileBill.deduction_month, MobileBill.employee_id))
        )
