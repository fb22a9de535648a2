"""Uniform register: issuances and their time-based depreciation.

Issuances are value-tracking records, not deductions. Fully depreciated
records are archived only when the register is created with
``auto_archive_at_zero`` (or the setting of the same name) enabled;
otherwise they keep appearing in reports at zero value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from payroll_deductions.calculators.depreciation import (
    current_value,
    depreciation_percent,
    is_fully_depreciated,
)
from payroll_deductions.calculators.money import ZERO, require_positive_int, to_decimal
from payroll_deductions.calculators.periods import months_between
from payroll_deductions.config import get_settings
from payroll_deductions.exceptions import ValidationError
from payroll_deductions.models import UniformIssuance
from payroll_deductions.services.base import LedgerService, require_employee_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepreciationRow:
    """Depreciation report line for one issuance."""

    uniform_issuance_id: UUID
    employee_id: str
    item_type: str
    quantity: int
    total_price: Decimal
    delivery_date: date
    months_elapsed: int
    percent_remaining: int
    current_value: Decimal

    @property
    def depreciation_amount(self) -> Decimal:
        return self.total_price - self.current_value


@dataclass(frozen=True)
class EmployeeUniformSummary:
    employee_id: str
    items: int
    original_value: Decimal
    current_value: Decimal
    depreciation: Decimal


def _quantity(value: Any) -> int:
    return require_positive_int(value, "quantity")


def _unit_price(value: Any) -> Decimal:
    price = to_decimal(value, "unit_price")
    if price < 0:
        raise ValidationError(f"unit_price must not be negative, got {price}", field="unit_price")
    return price


class UniformRegister(LedgerService):
    """Owns uniform issuance records."""

    def __init__(self, session: Session, auto_archive_at_zero: bool | None = None):
        super().__init__(session)
        if auto_archive_at_zero is None:
            auto_archive_at_zero = get_settings().auto_archive_at_zero
        self.auto_archive_at_zero = auto_archive_at_zero

    def get_issuance(self, uniform_issuance_id: UUID) -> UniformIssuance:
        return self._get_or_raise(UniformIssuance, uniform_issuance_id, "UniformIssuance")

    def issue(
        self,
        employee_id: str,
        item_type: str,
        quantity: Any,
        unit_price: Any,
        delivery_date: date,
        notes: str = "",
    ) -> UniformIssuance:
        employee_id = require_employee_id(employee_id)
        if not item_type or not item_type.strip():
            raise ValidationError("item_type is required", field="item_type")
        count = _quantity(quantity)
        price = _unit_price(unit_price)

        issuance = UniformIssuance(
            employee_id=employee_id,
            item_type=item_type.strip(),
            quantity=count,
            unit_price=price,
            total_price=price * count,
            delivery_date=delivery_date,
            notes=notes or "",
        )
        self.session.add(issuance)
        self.session.flush()
        return issuance

    def update_issuance(
        self,
        uniform_issuance_id: UUID,
        quantity: Any = None,
        unit_price: Any = None,
        delivery_date: date | None = None,
        notes: str | None = None,
    ) -> UniformIssuance:
        issuance = self.get_issuance(uniform_issuance_id)
        count = _quantity(quantity) if quantity is not None else issuance.quantity
        price = _unit_price(unit_price) if unit_price is not None else issuance.unit_price

        issuance.quantity = count
        issuance.unit_price = price
        issuance.total_price = price * count
        if delivery_date is not None:
            issuance.delivery_date = delivery_date
        if notes is not None:
            issuance.notes = notes
        self.session.flush()
        return issuance

    def delete(self, uniform_issuance_id: UUID) -> None:
        self.session.delete(self.get_issuance(uniform_issuance_id))
        self.session.flush()

    def list_issuances(
        self, employee_id: str | None = None, include_archived: bool = False
    ) -> list[UniformIssuance]:
        query = select(UniformIssuance)
        if employee_id:
            query = query.where(UniformIssuance.employee_id == employee_id)
        if not include_archived:
            query = query.where(UniformIssuance.archived_at.is_(None))
        return list(
            self.session.scalars(
                query.order_by(UniformIssuance.employee_id, UniformIssuance.delivery_date)
            )
        )

    def active_issuances(self, employee_id: str, now: date | None = None) -> list[UniformIssuance]:
        """Issuances that still carry value for the employee."""
        return [
            item
            for item in self.list_issuances(employee_id)
            if not is_fully_depreciated(item.delivery_date, now)
        ]

    def archive_fully_depreciated(self, now: date | None = None) -> int:
        """Archive every live issuance whose value has reached zero."""
        archived = 0
        stamp = datetime.now(timezone.utc)
        for item in self.list_issuances():
            if is_fully_depreciated(item.delivery_date, now):
                item.archived_at = stamp
                archived += 1
        if archived:
            self.session.flush()
            logger.info("Archived %d fully depreciated uniform issuance(s)", archived)
        return archived

    def depreciation_report(
        self, now: date | None = None, employee_id: str | None = None
    ) -> list[DepreciationRow]:
        now = now or date.today()
        if self.auto_archive_at_zero:
            self.archive_fully_depreciated(now)

        return [
            DepreciationRow(
                uniform_issuance_id=item.uniform_issuance_id,
                employee_id=item.employee_id,
                item_type=item.item_type,
                quantity=item.quantity,
                total_price=item.total_price,
                delivery_date=item.delivery_date,
                months_elapsed=max(months_between(item.delivery_date, now), 0),
                percent_remaining=depreciation_percent(item.delivery_date, now),
                current_value=current_value(item.total_price, item.delivery_date, now),
            )
            for item in self.list_issuances(employee_id)
        ]

    def employee_summary(self, now: date | None = None) -> list[EmployeeUniformSummary]:
        """Original value, current value and depreciation per employee."""
        totals: dict[str, list[Any]] = {}
        for row in self.depreciation_report(now):
            items, original, value = totals.get(row.employee_id, [0, ZERO, ZERO])
            totals[row.employee_id] = [
                items + row.quantity,
                original + row.total_price,
                value + row.current_value,
            ]

        return [
            EmployeeUniformSummary(
                employee_id=employee_id,
                items=items,
                original_value=original,
                current_value=value,
                depreciation=original - value,
            )
            for employee_id, (items, original, value) in sorted(totals.items())
        ]
