"""Recurring monthly charge models (mobile bills)."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_deductions.models.base import Base, TimestampMixin


class MobileBill(Base, TimestampMixin):
    """Mobile bill charge for one employee in one deduction month."""

    __tablename__ = "mobile_bill"

    mobile_bill_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    deduction_month: Mapped[str] = mapped_column(String(7), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    batch_id: Mapped[str] = mapped_column(String(32), nullable=False)
    upload_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "deduction_month", name="mobile_bill_employee_month_unique"
        ),
        CheckConstraint(
            "status IN ('pending', 'deducted')",
            name="mobile_bill_status_check",
        ),
    )
