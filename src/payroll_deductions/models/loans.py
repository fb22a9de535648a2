"""Loan and salary advance models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from payroll_deductions.models.base import Base, TimestampMixin


class Loan(Base, TimestampMixin):
    """Employee loan repaid in monthly installments."""

    __tablename__ = "loan"

    loan_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    installments_count: Mapped[int] = mapped_column(Integer, nullable=False)
    monthly_payment: Mapped[Decimal] = mapped_column(nullable=False)
    paid_installments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    paid_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    remaining_amount: Mapped[Decimal] = mapped_column(nullable=False)
    start_date: Mapped[str] = mapped_column(String(7), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    calculation_method: Mapped[str] = mapped_column(String(8), nullable=False, default="auto")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'active', 'completed', 'rejected')",
            name="loan_status_check",
        ),
        CheckConstraint(
            "calculation_method IN ('auto', 'manual')",
            name="loan_calculation_method_check",
        ),
        CheckConstraint("installments_count > 0", name="loan_installments_positive"),
        CheckConstraint(
            "paid_installments >= 0 AND paid_installments <= installments_count",
            name="loan_paid_installments_range",
        ),
    )

    @property
    def is_completed(self) -> bool:
        return self.paid_installments >= self.installments_count


class Advance(Base, TimestampMixin):
    """One-shot salary advance deducted in full in a single month."""

    __tablename__ = "advance"

    advance_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    request_date: Mapped[date] = mapped_column(Date, nullable=False)
    deduction_month: Mapped[str] = mapped_column(String(7), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'deducted')",
            name="advance_status_check",
        ),
        Index("advance_employee_month_idx", "employee_id", "deduction_month"),
    )
