"""Monthly payroll entry model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from payroll_deductions.models.base import Base, TimestampMixin

ZERO = Decimal("0")


class PayrollEntry(Base, TimestampMixin):
    """Processed payroll for one employee in one month.

    ``gross`` excludes the bonus; ``net_salary`` adds it back. Employer
    contributions are reported but never subtracted from net.
    """

    __tablename__ = "payroll_entry"

    payroll_entry_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    # Earnings
    basic_salary: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    transport_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    incentives: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    station_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    mobile_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    living_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    overtime_pay: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    bonus_amount: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    gross: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)

    # Deductions
    employee_insurance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    loan_payment: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    advance_amount: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    mobile_bill: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    leave_days: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    leave_deduction: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    penalty_amount: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    total_deductions: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)

    net_salary: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)

    # Employer contributions (not part of net)
    employer_social_insurance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    health_insurance: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)
    income_tax: Mapped[Decimal] = mapped_column(nullable=False, default=ZERO)

    # Ledger records consumed by this entry
    advance_id: Mapped[UUID | None] = mapped_column(nullable=True)
    mobile_bill_id: Mapped[UUID | None] = mapped_column(nullable=True)

    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "year", "month", name="payroll_entry_employee_period_unique"
        ),
        CheckConstraint("month BETWEEN 1 AND 12", name="payroll_entry_month_check"),
    )

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def allowances_total(self) -> Decimal:
        return (
            self.transport_allowance
            + self.incentives
            + self.station_allowance
            + self.mobile_allowance
            + self.living_allowance
        )

    @property
    def total_earnings(self) -> Decimal:
        """Display total: gross plus bonus."""
        return self.gross + self.bonus_amount
