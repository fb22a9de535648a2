"""Training course assignment and training debt models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Date, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_deductions.models.base import Base, TimestampMixin


class CourseAssignment(Base, TimestampMixin):
    """An employee assigned to a planned course, with the date actually taken."""

    __tablename__ = "course_assignment"

    course_assignment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    actual_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "course_name", name="course_assignment_employee_course_unique"
        ),
    )


class TrainingDebt(Base, TimestampMixin):
    """Recoverable training cost owed if the employee leaves before expiry."""

    __tablename__ = "training_debt"

    training_debt_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    cost: Mapped[Decimal] = mapped_column(nullable=False)
    actual_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "course_name", name="training_debt_employee_course_unique"
        ),
    )
