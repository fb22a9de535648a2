"""Pytest fixtures for deduction engine tests."""

from __future__ import annotations

from collections.abc import Generator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from payroll_deductions.api.app import create_app
from payroll_deductions.api.dependencies import get_db_session
from payroll_deductions.database import create_session_factory, get_engine
from payroll_deductions.models import Base
from payroll_deductions.services import (
    AdvanceLedger,
    LoanLedger,
    MobileBillBatch,
    PayrollInputs,
    PayrollService,
    TrainingDebtLedger,
    UniformRegister,
)

# In-memory SQLite shared through a StaticPool, so API threads see the same data
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create a fresh test database for each test."""
    engine = get_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    """Create a database session for each test."""
    factory = create_session_factory(engine)
    with factory() as session:
        yield session
        session.rollback()


@pytest.fixture
def loan_ledger(session: Session) -> LoanLedger:
    return LoanLedger(session)


@pytest.fixture
def advance_ledger(session: Session) -> AdvanceLedger:
    return AdvanceLedger(session)


@pytest.fixture
def mobile_bills(session: Session) -> MobileBillBatch:
    return MobileBillBatch(session)


@pytest.fixture
def uniform_register(session: Session) -> UniformRegister:
    return UniformRegister(session, auto_archive_at_zero=False)


@pytest.fixture
def training_ledger(session: Session) -> TrainingDebtLedger:
    return TrainingDebtLedger(session)


@pytest.fixture
def payroll_service(session: Session) -> PayrollService:
    return PayrollService(session, work_days_per_month=30)


@pytest.fixture
def emp001_inputs() -> PayrollInputs:
    """Monthly figures for the first sample employee."""
    return PayrollInputs(
        basic_salary=Decimal("8500"),
        transport_allowance=Decimal("500"),
        incentives=Decimal("1000"),
        station_allowance=Decimal("600"),
        mobile_allowance=Decimal("400"),
        living_allowance=Decimal("800"),
        overtime_pay=Decimal("0"),
        bonus_amount=Decimal("500"),
        employee_insurance=Decimal("950"),
        employer_social_insurance=Decimal("1200"),
        health_insurance=Decimal("300"),
        income_tax=Decimal("500"),
    )


@pytest.fixture
def emp002_inputs() -> PayrollInputs:
    """Monthly figures for the second sample employee, with two leave days."""
    return PayrollInputs(
        basic_salary=Decimal("7200"),
        transport_allowance=Decimal("400"),
        incentives=Decimal("800"),
        station_allowance=Decimal("500"),
        mobile_allowance=Decimal("300"),
        living_allowance=Decimal("600"),
        overtime_pay=Decimal("200"),
        employee_insurance=Decimal("800"),
        leave_days=Decimal("2"),
        employer_social_insurance=Decimal("1000"),
        health_insurance=Decimal("250"),
        income_tax=Decimal("400"),
    )


@pytest.fixture
def client(engine: Engine) -> Generator[TestClient, None, None]:
    """API client whose requests use the test database."""
    factory = create_session_factory(engine)

    def override_get_db_session() -> Generator[Session, None, None]:
        with factory() as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    yield TestClient(app)
    app.dependency_overrides.clear()
