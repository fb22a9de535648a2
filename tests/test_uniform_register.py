"""Tests for the uniform register and depreciation report."""

from datetime import date
from decimal import Decimal

import pytest

from payroll_deductions.exceptions import NotFoundError, ValidationError
from payroll_deductions.services.uniform_register import UniformRegister


@pytest.fixture
def jacket(uniform_register: UniformRegister):
    return uniform_register.issue(
        "EMP001", "Winter jacket", 2, Decimal("500"), date(2025, 1, 1), notes="size L"
    )


class TestIssue:
    def test_total_price_is_quantity_times_unit(self, jacket):
        assert jacket.total_price == Decimal("1000")
        assert jacket.is_archived is False

    def test_rejects_zero_quantity(self, uniform_register: UniformRegister):
        with pytest.raises(ValidationError) as exc_info:
            uniform_register.issue("EMP001", "Shirt", 0, Decimal("50"), date(2025, 1, 1))

        assert exc_info.value.field == "quantity"
        assert exc_info.value.message == "quantity must be positive, got 0"

    def test_rejects_fractional_quantity(self, uniform_register: UniformRegister):
        with pytest.raises(ValidationError) as exc_info:
            uniform_register.issue("EMP001", "Shirt", "1.5", Decimal("50"), date(2025, 1, 1))

        assert exc_info.value.field == "quantity"
        assert "quantity must be a whole number" in exc_info.value.message

    def test_rejects_negative_price(self, uniform_register: UniformRegister):
        with pytest.raises(ValidationError) as exc_info:
            uniform_register.issue("EMP001", "Shirt", 1, Decimal("-5"), date(2025, 1, 1))

        assert exc_info.value.field == "unit_price"

    def test_update_recomputes_total(self, uniform_register: UniformRegister, jacket):
        uniform_register.update_issuance(jacket.uniform_issuance_id, quantity=3)

        assert jacket.total_price == Decimal("1500")

    def test_delete(self, uniform_register: UniformRegister, jacket):
        uniform_register.delete(jacket.uniform_issuance_id)

        with pytest.raises(NotFoundError):
            uniform_register.get_issuance(jacket.uniform_issuance_id)


class TestDepreciationReport:
    """Test current values as of a date."""

    def test_seven_months_after_delivery(self, uniform_register: UniformRegister, jacket):
        [row] = uniform_register.depreciation_report(date(2025, 8, 1))

        assert row.months_elapsed == 7
        assert row.percent_remaining == 50
        assert row.current_value == Decimal("500")
        assert row.depreciation_amount == Decimal("500")

    def test_nine_months_after_delivery(self, uniform_register: UniformRegister, jacket):
        [row] = uniform_register.depreciation_report(date(2025, 10, 1))

        assert row.percent_remaining == 25
        assert row.current_value == Decimal("250")

    def test_zero_value_kept_without_auto_archive(self, uniform_register: UniformRegister, jacket):
        [row] = uniform_register.depreciation_report(date(2026, 2, 1))

        assert row.current_value == Decimal("0")
        assert uniform_register.active_issuances("EMP001", date(2026, 2, 1)) == []

    def test_auto_archive_hides_zero_value(self, session, jacket):
        register = UniformRegister(session, auto_archive_at_zero=True)

        assert register.depreciation_report(date(2026, 2, 1)) == []
        assert jacket.is_archived is True
        assert register.list_issuances(include_archived=True) == [jacket]

    def test_explicit_archive(self, uniform_register: UniformRegister, jacket):
        uniform_register.issue("EMP001", "Cap", 1, Decimal("40"), date(2025, 11, 1))

        archived = uniform_register.archive_fully_depreciated(date(2026, 1, 15))

        assert archived == 1
        assert [i.item_type for i in uniform_register.list_issuances("EMP001")] == ["Cap"]

    def test_employee_summary(self, uniform_register: UniformRegister, jacket):
        uniform_register.issue("EMP001", "Cap", 1, Decimal("40"), date(2025, 6, 1))
        uniform_register.issue("EMP002", "Boots", 1, Decimal("300"), date(2025, 8, 1))

        summary = uniform_register.employee_summary(date(2025, 8, 1))

        assert [s.employee_id for s in summary] == ["EMP001", "EMP002"]
        emp001 = summary[0]
        assert emp001.items == 3
        assert emp001.original_value == Decimal("1040")
        assert emp001.current_value == Decimal("540")
        assert emp001.depreciation == Decimal("500")
