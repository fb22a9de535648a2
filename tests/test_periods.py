"""Tests for year-month helpers."""

from datetime import date

import pytest

from payroll_deductions.calculators.periods import (
    add_months,
    add_years,
    months_between,
    normalize_year_month,
    period_key,
)
from payroll_deductions.exceptions import ValidationError


class TestYearMonth:
    def test_normalize_accepts_dates_and_strings(self):
        assert normalize_year_month("2026-03") == "2026-03"
        assert normalize_year_month("2026-03-15") == "2026-03"
        assert normalize_year_month(date(2026, 3, 15)) == "2026-03"

    @pytest.mark.parametrize("value", ["", None, "2026-13", "03-2026", "2026/03"])
    def test_normalize_rejects_malformed(self, value):
        with pytest.raises(ValidationError) as exc_info:
            normalize_year_month(value, "deduction_month")

        assert exc_info.value.field == "deduction_month"

    def test_period_key(self):
        assert period_key(3, 2026) == "2026-03"
        with pytest.raises(ValidationError):
            period_key(13, 2026)

    def test_add_months_crosses_year(self):
        assert add_months("2025-11", 3) == "2026-02"
        assert add_months("2026-01", 0) == "2026-01"
        assert add_months("2026-01", -1) == "2025-12"


class TestDates:
    def test_months_between_ignores_day(self):
        assert months_between(date(2025, 1, 31), date(2025, 2, 1)) == 1
        assert months_between(date(2025, 1, 1), date(2025, 8, 1)) == 7
        assert months_between(date(2025, 8, 1), date(2025, 1, 1)) == -7

    def test_add_years(self):
        assert add_years(date(2024, 5, 10), 3) == date(2027, 5, 10)

    def test_add_years_from_leap_day(self):
        assert add_years(date(2024, 2, 29), 3) == date(2027, 3, 1)
