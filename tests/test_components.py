"""Tests for bonus, penalty and leave calculations."""

from decimal import Decimal

import pytest

from payroll_deductions.calculators.components import (
    BonusType,
    PenaltyType,
    leave_deduction_for,
    resolve_bonus,
    resolve_penalty,
)
from payroll_deductions.calculators.money import parse_amount, round_to_cents, to_decimal
from payroll_deductions.exceptions import ValidationError


class TestMoney:
    def test_round_to_cents_half_up(self):
        assert round_to_cents(Decimal("10.125")) == Decimal("10.13")
        assert round_to_cents(Decimal("10.124")) == Decimal("10.12")
        assert round_to_cents(Decimal("666.665")) == Decimal("666.67")

    def test_to_decimal_rejects_bool_and_nan(self):
        with pytest.raises(ValidationError):
            to_decimal(True)
        with pytest.raises(ValidationError):
            to_decimal("NaN")

    def test_parse_amount_is_lenient(self):
        assert parse_amount("350") == Decimal("350")
        assert parse_amount(" 12.5 ") == Decimal("12.5")
        assert parse_amount("0") is None
        assert parse_amount("-5") is None
        assert parse_amount("n/a") is None
        assert parse_amount("") is None


class TestBonus:
    def test_fixed_amount(self):
        assert resolve_bonus(Decimal("8500"), BonusType.AMOUNT, "500") == Decimal("500.00")

    def test_percentage_of_basic(self):
        assert resolve_bonus(Decimal("8500"), "percentage", Decimal("10")) == Decimal("850.00")

    def test_rejects_negative(self):
        with pytest.raises(ValidationError):
            resolve_bonus(Decimal("8500"), "amount", Decimal("-1"))

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_bonus(Decimal("8500"), "shares", Decimal("1"))

        assert exc_info.value.field == "bonus_type"


class TestPenalty:
    def test_days_of_basic(self):
        assert resolve_penalty(Decimal("9000"), PenaltyType.DAYS, 2) == Decimal("600.00")

    def test_percentage(self):
        assert resolve_penalty(Decimal("9000"), "percentage", 5) == Decimal("450.00")

    def test_fixed_amount(self):
        assert resolve_penalty(Decimal("9000"), "amount", "125.5") == Decimal("125.50")

    def test_custom_work_days(self):
        assert resolve_penalty(
            Decimal("6600"), "days", 1, work_days_per_month=22
        ) == Decimal("300.00")


class TestLeaveDeduction:
    def test_gross_per_day(self):
        """Two leave days on a 10000 gross."""
        assert leave_deduction_for(Decimal("10000"), 2) == Decimal("666.67")

    def test_no_leave(self):
        assert leave_deduction_for(Decimal("10000"), 0) == Decimal("0")

    def test_rejects_negative_days(self):
        with pytest.raises(ValidationError) as exc_info:
            leave_deduction_for(Decimal("10000"), -1)

        assert exc_info.value.field == "leave_days"
