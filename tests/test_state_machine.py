"""Tests for ledger status state machines."""

import pytest

from payroll_deductions.exceptions import InvalidTransitionError
from payroll_deductions.services.state_machine import (
    AdvanceStateMachine,
    AdvanceStatus,
    LoanStateMachine,
    LoanStatus,
    MobileBillStateMachine,
)


class TestLoanStateMachine:
    """Test loan transitions."""

    def test_valid_transitions(self):
        # pending → active (approval)
        assert LoanStateMachine.can_transition("pending", "active") is True
        # pending → rejected
        assert LoanStateMachine.can_transition("pending", "rejected") is True
        # active → completed
        assert LoanStateMachine.can_transition("active", "completed") is True
        # completed → active (edit reopens)
        assert LoanStateMachine.can_transition("completed", "active") is True

    def test_invalid_transitions(self):
        assert LoanStateMachine.can_transition("pending", "completed") is False
        assert LoanStateMachine.can_transition("active", "pending") is False
        assert LoanStateMachine.can_transition("active", "rejected") is False
        assert LoanStateMachine.can_transition("rejected", "active") is False

    def test_accepts_enum_members(self):
        assert LoanStateMachine.can_transition(LoanStatus.PENDING, LoanStatus.ACTIVE) is True

    def test_validate_transition_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            LoanStateMachine.validate_transition("rejected", LoanStatus.ACTIVE)

        assert exc_info.value.from_status == "rejected"
        assert exc_info.value.to_status == "active"
        assert exc_info.value.code == "INVALID_TRANSITION"

    def test_terminal_and_next_statuses(self):
        assert LoanStateMachine.is_terminal("rejected") is True
        assert LoanStateMachine.is_terminal("active") is False
        assert LoanStateMachine.get_next_statuses("pending") == ["active", "rejected"]

    def test_payable_statuses(self):
        assert LoanStateMachine.can_record_payment("active") is True
        assert LoanStateMachine.can_record_payment("pending") is False
        assert LoanStateMachine.can_record_payment("rejected") is False


class TestAdvanceStateMachine:
    """Test advance transitions."""

    def test_linear_lifecycle(self):
        assert AdvanceStateMachine.can_transition("pending", "approved") is True
        assert AdvanceStateMachine.can_transition("approved", "deducted") is True
        assert AdvanceStateMachine.can_transition("pending", "rejected") is True

    def test_no_skipping_or_reversal(self):
        assert AdvanceStateMachine.can_transition("pending", "deducted") is False
        assert AdvanceStateMachine.can_transition("deducted", "approved") is False
        assert AdvanceStateMachine.can_transition("rejected", "approved") is False

    def test_terminal_states(self):
        assert AdvanceStateMachine.is_terminal(AdvanceStatus.DEDUCTED) is True
        assert AdvanceStateMachine.is_terminal(AdvanceStatus.REJECTED) is True

    def test_only_pending_is_editable(self):
        assert AdvanceStateMachine.can_edit("pending") is True
        assert AdvanceStateMachine.can_edit("approved") is False


class TestMobileBillStateMachine:
    def test_pending_to_deducted_only(self):
        assert MobileBillStateMachine.can_transition("pending", "deducted") is True
        assert MobileBillStateMachine.can_transition("deducted", "pending") is False
        with pytest.raises(InvalidTransitionError):
            MobileBillStateMachine.validate_transition("deducted", "deducted")
