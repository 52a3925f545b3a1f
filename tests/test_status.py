"""Tests for the loan state machine."""

from datetime import date, timedelta

import pytest

from loan_ledger.engine.status import (
    ALLOWED_TRANSITIONS,
    apply_status,
    can_transition,
    derive_status,
    mark_defaulted,
    require_transition,
)
from loan_ledger.exceptions import InvalidLoanStateError
from loan_ledger.models import Loan, LoanStatus


class TestDeriveStatus:
    """Tests for derive_status()."""

    def test_untouched_loan_is_active(self, sample_loan: Loan) -> None:
        """Test a fresh loan."""
        assert derive_status(sample_loan) == LoanStatus.ACTIVE

    def test_partial_principal(self, sample_loan: Loan) -> None:
        """Test reduced principal."""
        sample_loan.outstanding_principal_minor_units = 9_950
        assert derive_status(sample_loan) == LoanStatus.PARTIALLY_PAID

    def test_zero_outstanding_closes(self, sample_loan: Loan) -> None:
        """Test settled principal."""
        sample_loan.outstanding_principal_minor_units = 0
        assert derive_status(sample_loan) == LoanStatus.CLOSED

    def test_past_due_date_is_overdue(self, sample_loan: Loan, start_date: date) -> None:
        """Test evaluation after the due date."""
        sample_loan.due_date = start_date + timedelta(days=90)
        assert derive_status(sample_loan, start_date + timedelta(days=90)) == LoanStatus.ACTIVE
        assert derive_status(sample_loan, start_date + timedelta(days=91)) == LoanStatus.OVERDUE

    def test_overdue_without_as_of(self, sample_loan: Loan, start_date: date) -> None:
        """Test the due date is ignored without an evaluation date."""
        sample_loan.due_date = start_date
        assert derive_status(sample_loan) == LoanStatus.ACTIVE

    def test_overdue_is_not_sticky(self, sample_loan: Loan, start_date: date) -> None:
        """Test an overdue loan falls back once the due date is extended."""
        sample_loan.due_date = start_date + timedelta(days=30)
        sample_loan.outstanding_principal_minor_units = 5_000
        late = start_date + timedelta(days=45)

        assert apply_status(sample_loan, late) == LoanStatus.OVERDUE

        sample_loan.due_date = start_date + timedelta(days=60)
        assert apply_status(sample_loan, late) == LoanStatus.PARTIALLY_PAID

    def test_settling_overdue_loan_closes(self, sample_loan: Loan, start_date: date) -> None:
        """Test zero outstanding wins over a passed due date."""
        sample_loan.due_date = start_date
        sample_loan.outstanding_principal_minor_units = 0
        assert derive_status(sample_loan, start_date + timedelta(days=10)) == LoanStatus.CLOSED

    @pytest.mark.parametrize("terminal", [LoanStatus.CLOSED, LoanStatus.DEFAULTED])
    def test_terminal_statuses_stay(self, sample_loan: Loan, terminal: LoanStatus) -> None:
        """Test terminal statuses are never re-derived."""
        sample_loan.status = terminal
        assert derive_status(sample_loan) == terminal


class TestTransitions:
    """Tests for the transition table."""

    def test_terminal_statuses_have_no_exits(self) -> None:
        """Test CLOSED and DEFAULTED are terminal."""
        assert ALLOWED_TRANSITIONS[LoanStatus.CLOSED] == frozenset()
        assert ALLOWED_TRANSITIONS[LoanStatus.DEFAULTED] == frozenset()
        assert not can_transition(LoanStatus.CLOSED, LoanStatus.ACTIVE)

    def test_allowed_transitions(self) -> None:
        """Test a few legal moves."""
        assert can_transition(LoanStatus.ACTIVE, LoanStatus.PARTIALLY_PAID)
        assert can_transition(LoanStatus.OVERDUE, LoanStatus.ACTIVE)
        assert can_transition(LoanStatus.PARTIALLY_PAID, LoanStatus.CLOSED)
        assert can_transition(LoanStatus.ACTIVE, LoanStatus.ACTIVE)

    def test_partial_payment_cannot_go_back_to_active(self) -> None:
        """Test principal cannot grow back."""
        assert not can_transition(LoanStatus.PARTIALLY_PAID, LoanStatus.ACTIVE)

    def test_require_transition(self, sample_loan: Loan) -> None:
        """Test an illegal move raises and a legal one passes."""
        require_transition(sample_loan, LoanStatus.PARTIALLY_PAID)

        sample_loan.status = LoanStatus.PARTIALLY_PAID
        with pytest.raises(InvalidLoanStateError, match="PARTIALLY_PAID to ACTIVE"):
            require_transition(sample_loan, LoanStatus.ACTIVE)

    def test_apply_status_refuses_illegal_move(self, sample_loan: Loan) -> None:
        """Test a loaded PARTIALLY_PAID snapshot with nothing repaid is rejected."""
        sample_loan.status = LoanStatus.PARTIALLY_PAID

        with pytest.raises(InvalidLoanStateError):
            apply_status(sample_loan)
        assert sample_loan.status == LoanStatus.PARTIALLY_PAID


class TestMarkDefaulted:
    """Tests for the manual default action."""

    def test_mark_defaulted(self, sample_loan: Loan) -> None:
        """Test an open loan can be written off."""
        assert mark_defaulted(sample_loan) == LoanStatus.DEFAULTED
        assert sample_loan.is_terminal

    def test_defaulted_is_never_derived(self, sample_loan: Loan, start_date: date) -> None:
        """Test a long-overdue loan is OVERDUE, not DEFAULTED."""
        sample_loan.due_date = start_date
        assert derive_status(sample_loan, start_date + timedelta(days=3650)) == LoanStatus.OVERDUE

    @pytest.mark.parametrize("terminal", [LoanStatus.CLOSED, LoanStatus.DEFAULTED])
    def test_terminal_loan_cannot_default(self, sample_loan: Loan, terminal: LoanStatus) -> None:
        """Test terminal loans are refused."""
        sample_loan.status = terminal
        with pytest.raises(InvalidLoanStateError):
            mark_defaulted(sample_loan)
