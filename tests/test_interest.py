"""Tests for the interest accrual calculator."""

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

import pytest

from loan_ledger.config import InterestConfig, LedgerConfig
from loan_ledger.engine.interest import (
    accrued_interest,
    interest_breakdown,
    loan_months_elapsed,
    monthly_interest,
    pending_interest,
)
from loan_ledger.exceptions import InvalidDateRangeError
from loan_ledger.models import Direction, Loan, Payment, PaymentKind


def _interest_payment(on: date, amount: int, payment_id: str = "pay-1") -> Payment:
    return Payment(
        payment_id=payment_id,
        date=on,
        principal_paid_minor_units=0,
        interest_paid_minor_units=amount,
        kind=PaymentKind.INTEREST_ONLY,
    )


class TestAccruedInterest:
    """Tests for accrued and pending interest."""

    def test_same_day_accrues_one_month(self, sample_loan: Loan, start_date: date) -> None:
        """100.00 at 2.5% evaluated on the start date accrues 2.50."""
        assert loan_months_elapsed(sample_loan, start_date) == 1
        assert accrued_interest(sample_loan, start_date) == 250
        assert pending_interest(sample_loan, start_date) == 250

    def test_accrual_grows_per_started_month(self, sample_loan: Loan, start_date: date) -> None:
        """Test each started 30-day month adds a full month."""
        assert accrued_interest(sample_loan, start_date + timedelta(days=30)) == 250
        assert accrued_interest(sample_loan, start_date + timedelta(days=31)) == 500
        assert accrued_interest(sample_loan, start_date + timedelta(days=65)) == 750

    def test_interest_is_floored(self, start_date: date) -> None:
        """Test fractional paise are dropped."""
        loan = Loan(
            loan_id="loan-odd",
            principal_minor_units=999,
            outstanding_principal_minor_units=999,
            monthly_interest_rate_pct=Decimal("1.5"),
            start_date=start_date,
            direction=Direction.GIVEN,
        )
        assert accrued_interest(loan, start_date) == 14

    def test_accrues_on_outstanding_not_original(self, sample_loan: Loan, start_date: date) -> None:
        """Test interest follows the current outstanding principal."""
        sample_loan.outstanding_principal_minor_units = 4_000
        assert accrued_interest(sample_loan, start_date) == 100

    def test_zero_outstanding_accrues_nothing(self, sample_loan: Loan, start_date: date) -> None:
        """Test a settled principal accrues nothing."""
        sample_loan.outstanding_principal_minor_units = 0
        assert accrued_interest(sample_loan, start_date + timedelta(days=90)) == 0

    def test_direction_does_not_change_amount(self, sample_loan: Loan, start_date: date) -> None:
        """Test TAKEN loans accrue the same figure."""
        taken = replace(sample_loan, loan_id="loan-taken", direction=Direction.TAKEN)
        assert accrued_interest(taken, start_date) == accrued_interest(sample_loan, start_date)

    def test_pending_subtracts_interest_paid(self, sample_loan: Loan, start_date: date) -> None:
        """Test payments reduce pending interest."""
        sample_loan.payment_history.append(_interest_payment(start_date, 300))
        assert pending_interest(sample_loan, start_date + timedelta(days=65)) == 450

    def test_pending_never_negative(self, sample_loan: Loan, start_date: date) -> None:
        """Test prepaid interest floors pending at zero."""
        sample_loan.payment_history.append(_interest_payment(start_date, 1_000))
        assert pending_interest(sample_loan, start_date) == 0

    def test_as_of_before_start_fails(self, sample_loan: Loan, start_date: date) -> None:
        """Test evaluation before disbursement."""
        with pytest.raises(InvalidDateRangeError):
            pending_interest(sample_loan, start_date - timedelta(days=1))

    def test_custom_month_length(self, sample_loan: Loan, start_date: date) -> None:
        """Test configured days per month."""
        config = LedgerConfig(interest=InterestConfig(days_per_month=15))
        assert accrued_interest(sample_loan, start_date + timedelta(days=20), config) == 500

    def test_monthly_interest(self, sample_loan: Loan) -> None:
        """Test single-month interest figure."""
        assert monthly_interest(sample_loan) == 250


class TestInterestBreakdown:
    """Tests for the month-by-month interest view."""

    def test_rows_per_month(self, sample_loan: Loan, start_date: date) -> None:
        """Test one row per interest month with 30-day periods."""
        rows = interest_breakdown(sample_loan, start_date + timedelta(days=65))

        assert [r.month_number for r in rows] == [1, 2, 3]
        assert rows[0].period_start == date(2024, 1, 1)
        assert rows[0].period_end == date(2024, 1, 30)
        assert rows[1].period_start == date(2024, 1, 31)
        assert [r.cumulative_due for r in rows] == [250, 500, 750]

    def test_rows_sum_to_accrued(self, start_date: date) -> None:
        """Test floored rows still add up to the accrued total."""
        loan = Loan(
            loan_id="loan-odd",
            principal_minor_units=999,
            outstanding_principal_minor_units=999,
            monthly_interest_rate_pct=Decimal("1.5"),
            start_date=start_date,
            direction=Direction.GIVEN,
        )
        as_of = start_date + timedelta(days=75)
        rows = interest_breakdown(loan, as_of)

        assert [r.interest_due for r in rows] == [14, 15, 15]
        assert sum(r.interest_due for r in rows) == accrued_interest(loan, as_of)

    def test_payments_cover_oldest_month_first(self, sample_loan: Loan, start_date: date) -> None:
        """Test paid interest is applied oldest first."""
        sample_loan.payment_history.append(_interest_payment(start_date, 300))
        rows = interest_breakdown(sample_loan, start_date + timedelta(days=65))

        assert [r.interest_covered for r in rows] == [250, 50, 0]
        assert rows[0].is_paid
        assert rows[1].is_partially_paid
        assert not rows[2].is_paid
        assert not rows[2].is_partially_paid
