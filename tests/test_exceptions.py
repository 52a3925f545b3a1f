"""Tests for the exception hierarchy."""

import pytest

from loan_ledger.exceptions import (
    CollateralStillPledgedError,
    ConfigurationError,
    EntityNotFoundError,
    InvalidAmountError,
    InvalidDateRangeError,
    InvalidLoanStateError,
    LoanLedgerError,
    LoanNotFoundError,
    MissingMarketPriceError,
    NegativeAmountError,
    NoSelectionOrPaymentError,
    OverpaymentError,
    ReferentialIntegrityError,
    SnapshotFormatError,
    UnknownItemIdError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize(
        "error",
        [
            InvalidDateRangeError,
            InvalidAmountError,
            NoSelectionOrPaymentError,
            MissingMarketPriceError,
        ],
    )
    def test_validation_errors(self, error: type) -> None:
        """Test input errors share a base."""
        assert issubclass(error, ValidationError)
        assert issubclass(error, LoanLedgerError)

    def test_amount_errors(self) -> None:
        """Test amount error specializations."""
        assert issubclass(NegativeAmountError, InvalidAmountError)
        assert issubclass(OverpaymentError, InvalidAmountError)

    def test_state_errors(self) -> None:
        """Test state error specializations."""
        assert issubclass(CollateralStillPledgedError, InvalidLoanStateError)
        assert not issubclass(InvalidLoanStateError, ValidationError)

    def test_lookup_errors(self) -> None:
        """Test lookup error specializations."""
        assert issubclass(LoanNotFoundError, EntityNotFoundError)
        assert issubclass(ReferentialIntegrityError, EntityNotFoundError)

    def test_other_errors(self) -> None:
        """Test remaining errors derive from the base."""
        assert issubclass(SnapshotFormatError, LoanLedgerError)
        assert issubclass(ConfigurationError, LoanLedgerError)
        assert issubclass(LoanLedgerError, Exception)

    def test_error_payloads(self) -> None:
        """Test errors carrying extra data."""
        overpaid = OverpaymentError("too much", overpayment_minor_units=750)
        unknown = UnknownItemIdError("not held", item_ids=["x", "y"])

        assert str(overpaid) == "too much"
        assert overpaid.overpayment_minor_units == 750
        assert unknown.item_ids == ["x", "y"]

    def test_exception_message(self) -> None:
        """Test exception message is preserved."""
        with pytest.raises(LoanNotFoundError, match="loan-404"):
            raise LoanNotFoundError("Loan loan-404 not found")
