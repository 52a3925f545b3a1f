"""Custom exception hierarchy for loan-ledger."""


class LoanLedgerError(Exception):
    """Base exception for all loan-ledger errors."""


class ValidationError(LoanLedgerError):
    """Raised when an input fails a precondition check."""


class InvalidDateRangeError(ValidationError):
    """Raised when an evaluation date precedes the loan start date."""


class InvalidAmountError(ValidationError):
    """Raised when an amount is zero or negative where a positive value is required."""


class NegativeAmountError(InvalidAmountError):
    """Raised when an amount field is explicitly negative."""


class OverpaymentError(InvalidAmountError):
    """Raised when overpayment is configured to be rejected."""

    def __init__(self, message: str, overpayment_minor_units: int) -> None:
        super().__init__(message)
        self.overpayment_minor_units = overpayment_minor_units


class NoSelectionOrPaymentError(ValidationError):
    """Raised when a repayment selects no collateral and supplies no cash."""


class UnknownItemIdError(ValidationError):
    """Raised when a collateral item id is not held by the loan."""

    def __init__(self, message: str, item_ids: list[str]) -> None:
        super().__init__(message)
        self.item_ids = item_ids


class MissingMarketPriceError(ValidationError):
    """Raised when no market price is available for an item's metal."""


class InvalidLoanStateError(LoanLedgerError):
    """Raised when a loan is in an invalid state for the operation."""


class CollateralStillPledgedError(InvalidLoanStateError):
    """Raised when a settlement would leave pledged items behind a closed loan."""


class EntityNotFoundError(LoanLedgerError):
    """Raised when a referenced entity does not exist."""


class LoanNotFoundError(EntityNotFoundError):
    """Raised when a loan id is not in the portfolio."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class SnapshotFormatError(LoanLedgerError):
    """Raised when a serialized loan snapshot cannot be parsed."""


class ConfigurationError(LoanLedgerError):
    """Raised when configuration is invalid or missing."""
