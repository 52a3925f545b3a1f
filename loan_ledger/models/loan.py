"""Loan, collateral and payment models."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_ledger.exceptions import InvalidAmountError, InvalidLoanStateError, NegativeAmountError
from loan_ledger.models.enums import (
    Direction,
    LoanKind,
    LoanStatus,
    Metal,
    PaymentKind,
    PaymentMethod,
)

TERMINAL_STATUSES = frozenset({LoanStatus.CLOSED, LoanStatus.DEFAULTED})


@dataclass
class CollateralItem:
    """A pledged gold or silver item.

    ``purity`` is in karats for gold and in parts per thousand
    (fineness) for silver.
    """

    item_id: str
    metal: Metal
    weight_grams: Decimal
    purity: Decimal
    pledged_value_minor_units: int
    return_date: date | None = None
    name: str = ""
    category: str = "jewelry"

    def __post_init__(self) -> None:
        if self.weight_grams <= 0:
            raise InvalidAmountError(f"Item {self.item_id}: weight must be positive")
        if self.purity <= 0:
            raise InvalidAmountError(f"Item {self.item_id}: purity must be positive")
        if self.pledged_value_minor_units < 0:
            raise NegativeAmountError(f"Item {self.item_id}: pledged value cannot be negative")

    @property
    def is_held(self) -> bool:
        return self.return_date is None

    def mark_returned(self, on: date) -> None:
        """Set the return date. An item can only be returned once."""
        if self.return_date is not None:
            raise InvalidLoanStateError(
                f"Item {self.item_id} was already returned on {self.return_date.isoformat()}"
            )
        self.return_date = on


@dataclass(frozen=True)
class Payment:
    """Immutable record of money or collateral value applied to a loan."""

    payment_id: str
    date: date
    principal_paid_minor_units: int
    interest_paid_minor_units: int
    items_returned_ids: frozenset[str] = frozenset()
    method: PaymentMethod = PaymentMethod.CASH
    note: str = ""
    kind: PaymentKind = PaymentKind.PARTIAL_PRINCIPAL
    overpayment_minor_units: int = 0
    cash_minor_units: int = 0
    items_value_minor_units: int = 0

    def __post_init__(self) -> None:
        if self.principal_paid_minor_units < 0 or self.interest_paid_minor_units < 0:
            raise NegativeAmountError(f"Payment {self.payment_id}: paid amounts cannot be negative")
        if self.overpayment_minor_units < 0:
            raise NegativeAmountError(f"Payment {self.payment_id}: overpayment cannot be negative")

    @property
    def total_applied_minor_units(self) -> int:
        return self.principal_paid_minor_units + self.interest_paid_minor_units


@dataclass
class Loan:
    """An active lending relationship in minor currency units."""

    loan_id: str
    principal_minor_units: int
    outstanding_principal_minor_units: int
    monthly_interest_rate_pct: Decimal
    start_date: date
    direction: Direction
    kind: LoanKind = LoanKind.PERSONAL
    status: LoanStatus = LoanStatus.ACTIVE
    collateral_items: list[CollateralItem] = field(default_factory=list)
    payment_history: list[Payment] = field(default_factory=list)
    due_date: date | None = None
    customer_id: str | None = None
    note: str = ""

    def __post_init__(self) -> None:
        if self.principal_minor_units < 0:
            raise NegativeAmountError(f"Loan {self.loan_id}: principal cannot be negative")
        if self.outstanding_principal_minor_units < 0:
            raise NegativeAmountError(f"Loan {self.loan_id}: outstanding principal cannot be negative")
        if self.outstanding_principal_minor_units > self.principal_minor_units:
            raise InvalidAmountError(
                f"Loan {self.loan_id}: outstanding principal "
                f"{self.outstanding_principal_minor_units} exceeds principal {self.principal_minor_units}"
            )
        if self.monthly_interest_rate_pct < 0:
            raise NegativeAmountError(f"Loan {self.loan_id}: interest rate cannot be negative")

    @property
    def is_secured(self) -> bool:
        return bool(self.collateral_items)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def held_items(self) -> list[CollateralItem]:
        """Collateral items that have not been returned, in pledge order."""
        return [item for item in self.collateral_items if item.is_held]

    def find_item(self, item_id: str) -> CollateralItem | None:
        for item in self.collateral_items:
            if item.item_id == item_id:
                return item
        return None

    def total_interest_paid(self) -> int:
        return sum(p.interest_paid_minor_units for p in self.payment_history)

    def total_principal_paid(self) -> int:
        return sum(p.principal_paid_minor_units for p in self.payment_history)
