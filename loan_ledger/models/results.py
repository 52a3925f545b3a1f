"""Calculation and commit result types.

All monetary fields are integer minor units so results can be serialized
to JSON without loss.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_ledger.models.enums import (
    Direction,
    LoanStatus,
    Metal,
    ReminderPriority,
    ReminderType,
    ReturnStrategy,
)
from loan_ledger.models.loan import Payment


@dataclass(frozen=True)
class Allocation:
    """Split of a payment between interest, principal and overpayment."""

    interest_portion: int
    principal_portion: int
    overpayment_minor_units: int = 0

    @property
    def total(self) -> int:
        return self.interest_portion + self.principal_portion + self.overpayment_minor_units


@dataclass(frozen=True)
class ItemValuation:
    """Current market value of a pledged item against its pledge-time value."""

    item_id: str
    metal: Metal
    current_value_minor_units: int
    pledged_value_minor_units: int

    @property
    def appreciation_minor_units(self) -> int:
        return self.current_value_minor_units - self.pledged_value_minor_units

    @property
    def appreciation_pct(self) -> Decimal | None:
        if self.pledged_value_minor_units == 0:
            return None
        return (
            Decimal(self.appreciation_minor_units) * 100 / Decimal(self.pledged_value_minor_units)
        ).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class RepaymentSummary:
    """Outcome of evaluating a collateral-plus-cash repayment."""

    selected_item_ids: tuple[str, ...]
    selected_items_value: int
    cash_amount: int
    outstanding_principal: int
    pending_interest: int
    total_due: int
    total_credit: int
    remaining: int
    excess: int
    can_close: bool
    interest_portion: int
    principal_portion: int
    months_elapsed: int
    item_valuations: tuple[ItemValuation, ...] = ()
    unselected_item_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class MonthlyInterest:
    """One 30-day accrual period in an interest breakdown."""

    month_number: int
    period_start: date
    period_end: date
    interest_due: int
    interest_covered: int
    cumulative_due: int

    @property
    def is_paid(self) -> bool:
        return self.interest_covered >= self.interest_due

    @property
    def is_partially_paid(self) -> bool:
        return 0 < self.interest_covered < self.interest_due


@dataclass(frozen=True)
class ReturnScenario:
    """A suggested set of items to return within a repayment budget."""

    strategy: ReturnStrategy
    item_ids: tuple[str, ...]
    total_value: int
    excess_amount: int

    @property
    def item_count(self) -> int:
        return len(self.item_ids)


@dataclass
class CommitResult:
    """Outcome of a committed ledger mutation."""

    loan_id: str
    payment: Payment | None
    allocation: Allocation | None
    status_before: LoanStatus
    status_after: LoanStatus
    outstanding_before: int
    outstanding_after: int
    released_item_ids: tuple[str, ...] = ()
    summary: RepaymentSummary | None = None

    @property
    def closed(self) -> bool:
        return self.status_after == LoanStatus.CLOSED


@dataclass(frozen=True)
class Reminder:
    """A due reminder for a single loan."""

    reminder_type: ReminderType
    loan_id: str
    customer_id: str | None
    amount_minor_units: int
    priority: ReminderPriority
    due_date: date | None = None
    days_since_start: int = 0


@dataclass
class DirectionTotals:
    """Portfolio totals for one direction (receivable or payable)."""

    loan_count: int = 0
    principal_minor_units: int = 0
    outstanding_principal_minor_units: int = 0
    pending_interest_minor_units: int = 0
    interest_paid_minor_units: int = 0


@dataclass
class PortfolioSummary:
    """Dashboard totals across a portfolio as of one date."""

    as_of: date
    totals: dict[Direction, DirectionTotals] = field(default_factory=dict)
    status_counts: dict[LoanStatus, int] = field(default_factory=dict)
    collateral_grams_held: dict[Metal, Decimal] = field(default_factory=dict)

    @property
    def net_receivable_minor_units(self) -> int:
        """Receivable minus payable, principal plus pending interest."""
        given = self.totals.get(Direction.GIVEN, DirectionTotals())
        taken = self.totals.get(Direction.TAKEN, DirectionTotals())
        return (
            given.outstanding_principal_minor_units
            + given.pending_interest_minor_units
            - taken.outstanding_principal_minor_units
            - taken.pending_interest_minor_units
        )
