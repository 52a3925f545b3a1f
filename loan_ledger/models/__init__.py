"""Domain models for the loan ledger."""

from loan_ledger.models.customer import Customer
from loan_ledger.models.enums import (
    ClosurePolicy,
    Direction,
    LoanKind,
    LoanStatus,
    Metal,
    PaymentKind,
    PaymentMethod,
    ReminderPriority,
    ReminderType,
    ReturnStrategy,
)
from loan_ledger.models.loan import TERMINAL_STATUSES, CollateralItem, Loan, Payment
from loan_ledger.models.market import MarketPrice
from loan_ledger.models.results import (
    Allocation,
    CommitResult,
    DirectionTotals,
    ItemValuation,
    MonthlyInterest,
    PortfolioSummary,
    Reminder,
    RepaymentSummary,
    ReturnScenario,
)

__all__ = [
    "Allocation",
    "ClosurePolicy",
    "CollateralItem",
    "CommitResult",
    "Customer",
    "Direction",
    "DirectionTotals",
    "ItemValuation",
    "Loan",
    "LoanKind",
    "LoanStatus",
    "MarketPrice",
    "Metal",
    "MonthlyInterest",
    "Payment",
    "PaymentKind",
    "PaymentMethod",
    "PortfolioSummary",
    "Reminder",
    "ReminderPriority",
    "ReminderType",
    "RepaymentSummary",
    "ReturnScenario",
    "ReturnStrategy",
    "TERMINAL_STATUSES",
]
