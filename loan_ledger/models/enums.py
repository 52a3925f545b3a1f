"""Enumeration types for loan ledger entities."""

from enum import Enum


class LoanKind(str, Enum):
    GOLD = "GOLD"
    SILVER = "SILVER"
    PERSONAL = "PERSONAL"
    UDHARI = "UDHARI"


class Direction(str, Enum):
    GIVEN = "GIVEN"  # money lent out (receivable)
    TAKEN = "TAKEN"  # money borrowed (payable)


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    OVERDUE = "OVERDUE"
    CLOSED = "CLOSED"
    DEFAULTED = "DEFAULTED"


class Metal(str, Enum):
    GOLD = "GOLD"
    SILVER = "SILVER"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    UPI = "UPI"
    CHEQUE = "CHEQUE"
    CARD = "CARD"
    ONLINE = "ONLINE"


class PaymentKind(str, Enum):
    INTEREST_ONLY = "INTEREST_ONLY"
    PARTIAL_PRINCIPAL = "PARTIAL_PRINCIPAL"
    FULL_PRINCIPAL = "FULL_PRINCIPAL"
    ITEM_RETURN = "ITEM_RETURN"


class ClosurePolicy(str, Enum):
    """What happens to unselected collateral when a repayment settles the loan."""

    RELEASE_UNSELECTED = "RELEASE_UNSELECTED"
    REQUIRE_ALL_ITEMS = "REQUIRE_ALL_ITEMS"


class ReturnStrategy(str, Enum):
    MAXIMUM_ITEMS = "MAXIMUM_ITEMS"
    HIGH_VALUE_FIRST = "HIGH_VALUE_FIRST"
    SINGLE_BEST = "SINGLE_BEST"


class ReminderType(str, Enum):
    INTEREST_DUE = "INTEREST_DUE"
    OVERDUE = "OVERDUE"
    UDHARI_REMINDER = "UDHARI_REMINDER"


class ReminderPriority(str, Enum):
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"
