"""Loan state machine.

Statuses are re-derived from the loan snapshot after every commit. CLOSED
and DEFAULTED are terminal; DEFAULTED is only ever set by an explicit
action, never derived.
"""

import logging
from datetime import date

from loan_ledger.exceptions import InvalidLoanStateError
from loan_ledger.logging import loan_logger
from loan_ledger.models.enums import LoanStatus
from loan_ledger.models.loan import TERMINAL_STATUSES, Loan

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[LoanStatus, frozenset[LoanStatus]] = {
    LoanStatus.ACTIVE: frozenset(
        {LoanStatus.PARTIALLY_PAID, LoanStatus.OVERDUE, LoanStatus.CLOSED, LoanStatus.DEFAULTED}
    ),
    LoanStatus.PARTIALLY_PAID: frozenset(
        {LoanStatus.OVERDUE, LoanStatus.CLOSED, LoanStatus.DEFAULTED}
    ),
    LoanStatus.OVERDUE: frozenset(
        {LoanStatus.ACTIVE, LoanStatus.PARTIALLY_PAID, LoanStatus.CLOSED, LoanStatus.DEFAULTED}
    ),
    LoanStatus.CLOSED: frozenset(),
    LoanStatus.DEFAULTED: frozenset(),
}


def can_transition(current: LoanStatus, target: LoanStatus) -> bool:
    """Whether ``current`` may move to ``target``. Staying put is always allowed."""
    return current == target or target in ALLOWED_TRANSITIONS[current]


def require_transition(loan: Loan, target: LoanStatus) -> None:
    """Raise ``InvalidLoanStateError`` unless the loan may move to ``target``."""
    if not can_transition(loan.status, target):
        raise InvalidLoanStateError(
            f"Loan {loan.loan_id} cannot move from {loan.status.value} to {target.value}"
        )


def derive_status(loan: Loan, as_of: date | None = None) -> LoanStatus:
    """Compute the status implied by the loan's balances and due date.

    OVERDUE is not sticky: once the due date no longer applies the loan
    falls back to ACTIVE or PARTIALLY_PAID.
    """
    if loan.status in TERMINAL_STATUSES:
        return loan.status

    outstanding = loan.outstanding_principal_minor_units
    if outstanding == 0:
        return LoanStatus.CLOSED
    if loan.due_date is not None and as_of is not None and as_of > loan.due_date:
        return LoanStatus.OVERDUE
    if outstanding < loan.principal_minor_units:
        return LoanStatus.PARTIALLY_PAID
    return LoanStatus.ACTIVE


def apply_status(loan: Loan, as_of: date | None = None) -> LoanStatus:
    """Store the derived status on the loan and return it.

    Raises
    ------
    InvalidLoanStateError
        If the derived status is not reachable from the current one, for
        example a PARTIALLY_PAID snapshot whose principal is fully outstanding.
    """
    new_status = derive_status(loan, as_of)
    if new_status != loan.status:
        require_transition(loan, new_status)
        loan_logger(logger, loan.loan_id, loan.customer_id).info(
            "Loan %s status %s -> %s", loan.loan_id, loan.status.value, new_status.value
        )
        loan.status = new_status
    return new_status


def mark_defaulted(loan: Loan) -> LoanStatus:
    """Manually move a loan to DEFAULTED.

    Raises
    ------
    InvalidLoanStateError
        If the loan is already CLOSED or DEFAULTED.
    """
    if loan.status in TERMINAL_STATUSES:
        raise InvalidLoanStateError(
            f"Loan {loan.loan_id} is {loan.status.value} and cannot be marked defaulted"
        )
    loan_logger(logger, loan.loan_id, loan.customer_id).warning(
        "Loan %s marked DEFAULTED (was %s)", loan.loan_id, loan.status.value
    )
    loan.status = LoanStatus.DEFAULTED
    return loan.status
