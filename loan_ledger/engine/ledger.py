"""Ledger commits: the side-effecting half of the engine.

Each commit validates everything up front, then appends exactly one
Payment, adjusts the outstanding principal, marks returned items and
re-derives the loan status. Nothing is mutated when validation fails.
Callers are expected to serialize commits per loan.
"""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.allocation import allocate, allocate_interest_only
from loan_ledger.engine.collateral import MarketPrices, evaluate_collateral_repayment
from loan_ledger.engine.interest import pending_interest
from loan_ledger.engine.status import apply_status, derive_status, require_transition
from loan_ledger.exceptions import (
    CollateralStillPledgedError,
    InvalidLoanStateError,
    OverpaymentError,
)
from loan_ledger.logging import loan_logger
from loan_ledger.models.enums import ClosurePolicy, PaymentKind, PaymentMethod
from loan_ledger.models.loan import CollateralItem, Loan, Payment
from loan_ledger.models.results import Allocation, CommitResult, RepaymentSummary

logger = logging.getLogger(__name__)


def _new_payment_id() -> str:
    return uuid.uuid4().hex


def _ensure_open(loan: Loan) -> None:
    if loan.is_terminal:
        raise InvalidLoanStateError(
            f"Loan {loan.loan_id} is {loan.status.value}; no further payments can be recorded"
        )


def _check_overpayment(loan: Loan, overpayment: int, config: LedgerConfig) -> None:
    if overpayment > 0 and config.reject_overpayment:
        raise OverpaymentError(
            f"Loan {loan.loan_id}: payment exceeds total due by {overpayment}",
            overpayment_minor_units=overpayment,
        )


def _items_released_on_settlement(
    loan: Loan,
    new_outstanding: int,
    returning_ids: frozenset[str],
    config: LedgerConfig,
) -> list[CollateralItem]:
    """Held items left behind when this commit settles the principal."""
    if new_outstanding > 0:
        return []

    left_behind = [item for item in loan.held_items() if item.item_id not in returning_ids]
    if left_behind and config.collateral.closure_policy == ClosurePolicy.REQUIRE_ALL_ITEMS:
        raise CollateralStillPledgedError(
            f"Loan {loan.loan_id} would close with {len(left_behind)} item(s) still pledged: "
            + ", ".join(item.item_id for item in left_behind)
        )
    return left_behind


def _principal_kind(principal_paid: int, new_outstanding: int) -> PaymentKind:
    if principal_paid == 0:
        return PaymentKind.INTEREST_ONLY
    if new_outstanding == 0:
        return PaymentKind.FULL_PRINCIPAL
    return PaymentKind.PARTIAL_PRINCIPAL


def _commit(
    loan: Loan,
    payment: Payment,
    allocation: Allocation,
    as_of: date,
    returned: list[CollateralItem],
    released: list[CollateralItem],
    summary: RepaymentSummary | None = None,
) -> CommitResult:
    status_before = loan.status
    outstanding_before = loan.outstanding_principal_minor_units
    projected = replace(loan, outstanding_principal_minor_units=outstanding_before - payment.principal_paid_minor_units)
    require_transition(loan, derive_status(projected, as_of))

    for item in returned + released:
        item.mark_returned(as_of)
    loan.payment_history.append(payment)
    loan.outstanding_principal_minor_units -= payment.principal_paid_minor_units
    status_after = apply_status(loan, as_of)

    log = loan_logger(logger, loan.loan_id, loan.customer_id)
    log.info(
        "Recorded %s payment %s on loan %s: interest=%d principal=%d overpayment=%d outstanding=%d",
        payment.kind.value,
        payment.payment_id,
        loan.loan_id,
        payment.interest_paid_minor_units,
        payment.principal_paid_minor_units,
        payment.overpayment_minor_units,
        loan.outstanding_principal_minor_units,
        extra={"payment_id": payment.payment_id},
    )
    if released:
        log.info(
            "Loan %s settled; released %d unselected item(s)", loan.loan_id, len(released)
        )

    return CommitResult(
        loan_id=loan.loan_id,
        payment=payment,
        allocation=allocation,
        status_before=status_before,
        status_after=status_after,
        outstanding_before=outstanding_before,
        outstanding_after=loan.outstanding_principal_minor_units,
        released_item_ids=tuple(item.item_id for item in released),
        summary=summary,
    )


def record_payment(
    loan: Loan,
    amount_minor_units: int,
    as_of: date,
    *,
    method: PaymentMethod = PaymentMethod.CASH,
    note: str = "",
    payment_id: str | None = None,
    config: LedgerConfig | None = None,
) -> CommitResult:
    """Record a cash payment, interest first, then principal.

    Parameters
    ----------
    loan : Loan
        Loan snapshot to mutate.
    amount_minor_units : int
        Amount received (or paid, for TAKEN loans).
    as_of : date
        Payment date.
    method : PaymentMethod
        Payment channel.
    note : str
        Free-text note stored on the payment.
    payment_id : str | None
        Caller-supplied id; a random one is generated when omitted.
    config : LedgerConfig | None
        Engine configuration.

    Returns
    -------
    CommitResult
        The appended payment, its allocation and the status change.
    """
    config = config or LedgerConfig()
    _ensure_open(loan)

    interest_pending = pending_interest(loan, as_of, config)
    allocation = allocate(amount_minor_units, interest_pending, loan.outstanding_principal_minor_units)
    _check_overpayment(loan, allocation.overpayment_minor_units, config)

    new_outstanding = loan.outstanding_principal_minor_units - allocation.principal_portion
    released = _items_released_on_settlement(loan, new_outstanding, frozenset(), config)

    payment = Payment(
        payment_id=payment_id or _new_payment_id(),
        date=as_of,
        principal_paid_minor_units=allocation.principal_portion,
        interest_paid_minor_units=allocation.interest_portion,
        items_returned_ids=frozenset(item.item_id for item in released),
        method=method,
        note=note,
        kind=_principal_kind(allocation.principal_portion, new_outstanding),
        overpayment_minor_units=allocation.overpayment_minor_units,
        cash_minor_units=amount_minor_units,
    )
    return _commit(loan, payment, allocation, as_of, [], released)


def record_interest_payment(
    loan: Loan,
    amount_minor_units: int,
    as_of: date,
    *,
    method: PaymentMethod = PaymentMethod.CASH,
    note: str = "",
    payment_id: str | None = None,
    config: LedgerConfig | None = None,
) -> CommitResult:
    """Record an interest-only payment. Principal is never touched."""
    config = config or LedgerConfig()
    _ensure_open(loan)

    interest_pending = pending_interest(loan, as_of, config)
    allocation = allocate_interest_only(amount_minor_units, interest_pending)
    _check_overpayment(loan, allocation.overpayment_minor_units, config)

    payment = Payment(
        payment_id=payment_id or _new_payment_id(),
        date=as_of,
        principal_paid_minor_units=0,
        interest_paid_minor_units=allocation.interest_portion,
        method=method,
        note=note,
        kind=PaymentKind.INTEREST_ONLY,
        overpayment_minor_units=allocation.overpayment_minor_units,
        cash_minor_units=amount_minor_units,
    )
    return _commit(loan, payment, allocation, as_of, [], [])


def commit_collateral_repayment(
    loan: Loan,
    selected_item_ids: Iterable[str],
    cash_amount_minor_units: int,
    market_price: MarketPrices,
    as_of: date,
    *,
    method: PaymentMethod = PaymentMethod.CASH,
    note: str = "",
    payment_id: str | None = None,
    config: LedgerConfig | None = None,
) -> CommitResult:
    """Return selected items and apply their value plus cash to the loan.

    The split of items-plus-cash follows the same interest-first policy as
    cash payments. When the commit settles the principal, unselected items
    are released or the commit is refused, depending on the closure policy.

    Raises
    ------
    InvalidLoanStateError
        If the loan is CLOSED or DEFAULTED.
    CollateralStillPledgedError
        If the loan would settle with items left behind under
        ``ClosurePolicy.REQUIRE_ALL_ITEMS``.
    OverpaymentError
        If credit exceeds dues and overpayment is configured to be rejected.
    """
    config = config or LedgerConfig()
    _ensure_open(loan)

    summary = evaluate_collateral_repayment(
        loan, selected_item_ids, cash_amount_minor_units, market_price, as_of, config=config
    )
    _check_overpayment(loan, summary.excess, config)

    returning_ids = frozenset(summary.selected_item_ids)
    new_outstanding = loan.outstanding_principal_minor_units - summary.principal_portion
    released = _items_released_on_settlement(loan, new_outstanding, returning_ids, config)
    returned = [item for item in loan.held_items() if item.item_id in returning_ids]

    allocation = Allocation(
        interest_portion=summary.interest_portion,
        principal_portion=summary.principal_portion,
        overpayment_minor_units=summary.excess,
    )
    kind = (
        PaymentKind.ITEM_RETURN
        if returned
        else _principal_kind(summary.principal_portion, new_outstanding)
    )
    payment = Payment(
        payment_id=payment_id or _new_payment_id(),
        date=as_of,
        principal_paid_minor_units=summary.principal_portion,
        interest_paid_minor_units=summary.interest_portion,
        items_returned_ids=returning_ids | {item.item_id for item in released},
        method=method,
        note=note,
        kind=kind,
        overpayment_minor_units=summary.excess,
        cash_minor_units=summary.cash_amount,
        items_value_minor_units=summary.selected_items_value,
    )
    return _commit(loan, payment, allocation, as_of, returned, released, summary=summary)
