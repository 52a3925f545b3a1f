"""Payment allocator: interest first, then principal, then overpayment."""

from loan_ledger.engine.money import require_non_negative, require_positive
from loan_ledger.models.results import Allocation


def allocate(
    payment_amount_minor_units: int,
    pending_interest_minor_units: int,
    outstanding_principal_minor_units: int | None = None,
) -> Allocation:
    """Split a payment between pending interest and principal.

    Interest is settled first. The principal share is capped at the
    outstanding principal when one is given; anything beyond full
    settlement is reported as overpayment so the caller can decide whether
    to keep it as credit or refuse it.

    Parameters
    ----------
    payment_amount_minor_units : int
        Incoming amount, must be positive.
    pending_interest_minor_units : int
        Interest outstanding before this payment.
    outstanding_principal_minor_units : int | None
        Principal outstanding before this payment. ``None`` leaves the
        principal share uncapped.

    Returns
    -------
    Allocation
        ``interest_portion + principal_portion + overpayment`` always equals
        the payment amount.

    Raises
    ------
    InvalidAmountError
        If the payment amount is zero or negative.
    NegativeAmountError
        If pending interest or outstanding principal is negative.
    """
    require_positive(payment_amount_minor_units, "payment amount")
    require_non_negative(pending_interest_minor_units, "pending interest")

    interest_portion = min(payment_amount_minor_units, pending_interest_minor_units)
    principal_portion = payment_amount_minor_units - interest_portion
    overpayment = 0

    if outstanding_principal_minor_units is not None:
        require_non_negative(outstanding_principal_minor_units, "outstanding principal")
        if principal_portion > outstanding_principal_minor_units:
            overpayment = principal_portion - outstanding_principal_minor_units
            principal_portion = outstanding_principal_minor_units

    return Allocation(
        interest_portion=interest_portion,
        principal_portion=principal_portion,
        overpayment_minor_units=overpayment,
    )


def allocate_interest_only(
    payment_amount_minor_units: int,
    pending_interest_minor_units: int,
) -> Allocation:
    """Apply a payment to interest only; the rest is overpayment."""
    require_positive(payment_amount_minor_units, "payment amount")
    require_non_negative(pending_interest_minor_units, "pending interest")

    interest_portion = min(payment_amount_minor_units, pending_interest_minor_units)
    return Allocation(
        interest_portion=interest_portion,
        principal_portion=0,
        overpayment_minor_units=payment_amount_minor_units - interest_portion,
    )
