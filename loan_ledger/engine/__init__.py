"""Loan ledger calculation engine."""

from loan_ledger.engine.allocation import allocate, allocate_interest_only
from loan_ledger.engine.collateral import (
    evaluate_collateral_repayment,
    item_value,
    suggest_item_returns,
    value_held_items,
    value_item,
)
from loan_ledger.engine.interest import (
    accrued_interest,
    interest_breakdown,
    monthly_interest,
    pending_interest,
)
from loan_ledger.engine.ledger import (
    commit_collateral_repayment,
    record_interest_payment,
    record_payment,
)
from loan_ledger.engine.money import from_major_units, months_elapsed, to_major_units
from loan_ledger.engine.status import (
    apply_status,
    can_transition,
    derive_status,
    mark_defaulted,
    require_transition,
)

__all__ = [
    "accrued_interest",
    "allocate",
    "allocate_interest_only",
    "apply_status",
    "can_transition",
    "commit_collateral_repayment",
    "derive_status",
    "evaluate_collateral_repayment",
    "from_major_units",
    "interest_breakdown",
    "item_value",
    "mark_defaulted",
    "require_transition",
    "monthly_interest",
    "months_elapsed",
    "pending_interest",
    "record_interest_payment",
    "record_payment",
    "suggest_item_returns",
    "to_major_units",
    "value_held_items",
    "value_item",
]
