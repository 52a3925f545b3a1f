"""Interest accrual calculator.

Interest is simple interest on the current outstanding principal for every
(30-day) month since disbursement. Pending interest is a running balance:
everything accrued to date minus every interest payment on record.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.money import floor_minor_units, months_elapsed
from loan_ledger.models.loan import Loan
from loan_ledger.models.results import MonthlyInterest

logger = logging.getLogger(__name__)


def _interest_for_months(outstanding_minor_units: int, monthly_rate_pct: Decimal, months: int) -> int:
    if outstanding_minor_units == 0 or months == 0:
        return 0
    return floor_minor_units(Decimal(outstanding_minor_units) * monthly_rate_pct * months / 100)


def loan_months_elapsed(loan: Loan, as_of: date, config: LedgerConfig | None = None) -> int:
    """Interest months for ``loan`` as of ``as_of`` under the configured month length."""
    config = config or LedgerConfig()
    return months_elapsed(
        loan.start_date,
        as_of,
        days_per_month=config.interest.days_per_month,
        minimum_months=config.interest.minimum_months,
    )


def accrued_interest(loan: Loan, as_of: date, config: LedgerConfig | None = None) -> int:
    """Total interest accrued on the outstanding principal, rounded down.

    Direction does not change the figure; it only decides which party pays.

    Raises
    ------
    InvalidDateRangeError
        If ``as_of`` precedes the loan start date.
    """
    months = loan_months_elapsed(loan, as_of, config)
    return _interest_for_months(
        loan.outstanding_principal_minor_units, loan.monthly_interest_rate_pct, months
    )


def pending_interest(loan: Loan, as_of: date, config: LedgerConfig | None = None) -> int:
    """Accrued interest not yet covered by interest payments, never negative."""
    accrued = accrued_interest(loan, as_of, config)
    paid = loan.total_interest_paid()
    pending = max(0, accrued - paid)
    logger.debug(
        "Loan %s pending interest as of %s: accrued=%d paid=%d pending=%d",
        loan.loan_id, as_of.isoformat(), accrued, paid, pending,
    )
    return pending


def monthly_interest(loan: Loan) -> int:
    """Interest for a single month on the current outstanding principal."""
    return _interest_for_months(loan.outstanding_principal_minor_units, loan.monthly_interest_rate_pct, 1)


def interest_breakdown(
    loan: Loan, as_of: date, config: LedgerConfig | None = None
) -> list[MonthlyInterest]:
    """Month-by-month view of accrued interest and what has been paid.

    Each row's ``interest_due`` is the difference between consecutive
    cumulative accruals, so the rows always sum to :func:`accrued_interest`.
    Interest payments are applied to the oldest month first.

    Parameters
    ----------
    loan : Loan
        Loan snapshot.
    as_of : date
        Evaluation date.
    config : LedgerConfig | None
        Month length and minimum months; defaults apply when omitted.

    Returns
    -------
    list[MonthlyInterest]
        One row per interest month, oldest first.
    """
    config = config or LedgerConfig()
    months = loan_months_elapsed(loan, as_of, config)
    period_days = config.interest.days_per_month

    rows: list[MonthlyInterest] = []
    unapplied_paid = loan.total_interest_paid()
    previous_cumulative = 0

    for month_number in range(1, months + 1):
        cumulative = _interest_for_months(
            loan.outstanding_principal_minor_units, loan.monthly_interest_rate_pct, month_number
        )
        due = cumulative - previous_cumulative
        covered = min(due, unapplied_paid)
        unapplied_paid -= covered

        period_start = loan.start_date + timedelta(days=(month_number - 1) * period_days)
        rows.append(
            MonthlyInterest(
                month_number=month_number,
                period_start=period_start,
                period_end=period_start + timedelta(days=period_days - 1),
                interest_due=due,
                interest_covered=covered,
                cumulative_due=cumulative,
            )
        )
        previous_cumulative = cumulative

    return rows
