"""Money and time utilities.

Money is carried as integer minor units (paise) everywhere inside the
engine. Conversion to major units happens only at display boundaries.
"""

from datetime import date
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

from loan_ledger.exceptions import InvalidAmountError, InvalidDateRangeError, NegativeAmountError

MINOR_UNITS_PER_MAJOR = 100
_MAJOR_QUANTUM = Decimal("0.01")


def to_major_units(minor_units: int) -> Decimal:
    """Convert minor units to major units (paise to rupees)."""
    return (Decimal(minor_units) / MINOR_UNITS_PER_MAJOR).quantize(_MAJOR_QUANTUM, rounding=ROUND_HALF_UP)


def from_major_units(value: Decimal | int | str) -> int:
    """Convert a major-unit amount to minor units, rounding half up.

    Floats are rejected to keep binary rounding out of the ledger.
    """
    if isinstance(value, float):
        raise InvalidAmountError("Pass major-unit amounts as Decimal or str, not float")
    minor = Decimal(value) * MINOR_UNITS_PER_MAJOR
    return int(minor.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def floor_minor_units(value: Decimal) -> int:
    """Round a fractional minor-unit amount toward negative infinity."""
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def require_positive(amount: int, field_name: str) -> None:
    if amount <= 0:
        raise InvalidAmountError(f"{field_name} must be positive, got {amount}")


def require_non_negative(amount: int, field_name: str) -> None:
    if amount < 0:
        raise NegativeAmountError(f"{field_name} cannot be negative, got {amount}")


def days_between(start_date: date, as_of_date: date) -> int:
    """Calendar days from ``start_date`` to ``as_of_date``.

    Raises
    ------
    InvalidDateRangeError
        If ``as_of_date`` precedes ``start_date``.
    """
    if as_of_date < start_date:
        raise InvalidDateRangeError(
            f"Evaluation date {as_of_date.isoformat()} precedes start date {start_date.isoformat()}"
        )
    return (as_of_date - start_date).days


def months_elapsed(
    start_date: date,
    as_of_date: date,
    days_per_month: int = 30,
    minimum_months: int = 1,
) -> int:
    """Number of interest months between two dates.

    Uses flat ``days_per_month`` months and rounds partial months up, with a
    floor of ``minimum_months`` so a same-day loan accrues one month.

    Parameters
    ----------
    start_date : date
        Disbursement date.
    as_of_date : date
        Evaluation date.
    days_per_month : int
        Length of an interest month in days.
    minimum_months : int
        Lower bound on the result.

    Returns
    -------
    int
        ``max(minimum_months, ceil(days / days_per_month))``.
    """
    days = days_between(start_date, as_of_date)
    return max(minimum_months, -(-days // days_per_month))
