"""Property-based tests for the ledger engine.

These use hypothesis to check the engine's arithmetic and state rules
over generated loans, payments and dates.
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from loan_ledger.engine.allocation import allocate
from loan_ledger.engine.collateral import evaluate_collateral_repayment
from loan_ledger.engine.ledger import commit_collateral_repayment, record_payment
from loan_ledger.engine.money import months_elapsed
from loan_ledger.models import (
    CollateralItem,
    Direction,
    Loan,
    LoanKind,
    LoanStatus,
    MarketPrice,
    Metal,
)

# =============================================================================
# STRATEGIES
# =============================================================================

amounts = st.integers(min_value=1, max_value=10_000_000)
rates = st.decimals(min_value=Decimal("0"), max_value=Decimal("10"), places=2)
dates = st.dates(min_value=date(2000, 1, 1), max_value=date(2035, 12, 31))


@st.composite
def loans(draw, with_collateral: bool = False) -> Loan:
    """Generate a fresh loan, optionally secured by gold items."""
    principal = draw(amounts)
    items = []
    if with_collateral:
        for index in range(draw(st.integers(min_value=1, max_value=5))):
            items.append(
                CollateralItem(
                    item_id=f"item-{index}",
                    metal=Metal.GOLD,
                    weight_grams=draw(st.decimals(min_value=Decimal("0.1"), max_value=Decimal("100"), places=3)),
                    purity=draw(st.sampled_from([Decimal("14"), Decimal("18"), Decimal("22"), Decimal("24")])),
                    pledged_value_minor_units=draw(st.integers(min_value=0, max_value=10_000_000)),
                )
            )
    return Loan(
        loan_id="loan-prop",
        principal_minor_units=principal,
        outstanding_principal_minor_units=principal,
        monthly_interest_rate_pct=draw(rates),
        start_date=draw(dates),
        direction=draw(st.sampled_from(list(Direction))),
        kind=LoanKind.GOLD if with_collateral else LoanKind.PERSONAL,
        collateral_items=items,
    )


payment_plans = st.lists(
    st.tuples(st.integers(min_value=0, max_value=120), amounts),
    min_size=1,
    max_size=12,
)

gold_prices = st.integers(min_value=1, max_value=1_000_000).map(lambda p: MarketPrice(Metal.GOLD, p))


# =============================================================================
# PROPERTIES
# =============================================================================


class TestAllocationProperties:
    """Arithmetic properties of the allocator."""

    @given(amounts, st.integers(min_value=0, max_value=10_000_000), st.integers(min_value=0, max_value=10_000_000))
    @settings(max_examples=200)
    def test_conservation(self, payment: int, pending: int, outstanding: int) -> None:
        """
        PROPERTY: principal + interest + overpayment == payment, exactly.
        """
        allocation = allocate(payment, pending, outstanding)

        assert (
            allocation.principal_portion
            + allocation.interest_portion
            + allocation.overpayment_minor_units
            == payment
        )
        assert 0 <= allocation.interest_portion <= pending
        assert 0 <= allocation.principal_portion <= outstanding


class TestMonthsElapsedProperties:
    """Month counting properties."""

    @given(dates)
    def test_same_day_is_one_month(self, day: date) -> None:
        """
        PROPERTY: months_elapsed(d, d) == 1.
        """
        assert months_elapsed(day, day) == 1

    @given(dates, st.integers(min_value=0, max_value=2_000), st.integers(min_value=0, max_value=2_000))
    def test_non_decreasing(self, start: date, a: int, b: int) -> None:
        """
        PROPERTY: a later evaluation date never yields fewer months.
        """
        earlier, later = sorted((a, b))
        assert months_elapsed(start, start + timedelta(days=earlier)) <= months_elapsed(
            start, start + timedelta(days=later)
        )


class TestLedgerProperties:
    """Balance and status properties across commit sequences."""

    @given(loans(), payment_plans)
    @settings(max_examples=100)
    def test_outstanding_never_negative_and_closure(self, loan: Loan, plan: list) -> None:
        """
        PROPERTY: outstanding stays >= 0 and the loan is CLOSED exactly when
        the outstanding principal reaches zero.
        """
        on = loan.start_date
        for gap, amount in plan:
            if loan.is_terminal:
                break
            on += timedelta(days=gap)
            result = record_payment(loan, amount, on)

            assert loan.outstanding_principal_minor_units >= 0
            assert (result.status_after == LoanStatus.CLOSED) == (result.outstanding_after == 0)

        assert loan.total_principal_paid() + loan.outstanding_principal_minor_units == loan.principal_minor_units

    @given(loans(with_collateral=True), gold_prices, st.data())
    @settings(max_examples=100)
    def test_collateral_commit_closure(self, loan: Loan, price: MarketPrice, data) -> None:
        """
        PROPERTY: item-return commits keep outstanding >= 0 and close the
        loan exactly when it reaches zero.
        """
        ids = [item.item_id for item in loan.collateral_items]
        selected = data.draw(st.lists(st.sampled_from(ids), min_size=1, unique=True))

        result = commit_collateral_repayment(loan, selected, 0, price, loan.start_date)

        assert loan.outstanding_principal_minor_units >= 0
        assert (result.status_after == LoanStatus.CLOSED) == (loan.outstanding_principal_minor_units == 0)
        if result.closed:
            assert loan.held_items() == []


class TestValuationProperties:
    """Purity of the repayment evaluation."""

    @given(loans(with_collateral=True), gold_prices, st.integers(min_value=0, max_value=1_000_000), st.data())
    @settings(max_examples=100)
    def test_evaluation_is_idempotent(
        self, loan: Loan, price: MarketPrice, cash: int, data
    ) -> None:
        """
        PROPERTY: evaluating twice with identical inputs gives identical output
        and leaves the loan untouched.
        """
        ids = [item.item_id for item in loan.collateral_items]
        selected = data.draw(st.lists(st.sampled_from(ids), min_size=1, unique=True))
        as_of = loan.start_date + timedelta(days=data.draw(st.integers(min_value=0, max_value=400)))
        outstanding = loan.outstanding_principal_minor_units

        first = evaluate_collateral_repayment(loan, selected, cash, price, as_of)
        second = evaluate_collateral_repayment(loan, selected, cash, price, as_of)

        assert first == second
        assert first.remaining == 0 or first.excess == 0
        assert loan.outstanding_principal_minor_units == outstanding
        assert all(item.is_held for item in loan.collateral_items)
