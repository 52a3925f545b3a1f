"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.models import (
    CollateralItem,
    Direction,
    Loan,
    LoanKind,
    MarketPrice,
    Metal,
)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def sample_customer_id() -> str:
    """Sample customer ID."""
    return "cust-test-001"


@pytest.fixture
def start_date() -> date:
    """Disbursement date shared by the sample loans."""
    return date(2024, 1, 1)


@pytest.fixture
def sample_loan(start_date: date) -> Loan:
    """Unsecured loan of 100.00 at 2.5% a month."""
    return Loan(
        loan_id="loan-test-001",
        principal_minor_units=10_000,
        outstanding_principal_minor_units=10_000,
        monthly_interest_rate_pct=Decimal("2.5"),
        start_date=start_date,
        direction=Direction.GIVEN,
        customer_id="cust-test-001",
    )


@pytest.fixture
def gold_price() -> MarketPrice:
    """Gold at 50.00 per gram of 24K."""
    return MarketPrice(Metal.GOLD, 5_000)


@pytest.fixture
def silver_price() -> MarketPrice:
    """Silver at 1.00 per gram of fine silver."""
    return MarketPrice(Metal.SILVER, 100)


@pytest.fixture
def gold_loan(start_date: date) -> Loan:
    """Interest-free gold loan of 400.00 secured by a ring and a chain.

    At 50.00/g the ring (10g, 22K) is worth 45833 and the chain
    (4g, 18K) is worth 15000.
    """
    return Loan(
        loan_id="loan-gold-001",
        principal_minor_units=40_000,
        outstanding_principal_minor_units=40_000,
        monthly_interest_rate_pct=Decimal("0"),
        start_date=start_date,
        direction=Direction.GIVEN,
        kind=LoanKind.GOLD,
        collateral_items=[
            CollateralItem(
                item_id="ring",
                metal=Metal.GOLD,
                weight_grams=Decimal("10"),
                purity=Decimal("22"),
                pledged_value_minor_units=40_000,
            ),
            CollateralItem(
                item_id="chain",
                metal=Metal.GOLD,
                weight_grams=Decimal("4"),
                purity=Decimal("18"),
                pledged_value_minor_units=15_000,
            ),
        ],
        customer_id="cust-test-001",
    )
