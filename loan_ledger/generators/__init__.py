"""Synthetic data generators."""

from loan_ledger.generators.customer import CustomerGenerator
from loan_ledger.generators.loan import DEFAULT_MARKET_PRICES, CollateralItemGenerator, LoanGenerator

__all__ = [
    "CollateralItemGenerator",
    "CustomerGenerator",
    "DEFAULT_MARKET_PRICES",
    "LoanGenerator",
]
