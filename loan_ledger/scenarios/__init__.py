"""Scenarios for generating realistic loan portfolios."""

from loan_ledger.scenarios.loan_portfolio import LoanPortfolioScenario

__all__ = ["LoanPortfolioScenario"]
