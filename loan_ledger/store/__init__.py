"""In-memory stores for maintaining loan relationships."""

from loan_ledger.store.portfolio import LoanPortfolio

__all__ = ["LoanPortfolio"]
