"""Loan portfolio scenario: customers, loans and a payment history per loan."""

from __future__ import annotations

import logging
import random
from datetime import date, datetime, time, timedelta

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.collateral import evaluate_collateral_repayment
from loan_ledger.engine.interest import pending_interest
from loan_ledger.engine.ledger import commit_collateral_repayment, record_payment
from loan_ledger.engine.status import apply_status, mark_defaulted
from loan_ledger.generators import DEFAULT_MARKET_PRICES, CustomerGenerator, LoanGenerator
from loan_ledger.models import Loan, LoanKind, MarketPrice, Metal, PaymentMethod
from loan_ledger.store import LoanPortfolio

logger = logging.getLogger(__name__)


class LoanPortfolioScenario:
    """Generate a pawnbroking portfolio with realistic payment behaviour.

    This scenario creates:
    - Customers with one or more loans each
    - A mix of gold, silver, personal and udhari loans
    - Monthly payment activity replayed through the ledger commits:
        - Interest plus a little principal
        - Missed months
        - Full settlement (items returned for secured loans)
        - Occasional defaults
    """

    KIND_WEIGHTS = {
        LoanKind.GOLD: 0.50,
        LoanKind.SILVER: 0.15,
        LoanKind.PERSONAL: 0.20,
        LoanKind.UDHARI: 0.15,
    }

    def __init__(
        self,
        num_customers: int = 100,
        max_loans_per_customer: int = 3,
        monthly_payment_rate: float = 0.60,
        settlement_rate: float = 0.05,
        default_rate: float = 0.03,
        as_of: date | None = None,
        market_prices: dict[Metal, MarketPrice] | None = None,
        seed: int | None = None,
        *,
        config: LedgerConfig | None = None,
    ) -> None:
        """Initialize loan portfolio scenario.

        Parameters
        ----------
        num_customers : int
            Number of customers to generate.
        max_loans_per_customer : int
            Upper bound on loans per customer (at least one each).
        monthly_payment_rate : float
            Chance that a customer pays in any given month.
        settlement_rate : float
            Chance that a customer settles the whole loan in any given month.
        default_rate : float
            Chance that a still-open loan is written off as defaulted.
        as_of : date | None
            Date the portfolio is replayed up to (defaults to today).
        market_prices : dict[Metal, MarketPrice] | None
            Spot prices used for pledging and settling collateral.
        seed : int | None
            Random seed for reproducibility.
        config : LedgerConfig | None
            Engine configuration used for every commit.
        """
        self.num_customers = num_customers
        self.max_loans_per_customer = max_loans_per_customer
        self.monthly_payment_rate = monthly_payment_rate
        self.settlement_rate = settlement_rate
        self.default_rate = default_rate
        self.as_of = as_of or date.today()
        self.market_prices = market_prices or DEFAULT_MARKET_PRICES
        self.seed = seed
        self.config = config or LedgerConfig()

        self.rng = random.Random(seed)
        self.portfolio = LoanPortfolio()
        self._customer_gen = CustomerGenerator(seed=seed)
        self._loan_gen = LoanGenerator(seed=seed, market_prices=self.market_prices, config=self.config)

    def generate(self) -> LoanPortfolio:
        """Generate all customers, loans and payments.

        Returns
        -------
        LoanPortfolio
            Portfolio containing all generated data.
        """
        logger.info(
            "Starting loan portfolio scenario: %d customers as of %s",
            self.num_customers,
            self.as_of.isoformat(),
        )

        kinds = list(self.KIND_WEIGHTS)
        weights = list(self.KIND_WEIGHTS.values())
        created_before = datetime.combine(self.as_of, time())

        for customer in self._customer_gen.generate_batch(self.num_customers, created_before):
            self.portfolio.add_customer(customer)

            for _ in range(self.rng.randint(1, self.max_loans_per_customer)):
                kind = self.rng.choices(kinds, weights=weights, k=1)[0]
                loan = self._loan_gen.generate(kind, customer_id=customer.customer_id, as_of=self.as_of)
                self.portfolio.add_loan(loan)
                self._replay_payments(loan)

        logger.info(
            "Generated %d loans for %d customers",
            len(self.portfolio.loans),
            len(self.portfolio.customers),
        )
        return self.portfolio

    def _replay_payments(self, loan: Loan) -> None:
        """Walk the loan month by month up to ``as_of`` applying payments."""
        payment_date = loan.start_date + timedelta(days=self.config.interest.days_per_month)

        while payment_date <= self.as_of and not loan.is_terminal:
            roll = self.rng.random()
            if roll < self.settlement_rate:
                self._settle(loan, payment_date)
            elif roll < self.settlement_rate + self.monthly_payment_rate:
                self._pay_month(loan, payment_date)
            payment_date += timedelta(days=self.config.interest.days_per_month)

        if not loan.is_terminal:
            if self.rng.random() < self.default_rate:
                mark_defaulted(loan)
            else:
                apply_status(loan, self.as_of)

    def _pay_month(self, loan: Loan, on: date) -> None:
        interest = pending_interest(loan, on, self.config)
        principal_share = loan.outstanding_principal_minor_units * self.rng.choice([0, 0, 5, 10, 25]) // 100
        if loan.kind == LoanKind.UDHARI:
            principal_share = max(principal_share, loan.outstanding_principal_minor_units // 4)

        amount = interest + principal_share
        if amount <= 0:
            return
        record_payment(
            loan,
            amount,
            on,
            method=self.rng.choice(list(PaymentMethod)),
            config=self.config,
        )

    def _settle(self, loan: Loan, on: date) -> None:
        held_ids = [item.item_id for item in loan.held_items()]
        if held_ids:
            summary = evaluate_collateral_repayment(
                loan, held_ids, 0, self.market_prices, on, config=self.config
            )
            commit_collateral_repayment(
                loan,
                held_ids,
                summary.remaining,
                self.market_prices,
                on,
                note="Full settlement",
                config=self.config,
            )
            return

        amount = loan.outstanding_principal_minor_units + pending_interest(loan, on, self.config)
        if amount > 0:
            record_payment(loan, amount, on, note="Full settlement", config=self.config)

    def get_portfolio_summary(self) -> dict[str, object]:
        """Get summary statistics for the generated portfolio.

        Returns
        -------
        dict[str, object]
            Loan counts by kind and status plus total principal lent.
        """
        loans = list(self.portfolio.loans.values())
        if not loans:
            return {}

        kind_counts: dict[LoanKind, int] = {}
        for loan in loans:
            kind_counts[loan.kind] = kind_counts.get(loan.kind, 0) + 1

        summary = self.portfolio.summarize(self.as_of, self.config)
        return {
            "total_loans": len(loans),
            "total_principal_minor_units": sum(loan.principal_minor_units for loan in loans),
            "loan_kind_distribution": kind_counts,
            "loan_status_distribution": summary.status_counts,
            "total_payments": sum(len(loan.payment_history) for loan in loans),
        }
