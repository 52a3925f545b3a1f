"""Loan generator for gold, silver, personal and udhari loans."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.collateral import item_value
from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models import (
    CollateralItem,
    Direction,
    Loan,
    LoanKind,
    MarketPrice,
    Metal,
)

DEFAULT_MARKET_PRICES = {
    Metal.GOLD: MarketPrice(Metal.GOLD, 700_000),  # 7000.00 per gram of 24K
    Metal.SILVER: MarketPrice(Metal.SILVER, 9_000),  # 90.00 per gram of fine silver
}


class CollateralItemGenerator(BaseGenerator):
    """Generate pledged jewellery items."""

    SEED_OFFSET = 1

    GOLD_KARATS = [Decimal("24"), Decimal("22"), Decimal("20"), Decimal("18"), Decimal("14")]
    GOLD_KARAT_WEIGHTS = [0.10, 0.55, 0.10, 0.20, 0.05]
    SILVER_FINENESS = [Decimal("999"), Decimal("925"), Decimal("800")]
    SILVER_FINENESS_WEIGHTS = [0.25, 0.60, 0.15]

    GOLD_ITEMS = ["chain", "ring", "bangle", "necklace", "earrings", "mangalsutra", "coin"]
    SILVER_ITEMS = ["anklet", "bracelet", "toe ring", "plate", "glass", "coin"]

    def __init__(
        self,
        seed: int | None = None,
        market_prices: dict[Metal, MarketPrice] | None = None,
        config: LedgerConfig | None = None,
    ) -> None:
        super().__init__(seed)
        self.market_prices = market_prices or DEFAULT_MARKET_PRICES
        self.config = config or LedgerConfig()

    def generate(self, metal: Metal) -> CollateralItem:
        """Generate one item valued at today's price as its pledge value."""
        if metal == Metal.GOLD:
            purity = self.weighted_choice(self.GOLD_KARATS, self.GOLD_KARAT_WEIGHTS)
            weight = self.decimal_between(1.0, 40.0)
            name = self.rng.choice(self.GOLD_ITEMS)
        else:
            purity = self.weighted_choice(self.SILVER_FINENESS, self.SILVER_FINENESS_WEIGHTS)
            weight = self.decimal_between(10.0, 500.0)
            name = self.rng.choice(self.SILVER_ITEMS)

        item = CollateralItem(
            item_id=self.fake.uuid4(),
            metal=metal,
            weight_grams=weight,
            purity=purity,
            pledged_value_minor_units=0,
            name=name,
        )
        item.pledged_value_minor_units = item_value(item, self.market_prices, self.config)
        return item


class LoanGenerator(BaseGenerator):
    """Generate synthetic loan snapshots.

    Secured loans lend a fraction of the pledged items' value (loan to
    value); unsecured loans draw the principal from a per-kind range.
    """

    # Monthly interest rate ranges in percent
    INTEREST_RATES = {
        LoanKind.GOLD: (Decimal("1.0"), Decimal("3.0")),
        LoanKind.SILVER: (Decimal("1.5"), Decimal("4.0")),
        LoanKind.PERSONAL: (Decimal("1.5"), Decimal("5.0")),
        LoanKind.UDHARI: (Decimal("0"), Decimal("0")),
    }

    # Unsecured principal ranges in major units
    PRINCIPAL_RANGES = {
        LoanKind.PERSONAL: (5_000, 200_000),
        LoanKind.UDHARI: (500, 50_000),
    }

    LOAN_TO_VALUE = (0.60, 0.80)
    SEED_OFFSET = 2

    def __init__(
        self,
        seed: int | None = None,
        market_prices: dict[Metal, MarketPrice] | None = None,
        config: LedgerConfig | None = None,
    ) -> None:
        super().__init__(seed)
        self._item_gen = CollateralItemGenerator(seed=seed, market_prices=market_prices, config=config)

    def generate(
        self,
        kind: LoanKind = LoanKind.GOLD,
        customer_id: str | None = None,
        as_of: date | None = None,
        direction: Direction | None = None,
    ) -> Loan:
        """Generate one loan disbursed within the year before ``as_of``.

        Parameters
        ----------
        kind : LoanKind
            Loan kind; GOLD and SILVER loans get collateral items.
        customer_id : str | None
            Owning customer.
        as_of : date | None
            Reference date (defaults to today).
        direction : Direction | None
            GIVEN or TAKEN; udhari picks either, other kinds default to GIVEN.

        Returns
        -------
        Loan
            A fresh ACTIVE loan with no payments.
        """
        as_of = as_of or date.today()
        start_date = as_of - timedelta(days=self.rng.randint(0, 365))

        if direction is None:
            direction = self.rng.choice(list(Direction)) if kind == LoanKind.UDHARI else Direction.GIVEN

        items: list[CollateralItem] = []
        if kind in (LoanKind.GOLD, LoanKind.SILVER):
            metal = Metal.GOLD if kind == LoanKind.GOLD else Metal.SILVER
            items = [self._item_gen.generate(metal) for _ in range(self.rng.randint(1, 4))]
            pledged = sum(item.pledged_value_minor_units for item in items)
            principal = max(100, int(pledged * self.rng.uniform(*self.LOAN_TO_VALUE)) // 100 * 100)
        else:
            low, high = self.PRINCIPAL_RANGES[kind]
            principal = self.rng.randint(low, high) // 100 * 100 * 100

        low_rate, high_rate = self.INTEREST_RATES[kind]
        rate = Decimal(str(round(self.rng.uniform(float(low_rate), float(high_rate)) * 4) / 4))

        due_date = None
        if kind in (LoanKind.PERSONAL, LoanKind.UDHARI):
            due_date = start_date + timedelta(days=self.rng.choice([90, 180, 365]))

        return Loan(
            loan_id=self.fake.uuid4(),
            principal_minor_units=principal,
            outstanding_principal_minor_units=principal,
            monthly_interest_rate_pct=rate,
            start_date=start_date,
            direction=direction,
            kind=kind,
            collateral_items=items,
            due_date=due_date,
            customer_id=customer_id,
        )
