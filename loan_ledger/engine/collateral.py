"""Collateral repayment calculator for gold and silver loans.

Pledged items are valued at the current market price rather than the
pledge-time value, so the lender captures any appreciation or
depreciation since the pledge.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Union

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.interest import loan_months_elapsed, pending_interest
from loan_ledger.engine.money import floor_minor_units, require_non_negative, require_positive
from loan_ledger.exceptions import (
    MissingMarketPriceError,
    NoSelectionOrPaymentError,
    UnknownItemIdError,
)
from loan_ledger.models.enums import ClosurePolicy, Metal, ReturnStrategy
from loan_ledger.models.loan import CollateralItem, Loan
from loan_ledger.models.market import MarketPrice
from loan_ledger.models.results import ItemValuation, RepaymentSummary, ReturnScenario

logger = logging.getLogger(__name__)

MarketPrices = Union[MarketPrice, Mapping[Metal, MarketPrice], Iterable[MarketPrice]]


def price_table(market_price: MarketPrices) -> dict[Metal, MarketPrice]:
    """Normalize one quote, a list of quotes or a metal mapping into a lookup."""
    if isinstance(market_price, MarketPrice):
        return {market_price.metal: market_price}
    if isinstance(market_price, Mapping):
        return dict(market_price)
    return {quote.metal: quote for quote in market_price}


def _purity_base(metal: Metal, config: LedgerConfig) -> int:
    if metal == Metal.GOLD:
        return config.collateral.gold_karat_base
    return config.collateral.silver_fineness_base


def item_value(
    item: CollateralItem,
    market_price: MarketPrices,
    config: LedgerConfig | None = None,
) -> int:
    """Current value of one item: weight x purity fraction x price, rounded down.

    Raises
    ------
    MissingMarketPriceError
        If no quote covers the item's metal.
    """
    config = config or LedgerConfig()
    quote = price_table(market_price).get(item.metal)
    if quote is None:
        raise MissingMarketPriceError(f"No {item.metal.value} price supplied for item {item.item_id}")

    base = _purity_base(item.metal, config)
    return floor_minor_units(
        item.weight_grams * item.purity * Decimal(quote.price_per_gram_minor_units) / base
    )


def value_item(
    item: CollateralItem,
    market_price: MarketPrices,
    config: LedgerConfig | None = None,
) -> ItemValuation:
    """Value an item and compare it with its pledge-time value."""
    return ItemValuation(
        item_id=item.item_id,
        metal=item.metal,
        current_value_minor_units=item_value(item, market_price, config),
        pledged_value_minor_units=item.pledged_value_minor_units,
    )


def value_held_items(
    loan: Loan,
    market_price: MarketPrices,
    config: LedgerConfig | None = None,
) -> list[ItemValuation]:
    """Valuations for every item still held against ``loan``, in pledge order."""
    prices = price_table(market_price)
    return [value_item(item, prices, config) for item in loan.held_items()]


def _resolve_selection(loan: Loan, selected_item_ids: Iterable[str]) -> list[CollateralItem]:
    selected_ids = list(selected_item_ids)
    held = {item.item_id: item for item in loan.held_items()}

    bad_ids = [item_id for item_id in selected_ids if item_id not in held]
    duplicates = {item_id for item_id in selected_ids if selected_ids.count(item_id) > 1}
    if bad_ids or duplicates:
        offending = bad_ids + sorted(duplicates - set(bad_ids))
        raise UnknownItemIdError(
            f"Loan {loan.loan_id}: items not held or selected twice: {', '.join(offending)}",
            item_ids=offending,
        )
    return [held[item_id] for item_id in selected_ids]


def evaluate_collateral_repayment(
    loan: Loan,
    selected_item_ids: Iterable[str],
    cash_amount_minor_units: int,
    market_price: MarketPrices,
    as_of: date,
    *,
    config: LedgerConfig | None = None,
) -> RepaymentSummary:
    """Evaluate returning selected items plus cash against total dues.

    Pure function of its inputs: it does not touch the loan.

    Parameters
    ----------
    loan : Loan
        Loan snapshot.
    selected_item_ids : Iterable[str]
        Ids of held items the customer is redeeming against the loan.
    cash_amount_minor_units : int
        Cash offered alongside the items.
    market_price : MarketPrices
        Current spot quote(s) covering the selected items' metals.
    as_of : date
        Evaluation date.
    config : LedgerConfig | None
        Valuation bases and closure policy.

    Returns
    -------
    RepaymentSummary
        Dues, credit, remaining/excess and the interest-first split of the
        total credit.

    Raises
    ------
    NegativeAmountError
        If the cash amount is negative.
    NoSelectionOrPaymentError
        If no item is selected and no cash is offered.
    UnknownItemIdError
        If an id is not a held item of this loan or is repeated.
    MissingMarketPriceError
        If a selected item's metal has no quote.
    InvalidDateRangeError
        If ``as_of`` precedes the loan start date.
    """
    config = config or LedgerConfig()
    require_non_negative(cash_amount_minor_units, "cash amount")

    selected_ids = list(selected_item_ids)
    if not selected_ids and cash_amount_minor_units <= 0:
        raise NoSelectionOrPaymentError(
            f"Loan {loan.loan_id}: select items to return or enter a payment amount"
        )

    selected_items = _resolve_selection(loan, selected_ids)
    prices = price_table(market_price)
    valuations = tuple(value_item(item, prices, config) for item in selected_items)

    months = loan_months_elapsed(loan, as_of, config)
    interest_pending = pending_interest(loan, as_of, config)
    outstanding = loan.outstanding_principal_minor_units

    selected_value = sum(v.current_value_minor_units for v in valuations)
    total_due = outstanding + interest_pending
    total_credit = selected_value + cash_amount_minor_units
    remaining = max(0, total_due - total_credit)
    excess = max(0, total_credit - total_due)

    interest_portion = min(total_credit, interest_pending)
    principal_portion = min(total_credit - interest_portion, outstanding)

    selected_set = set(selected_ids)
    unselected = tuple(item.item_id for item in loan.held_items() if item.item_id not in selected_set)

    can_close = remaining == 0
    if config.collateral.closure_policy == ClosurePolicy.REQUIRE_ALL_ITEMS and unselected:
        can_close = False

    logger.debug(
        "Loan %s collateral evaluation: due=%d credit=%d remaining=%d excess=%d",
        loan.loan_id, total_due, total_credit, remaining, excess,
    )

    return RepaymentSummary(
        selected_item_ids=tuple(selected_ids),
        selected_items_value=selected_value,
        cash_amount=cash_amount_minor_units,
        outstanding_principal=outstanding,
        pending_interest=interest_pending,
        total_due=total_due,
        total_credit=total_credit,
        remaining=remaining,
        excess=excess,
        can_close=can_close,
        interest_portion=interest_portion,
        principal_portion=principal_portion,
        months_elapsed=months,
        item_valuations=valuations,
        unselected_item_ids=unselected,
    )


def _fill_within_budget(valuations: list[ItemValuation], budget: int) -> list[ItemValuation]:
    chosen: list[ItemValuation] = []
    running_total = 0
    for valuation in valuations:
        if running_total + valuation.current_value_minor_units <= budget:
            chosen.append(valuation)
            running_total += valuation.current_value_minor_units
    return chosen


def _scenario(strategy: ReturnStrategy, chosen: list[ItemValuation], budget: int) -> ReturnScenario:
    total = sum(v.current_value_minor_units for v in chosen)
    return ReturnScenario(
        strategy=strategy,
        item_ids=tuple(v.item_id for v in chosen),
        total_value=total,
        excess_amount=budget - total,
    )


def suggest_item_returns(
    loan: Loan,
    budget_minor_units: int,
    market_price: MarketPrices,
    config: LedgerConfig | None = None,
) -> list[ReturnScenario]:
    """Suggest which held items fit inside a repayment budget.

    Returns up to three scenarios: as many items as possible (cheapest
    first), highest-value items first (only when it differs from the
    first), and the single most valuable item that fits.
    """
    require_positive(budget_minor_units, "repayment budget")
    valuations = value_held_items(loan, market_price, config)

    by_cheapest = sorted(valuations, key=lambda v: v.current_value_minor_units)
    maximum_items = _scenario(
        ReturnStrategy.MAXIMUM_ITEMS, _fill_within_budget(by_cheapest, budget_minor_units), budget_minor_units
    )
    scenarios = [maximum_items]

    by_value = sorted(valuations, key=lambda v: v.current_value_minor_units, reverse=True)
    high_value = _scenario(
        ReturnStrategy.HIGH_VALUE_FIRST, _fill_within_budget(by_value, budget_minor_units), budget_minor_units
    )
    if set(high_value.item_ids) != set(maximum_items.item_ids):
        scenarios.append(high_value)

    affordable = [v for v in by_value if v.current_value_minor_units <= budget_minor_units]
    if affordable:
        scenarios.append(_scenario(ReturnStrategy.SINGLE_BEST, affordable[:1], budget_minor_units))

    return scenarios
