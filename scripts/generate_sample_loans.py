#!/usr/bin/env python3
"""Generate a sample loan portfolio as JSON snapshots.

Writes customers, loan snapshots (with collateral and payment history),
the portfolio summary and today's reminders into the output folder. The
files can be fed back through ``loan_ledger.serialization.loan_from_dict``.
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_ledger.config import LedgerConfig
from loan_ledger.logging import setup_logging
from loan_ledger.scenarios import LoanPortfolioScenario
from loan_ledger.serialization import customer_to_dict, loan_to_dict, to_dict

logger = logging.getLogger("generate_sample_loans")


def save_json(data: Any, filename: str, output_dir: Path) -> None:
    """Save data to JSON file."""
    filepath = output_dir / filename
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info("Saved %s", filepath)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a sample pawnbroking loan portfolio")
    parser.add_argument(
        "--customers",
        type=int,
        default=25,
        help="Number of customers to generate (default: 25)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Replay payments up to this ISO date (default: today)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("local"),
        help="Directory for the JSON files (default: local/)",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default="standard",
        help="Log output format",
    )
    args = parser.parse_args()

    config = LedgerConfig.from_env()
    setup_logging(config.log_level, args.log_format)

    scenario = LoanPortfolioScenario(
        num_customers=args.customers,
        as_of=args.as_of,
        seed=args.seed,
        config=config,
    )
    portfolio = scenario.generate()

    args.output_dir.mkdir(parents=True, exist_ok=True)
    save_json([customer_to_dict(c) for c in portfolio.customers.values()], "customers.json", args.output_dir)
    save_json([loan_to_dict(l) for l in portfolio.loans.values()], "loans.json", args.output_dir)
    save_json(to_dict(portfolio.summarize(scenario.as_of, config)), "summary.json", args.output_dir)
    save_json(
        [to_dict(r) for r in portfolio.due_reminders(scenario.as_of, config)],
        "reminders.json",
        args.output_dir,
    )

    logger.info("Portfolio: %s", scenario.get_portfolio_summary())


if __name__ == "__main__":
    main()
