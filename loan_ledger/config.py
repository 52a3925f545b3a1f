"""Configuration management for loan-ledger."""

import os
from dataclasses import dataclass, field

from loan_ledger.exceptions import ConfigurationError
from loan_ledger.models.enums import ClosurePolicy


@dataclass
class InterestConfig:
    """Interest accrual configuration."""

    days_per_month: int = 30
    # Every loan accrues at least this many months, even when repaid the same day.
    minimum_months: int = 1


@dataclass
class CollateralConfig:
    """Collateral valuation and closure configuration."""

    gold_karat_base: int = 24
    silver_fineness_base: int = 1000
    closure_policy: ClosurePolicy = ClosurePolicy.RELEASE_UNSELECTED


@dataclass
class ReminderConfig:
    """Due reminder configuration."""

    udhari_interval_days: int = 7
    high_after_days: int = 30
    urgent_after_days: int = 60


@dataclass
class LedgerConfig:
    """Main configuration for loan-ledger."""

    interest: InterestConfig = field(default_factory=InterestConfig)
    collateral: CollateralConfig = field(default_factory=CollateralConfig)
    reminders: ReminderConfig = field(default_factory=ReminderConfig)
    reject_overpayment: bool = False
    log_level: str = "INFO"

    def validate(self) -> None:
        """Check that all numeric settings are usable.

        Raises
        ------
        ConfigurationError
            If any setting is out of range.
        """
        if self.interest.days_per_month <= 0:
            raise ConfigurationError("days_per_month must be positive")
        if self.interest.minimum_months < 0:
            raise ConfigurationError("minimum_months cannot be negative")
        if self.collateral.gold_karat_base <= 0 or self.collateral.silver_fineness_base <= 0:
            raise ConfigurationError("purity bases must be positive")
        if self.reminders.udhari_interval_days <= 0:
            raise ConfigurationError("udhari_interval_days must be positive")

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        try:
            interest = InterestConfig(
                days_per_month=int(os.getenv("LEDGER_DAYS_PER_MONTH", "30")),
                minimum_months=int(os.getenv("LEDGER_MINIMUM_MONTHS", "1")),
            )
            collateral = CollateralConfig(
                closure_policy=ClosurePolicy(
                    os.getenv("LEDGER_CLOSURE_POLICY", ClosurePolicy.RELEASE_UNSELECTED.value).upper()
                ),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid ledger environment setting: {e}") from e

        config = cls(
            interest=interest,
            collateral=collateral,
            reject_overpayment=os.getenv("LEDGER_REJECT_OVERPAYMENT", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
        config.validate()
        return config
