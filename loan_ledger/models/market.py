"""Market price quote supplied by an external price feed."""

from dataclasses import dataclass
from datetime import datetime

from loan_ledger.exceptions import InvalidAmountError
from loan_ledger.models.enums import Metal


@dataclass(frozen=True)
class MarketPrice:
    """Spot price per gram of pure metal."""

    metal: Metal
    price_per_gram_minor_units: int
    quoted_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.price_per_gram_minor_units <= 0:
            raise InvalidAmountError(f"{self.metal.value} price per gram must be positive")
