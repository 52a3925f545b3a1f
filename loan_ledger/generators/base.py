"""Shared plumbing for the synthetic data generators."""

from __future__ import annotations

import random
from abc import ABC
from decimal import Decimal
from typing import Sequence, TypeVar

from faker import Faker

T = TypeVar("T")


class BaseGenerator(ABC):
    """Base class for the customer, collateral and loan generators.

    Names, cities and ids come from an Indian-locale Faker; every numeric
    draw goes through ``self.rng`` so a seed reproduces a portfolio
    exactly without touching the global ``random`` state.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_IN``).
    """

    # Added to the seed so generators sharing one seed draw distinct ids
    SEED_OFFSET = 0

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_IN",
    ) -> None:
        if seed is not None:
            seed += self.SEED_OFFSET
        self.fake = Faker(locale)
        self.rng = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def decimal_between(self, low: float, high: float, places: int = 3) -> Decimal:
        """Uniform draw rounded to ``places`` and returned as an exact Decimal."""
        return Decimal(str(round(self.rng.uniform(low, high), places)))

    def weighted_choice(self, options: Sequence[T], weights: Sequence[float]) -> T:
        return self.rng.choices(options, weights=weights, k=1)[0]
