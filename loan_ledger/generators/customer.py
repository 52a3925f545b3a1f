"""Customer generator."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterator

from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models import Customer


class CustomerGenerator(BaseGenerator):
    """Generate synthetic pawnbroking customers."""

    def generate(self, created_before: datetime | None = None) -> Customer:
        """Generate a single customer.

        Parameters
        ----------
        created_before : datetime | None
            Upper bound for the registration timestamp (defaults to now).

        Returns
        -------
        Customer
            Generated customer.
        """
        created_before = created_before or datetime.now()
        return Customer(
            customer_id=self.fake.uuid4(),
            name=self.fake.name(),
            phone=f"{self.rng.randint(6, 9)}{self.rng.randint(0, 999_999_999):09d}",
            city=self.fake.city(),
            state=self.fake.state(),
            created_at=created_before - timedelta(days=self.rng.randint(30, 3 * 365)),
        )

    def generate_batch(self, count: int, created_before: datetime | None = None) -> Iterator[Customer]:
        """Generate multiple customers.

        Yields
        ------
        Customer
            Generated customers.
        """
        for _ in range(count):
            yield self.generate(created_before)
