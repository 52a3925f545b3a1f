"""Customer model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Customer:
    """Pawnbroking customer."""

    customer_id: str
    name: str
    phone: str
    city: str
    created_at: datetime
    state: str = ""
