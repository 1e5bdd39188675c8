"""Ledger entry model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from microlend.models.enums import TransactionType


@dataclass(frozen=True)
class Transaction:
    """Immutable ledger entry.

    ``amount`` is signed: positive is cash coming into the business,
    negative is cash going out. The sum over the whole ledger is the
    system liquidity.
    """

    transaction_id: str
    timestamp: datetime
    simple_date: date  # Calendar date used for filtering and grouping
    transaction_type: TransactionType
    description: str
    amount: Decimal
    user: str  # Actor name
    category: str | None = None
    loan_id: str | None = None

    @property
    def is_inflow(self) -> bool:
        return self.amount > 0
