"""Loan contract model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from microlend.models.enums import LoanStatus


@dataclass
class Loan:
    """Cash loan disbursed to a borrower and collected daily."""

    loan_id: str
    name: str  # Borrower name
    area: str  # Route/zone; links the loan to one collector
    principal: Decimal  # Amount disbursed before fees
    term: int  # Days: 30, 40 or 60
    interest_rate: Decimal
    total: Decimal  # principal + interest
    daily: Decimal  # ceil(total / term)
    balance: Decimal  # Remaining amount owed, in [0, total]
    date: date  # Origination date
    status: LoanStatus = LoanStatus.ACTIVE
    address: str = ""
    phone: str = ""
    service_fee: Decimal = Decimal("0.00")
    delivery_charge: Decimal = Decimal("0.00")
    collateral: str = "Unsecured"
    notes: str = ""
    refinanced_from: str | None = None  # Predecessor loan id

    @property
    def collected(self) -> Decimal:
        """Amount repaid so far."""
        return self.total - self.balance

    @property
    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE
