"""Money and calendar helpers shared by the engine and reports."""

import uuid
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from microlend.models import Loan, LoanStatus

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Coerce a number or numeric string to a 2-place Decimal.

    Floats go through ``str`` first so 0.1 stays 0.10 rather than the
    binary expansion.
    """
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        amount = Decimal(str(value))
    else:
        amount = Decimal(value)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal | int | float, symbol: str = "₱") -> str:
    """Format an amount as ``₱1,234.50``; negatives as ``-₱1,234.50``."""
    value = to_money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def today() -> date:
    return date.today()


def new_id() -> str:
    """Opaque unique id for a new record."""
    return uuid.uuid4().hex


def month_key(day: date) -> str:
    """``YYYY-MM`` bucket used for monthly filters."""
    return day.strftime("%Y-%m")


def parse_month(month: str) -> tuple[int, int]:
    """Split a ``YYYY-MM`` string into ``(year, month)``."""
    parsed = datetime.strptime(month, "%Y-%m")
    return parsed.year, parsed.month


def due_date(origination: date, term_days: int) -> date:
    return origination + timedelta(days=term_days)


def overdue_days(loan: Loan, on: date | None = None) -> int:
    """Whole days past the due date; 0 for paid loans or before due.

    Parameters
    ----------
    loan : Loan
        Loan to check.
    on : date | None
        Reference day (defaults to today).
    """
    if loan.status != LoanStatus.ACTIVE:
        return 0
    reference = on or today()
    late = (reference - due_date(loan.date, loan.term)).days
    return late if late > 0 else 0


def is_overdue(loan: Loan, on: date | None = None) -> bool:
    return overdue_days(loan, on) > 0
