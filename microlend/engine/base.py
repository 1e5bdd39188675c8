"""Base class for engine services operating on a book."""

from __future__ import annotations

from abc import ABC
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable

from microlend.exceptions import ValidationError
from microlend.models import AuditAction, AuditLog, Transaction, TransactionType
from microlend.store.book import Book
from microlend.utils import ZERO, new_id, to_money


class BookService(ABC):
    """Common plumbing for services that mutate a :class:`Book`.

    Provides the injectable clock, ledger posting and audit logging.
    Each public operation validates its input before touching state.

    Parameters
    ----------
    book : Book
        State the service reads and writes.
    clock : Callable[[], datetime] | None
        Returns "now"; defaults to ``datetime.now``.
    """

    def __init__(self, book: Book, clock: Callable[[], datetime] | None = None) -> None:
        self.book = book
        self.clock = clock or datetime.now

    def now(self) -> datetime:
        return self.clock()

    def today(self) -> date:
        return self.clock().date()

    def _post(
        self,
        transaction_type: TransactionType,
        description: str,
        amount: Decimal,
        actor: str,
        *,
        day: date | None = None,
        category: str | None = None,
        loan_id: str | None = None,
    ) -> Transaction:
        transaction = Transaction(
            transaction_id=new_id(),
            timestamp=self.now(),
            simple_date=day or self.today(),
            transaction_type=transaction_type,
            description=description,
            amount=to_money(amount),
            user=actor,
            category=category,
            loan_id=loan_id,
        )
        return self.book.record(transaction)

    def _audit(self, action: AuditAction, details: str, user: str) -> AuditLog:
        return self.book.log(
            AuditLog(
                audit_id=new_id(),
                timestamp=self.now(),
                user=user,
                action=action,
                details=details,
            )
        )


def require_text(value: Any, field_name: str) -> str:
    """Return ``value`` stripped, rejecting missing or blank text."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_positive(value: Any, field_name: str) -> Decimal:
    amount = parse_amount(value, field_name)
    if amount <= ZERO:
        raise ValidationError(f"{field_name} must be positive, got {amount}")
    return amount


def require_non_negative(value: Any, field_name: str) -> Decimal:
    amount = parse_amount(value if value is not None else ZERO, field_name)
    if amount < ZERO:
        raise ValidationError(f"{field_name} cannot be negative, got {amount}")
    return amount


def parse_amount(value: Any, field_name: str) -> Decimal:
    """Parse an amount to 2-place Decimal or raise ValidationError."""
    try:
        amount = to_money(value)
    except (ArithmeticError, ValueError, TypeError) as e:
        raise ValidationError(f"{field_name} is not a valid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValidationError(f"{field_name} is not a valid amount: {value!r}")
    return amount
