"""Direct ledger operations: manual entries, capital, expenses and investors."""

import logging
from datetime import date
from decimal import Decimal

from microlend.engine.base import (
    BookService,
    parse_amount,
    require_positive,
    require_text,
)
from microlend.exceptions import ValidationError
from microlend.models import AuditAction, Investor, Transaction, TransactionType
from microlend.utils import ZERO, new_id, to_money

logger = logging.getLogger(__name__)

DEFAULT_EXPENSE_CATEGORY = "Operational"


class LedgerService(BookService):
    """Append money movements that do not originate from a loan."""

    def add_entry(
        self,
        transaction_type: TransactionType | str,
        description: str,
        amount: Decimal | int | str,
        actor: str,
        day: date | None = None,
        category: str | None = None,
        loan_id: str | None = None,
    ) -> Transaction:
        """Append a ledger entry with an explicit signed amount.

        Parameters
        ----------
        transaction_type : TransactionType | str
            Entry type (``"Expense"``, ``"Capital"``, ...).
        description : str
            Free-text description, required.
        amount : Decimal | int | str
            Signed amount: positive is inflow, negative is outflow. Zero is
            rejected.
        actor : str
            Name of the user recording the entry.
        day : date | None
            Booking date; defaults to today.
        category : str | None
            Optional category tag.
        loan_id : str | None
            Loan the entry belongs to, if any.

        Returns
        -------
        Transaction
            The appended entry.
        """
        try:
            entry_type = TransactionType(transaction_type)
        except ValueError as e:
            raise ValidationError(f"Unknown transaction type {transaction_type!r}") from e
        description = require_text(description, "Description")
        actor = require_text(actor, "Actor")
        value = parse_amount(amount, "Amount")
        if value == ZERO:
            raise ValidationError("Ledger amount cannot be zero")
        if loan_id is not None:
            self.book.loans.get(loan_id)

        transaction = self._post(
            entry_type, description, value, actor, day=day, category=category, loan_id=loan_id
        )
        logger.debug("Ledger %s %s by %s", entry_type.value, value, actor)
        return transaction

    def add_capital(self, amount: Decimal | int | str, actor: str) -> Transaction:
        """Record an internal capital injection."""
        value = require_positive(amount, "Capital amount")
        actor = require_text(actor, "Actor")

        transaction = self._post(TransactionType.CAPITAL, "Internal Capital Injection", value, actor)
        self._audit(AuditAction.UPDATE, f"Injected Capital: {value}", actor)
        logger.info("Capital injected: %s by %s", value, actor)
        return transaction

    def add_expense(
        self,
        description: str,
        amount: Decimal | int | str,
        actor: str,
        category: str = DEFAULT_EXPENSE_CATEGORY,
        day: date | None = None,
    ) -> Transaction:
        """Record an operating expense; ``amount`` is given positive."""
        description = require_text(description, "Description")
        value = require_positive(amount, "Expense amount")
        actor = require_text(actor, "Actor")

        return self._post(
            TransactionType.EXPENSE,
            description,
            -value,
            actor,
            day=day,
            category=category or DEFAULT_EXPENSE_CATEGORY,
        )

    def add_investor(
        self,
        name: str,
        capital_invested: Decimal | int | str,
        dividend_rate: Decimal | int | str,
        actor: str = "Admin",
        date_joined: date | None = None,
    ) -> Investor:
        """Register an investor and book their capital."""
        name = require_text(name, "Investor name")
        capital = require_positive(capital_invested, "Capital invested")
        rate = _rate(dividend_rate)

        investor = Investor(
            investor_id=new_id(),
            name=name,
            capital_invested=capital,
            date_joined=date_joined or self.today(),
            dividend_rate=rate,
        )
        self.book.investors.add(investor)
        self._post(TransactionType.CAPITAL, f"Investment: {name}", capital, actor)
        self._audit(AuditAction.CREATE, f"New Investor Added: {name}", actor)
        logger.info("Investor %s added with capital %s", name, capital)
        return investor

    def pay_dividend(
        self,
        investor_id: str,
        amount: Decimal | int | str,
        actor: str = "Admin",
    ) -> Transaction:
        """Pay a dividend and accumulate it on the investor."""
        value = require_positive(amount, "Dividend amount")
        investor = self.book.investors.get(investor_id)

        investor.total_payouts = to_money(investor.total_payouts + value)
        self.book.investors.save(investor)
        transaction = self._post(TransactionType.DIVIDEND, f"Payout: {investor.name}", -value, actor)
        self._audit(AuditAction.UPDATE, f"Dividend Paid: {investor.name}", actor)
        logger.info("Dividend %s paid to %s", value, investor.name)
        return transaction


def projected_dividend(investor: Investor) -> Decimal:
    """One period's dividend: capital times the investor's percentage rate."""
    return to_money(investor.capital_invested * investor.dividend_rate / 100)


def _rate(value: Decimal | int | str) -> Decimal:
    try:
        rate = Decimal(str(value))
    except ArithmeticError as e:
        raise ValidationError(f"Dividend rate is not a number: {value!r}") from e
    if not rate.is_finite() or rate < 0:
        raise ValidationError(f"Dividend rate must be a non-negative percentage, got {value!r}")
    return rate
