"""Loan lifecycle: origination, payments, refinancing and deletion.

A loan moves ``Active -> Paid`` and never reopens. Refinancing closes the
old loan and opens a successor for the same borrower, netting the old
balance against the new principal.

Every operation validates its arguments before it touches the book, then
updates the loan and appends the matching ledger entries. Ledger entries
carry the ``loan_id`` they belong to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from microlend.engine.base import (
    BookService,
    require_non_negative,
    require_positive,
    require_text,
)
from microlend.engine.terms import LoanTerms, compute_terms, net_proceeds
from microlend.exceptions import InvalidEntityStateError
from microlend.models import AuditAction, Loan, LoanStatus, TransactionType
from microlend.utils import ZERO, new_id

logger = logging.getLogger(__name__)

# Balances at or below this are treated as fully paid; absorbs the
# rounding left over by whole-unit daily installments.
PAID_TOLERANCE = Decimal("0.50")

DEFAULT_COLLATERAL = "Unsecured"
REFINANCE_NOTE = "Refinanced from previous loan."
FEE_CATEGORY = "Fee"


@dataclass(frozen=True)
class RefinanceQuote:
    """Preview of a refinance, for the caller to confirm."""

    old_loan_id: str
    old_balance: Decimal
    terms: LoanTerms
    service_fee: Decimal
    delivery_charge: Decimal
    net_cash: Decimal  # Negative when the borrower owes a top-up

    @property
    def below_balance(self) -> bool:
        """New principal does not cover the old balance."""
        return self.terms.principal < self.old_balance


class LoanEngine(BookService):
    """State machine for loans, writing the ledger as it goes."""

    def originate(
        self,
        name: str,
        area: str,
        principal: Decimal | int | str,
        term: int,
        actor: str,
        *,
        address: str = "",
        phone: str = "",
        service_fee: Decimal | int | str = ZERO,
        delivery_charge: Decimal | int | str = ZERO,
        collateral: str | None = None,
        notes: str = "",
        day: date | None = None,
    ) -> Loan:
        """Disburse a new loan.

        Parameters
        ----------
        name : str
            Borrower name, required.
        area : str
            Route the borrower belongs to, required.
        principal : Decimal | int | str
            Amount lent, must be positive.
        term : int
            Term in days (30, 40 or 60; other values use the 60-day rate).
        actor : str
            User performing the disbursement.
        service_fee, delivery_charge : Decimal | int | str
            Deducted from the cash handed over and booked as fee income.
        collateral : str | None
            Free text; defaults to ``"Unsecured"``.
        day : date | None
            Origination date; defaults to today.

        Returns
        -------
        Loan
            The new ``Active`` loan with ``balance == total``.
        """
        name = require_text(name, "Borrower name")
        area = require_text(area, "Area")
        actor = require_text(actor, "Actor")
        fee = require_non_negative(service_fee, "Service fee")
        delivery = require_non_negative(delivery_charge, "Delivery charge")
        terms = compute_terms(require_positive(principal, "Principal"), term)

        loan = Loan(
            loan_id=new_id(),
            name=name,
            area=area,
            principal=terms.principal,
            term=terms.term,
            interest_rate=terms.rate,
            total=terms.total,
            daily=terms.daily,
            balance=terms.total,
            date=day or self.today(),
            address=address or "",
            phone=phone or "",
            service_fee=fee,
            delivery_charge=delivery,
            collateral=collateral or DEFAULT_COLLATERAL,
            notes=notes or "",
        )
        self.book.loans.add(loan)

        self._post(
            TransactionType.DISBURSEMENT, f"Loan: {name}", -terms.principal, actor, loan_id=loan.loan_id
        )
        self._post_fees(loan, fee, delivery, actor, refinance=False)
        self._audit(AuditAction.CREATE, f"New Loan Created: {name}", actor)

        logger.info(
            "Originated loan %s for %s: principal=%s term=%d total=%s daily=%s",
            loan.loan_id,
            name,
            loan.principal,
            loan.term,
            loan.total,
            loan.daily,
        )
        return loan

    def apply_payment(
        self,
        loan_id: str,
        amount: Decimal | int | str,
        actor: str,
        day: date | None = None,
    ) -> Loan:
        """Apply a collection against a loan's balance.

        The balance reduction is clamped to ``balance + 0.50`` and snaps to
        zero (``Paid``) at or below the tolerance, so the balance never goes
        negative. The ledger always records the full requested ``amount``,
        even when the balance reduction was clamped.

        Several payments on the same day are allowed.
        """
        value = require_positive(amount, "Payment amount")
        actor = require_text(actor, "Actor")
        loan = self.book.loans.get(loan_id)

        if loan.status == LoanStatus.PAID:
            logger.warning("Payment of %s recorded against paid loan %s", value, loan_id)

        applied = min(value, loan.balance + PAID_TOLERANCE)
        new_balance = loan.balance - applied
        if new_balance <= PAID_TOLERANCE:
            new_balance = ZERO
            loan.status = LoanStatus.PAID
        loan.balance = new_balance
        self.book.loans.save(loan)

        self._post(
            TransactionType.COLLECTION,
            f"Payment: {loan.name}",
            value,
            actor,
            day=day,
            loan_id=loan.loan_id,
        )
        logger.debug(
            "Payment %s on loan %s by %s, balance now %s (%s)",
            value,
            loan_id,
            actor,
            loan.balance,
            loan.status.value,
        )
        return loan

    def quote_refinance(
        self,
        old_loan_id: str,
        new_principal: Decimal | int | str,
        new_term: int,
        service_fee: Decimal | int | str = ZERO,
        delivery_charge: Decimal | int | str = ZERO,
    ) -> RefinanceQuote:
        """Compute a refinance without changing anything."""
        fee = require_non_negative(service_fee, "Service fee")
        delivery = require_non_negative(delivery_charge, "Delivery charge")
        terms = compute_terms(require_positive(new_principal, "New principal"), new_term)
        old = self.book.loans.get(old_loan_id)
        if old.status != LoanStatus.ACTIVE:
            raise InvalidEntityStateError(f"Loan {old_loan_id} is already {old.status.value}")

        return RefinanceQuote(
            old_loan_id=old.loan_id,
            old_balance=old.balance,
            terms=terms,
            service_fee=fee,
            delivery_charge=delivery,
            net_cash=net_proceeds(terms.principal, fee, delivery, carried_balance=old.balance),
        )

    def refinance(
        self,
        old_loan_id: str,
        new_principal: Decimal | int | str,
        new_term: int,
        service_fee: Decimal | int | str,
        delivery_charge: Decimal | int | str,
        actor: str,
    ) -> Loan:
        """Close a loan and open its successor.

        Ledger entries, in order: Collection of the old balance, Disbursement
        of the new principal, then the fee entries. The old loan ends at
        balance 0 / ``Paid``. The borrower's identity, area, address, phone
        and collateral carry over.

        Returns
        -------
        Loan
            The new ``Active`` loan.
        """
        actor = require_text(actor, "Actor")
        quote = self.quote_refinance(old_loan_id, new_principal, new_term, service_fee, delivery_charge)
        old = self.book.loans.get(old_loan_id)

        if quote.below_balance:
            logger.warning(
                "Refinance of %s: new principal %s is below outstanding balance %s (net cash %s)",
                old_loan_id,
                quote.terms.principal,
                quote.old_balance,
                quote.net_cash,
            )

        old.balance = ZERO
        old.status = LoanStatus.PAID
        self.book.loans.save(old)

        terms = quote.terms
        new = Loan(
            loan_id=new_id(),
            name=old.name,
            area=old.area,
            principal=terms.principal,
            term=terms.term,
            interest_rate=terms.rate,
            total=terms.total,
            daily=terms.daily,
            balance=terms.total,
            date=self.today(),
            address=old.address,
            phone=old.phone,
            service_fee=quote.service_fee,
            delivery_charge=quote.delivery_charge,
            collateral=old.collateral,
            notes=REFINANCE_NOTE,
            refinanced_from=old.loan_id,
        )
        self.book.loans.add(new)

        self._post(
            TransactionType.COLLECTION,
            f"Refinance Payment: {old.name}",
            quote.old_balance,
            actor,
            loan_id=old.loan_id,
        )
        self._post(
            TransactionType.DISBURSEMENT,
            f"Refinance Loan: {new.name}",
            -terms.principal,
            actor,
            loan_id=new.loan_id,
        )
        self._post_fees(new, quote.service_fee, quote.delivery_charge, actor, refinance=True)
        self._audit(AuditAction.UPDATE, f"Loan Refinanced: {old.name}", actor)

        logger.info(
            "Refinanced loan %s into %s for %s: carried=%s principal=%s net_cash=%s",
            old.loan_id,
            new.loan_id,
            new.name,
            quote.old_balance,
            terms.principal,
            quote.net_cash,
        )
        return new

    def delete_loan(self, loan_id: str, actor: str = "Admin") -> Loan:
        """Remove a loan outright; the ledger is left as is."""
        loan = self.book.loans.remove(loan_id)
        self._audit(AuditAction.DELETE, f"Loan Deleted: {loan.name}", actor)
        logger.info("Deleted loan %s (%s) with balance %s", loan_id, loan.name, loan.balance)
        return loan

    def _post_fees(
        self,
        loan: Loan,
        service_fee: Decimal,
        delivery_charge: Decimal,
        actor: str,
        *,
        refinance: bool,
    ) -> None:
        suffix = " (Ref)" if refinance else ""
        if service_fee > ZERO:
            self._post(
                TransactionType.COLLECTION,
                f"Service Fee{suffix}: {loan.name}",
                service_fee,
                actor,
                category=FEE_CATEGORY,
                loan_id=loan.loan_id,
            )
        if delivery_charge > ZERO:
            self._post(
                TransactionType.COLLECTION,
                f"Delivery Charge{suffix}: {loan.name}",
                delivery_charge,
                actor,
                category=FEE_CATEGORY,
                loan_id=loan.loan_id,
            )
