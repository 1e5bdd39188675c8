"""Tests for the loan lifecycle engine."""

import logging
from datetime import timedelta
from decimal import Decimal

import pytest

from microlend.engine import LoanEngine
from microlend.exceptions import InvalidEntityStateError, LoanNotFoundError, ValidationError
from microlend.models import AuditAction, LoanStatus, TransactionType
from microlend.store import Book


def loan_entries(book: Book, loan_id: str) -> list:
    return [tx for tx in book.ledger if tx.loan_id == loan_id]


class TestOriginate:
    """Tests for LoanEngine.originate."""

    def test_creates_active_loan(self, loan, today) -> None:
        assert loan.status == LoanStatus.ACTIVE
        assert loan.principal == Decimal("1000.00")
        assert loan.total == Decimal("1200.00")
        assert loan.daily == Decimal("20.00")
        assert loan.balance == loan.total
        assert loan.interest_rate == Decimal("0.20")
        assert loan.date == today
        assert loan.collateral == "Unsecured"

    def test_persists_loan(self, book: Book, loan) -> None:
        assert book.loans.get(loan.loan_id) is loan
        assert "loans" in book.store.load()

    def test_emits_disbursement(self, book: Book, loan, collector, today) -> None:
        entries = loan_entries(book, loan.loan_id)

        assert len(entries) == 1
        tx = entries[0]
        assert tx.transaction_type == TransactionType.DISBURSEMENT
        assert tx.amount == Decimal("-1000.00")
        assert tx.description == "Loan: Maria Santos"
        assert tx.user == collector.name
        assert tx.simple_date == today

    def test_fees_booked_as_income(self, book: Book, engine: LoanEngine) -> None:
        loan = engine.originate(
            "Ana Reyes", "Poblacion", 2000, 40, "Juan", service_fee=40, delivery_charge="50.00"
        )
        entries = loan_entries(book, loan.loan_id)

        assert [tx.transaction_type for tx in entries] == [
            TransactionType.DISBURSEMENT,
            TransactionType.COLLECTION,
            TransactionType.COLLECTION,
        ]
        assert [tx.description for tx in entries[1:]] == [
            "Service Fee: Ana Reyes",
            "Delivery Charge: Ana Reyes",
        ]
        assert [tx.amount for tx in entries[1:]] == [Decimal("40.00"), Decimal("50.00")]
        assert all(tx.category == "Fee" for tx in entries[1:])
        # Fees never touch the balance
        assert loan.balance == Decimal("2200.00")

    def test_zero_fees_not_booked(self, book: Book, engine: LoanEngine) -> None:
        loan = engine.originate("Ana Reyes", "Poblacion", 2000, 30, "Juan", service_fee=0)

        assert len(loan_entries(book, loan.loan_id)) == 1

    def test_optional_attributes(self, engine: LoanEngine) -> None:
        loan = engine.originate(
            "Ana Reyes",
            "Poblacion",
            2000,
            30,
            "Juan",
            address="12 Rizal St",
            phone="0917 000 0000",
            collateral="Motorcycle OR/CR",
            notes="Sari-sari store",
        )

        assert loan.address == "12 Rizal St"
        assert loan.phone == "0917 000 0000"
        assert loan.collateral == "Motorcycle OR/CR"
        assert loan.notes == "Sari-sari store"

    def test_audited(self, book: Book, loan) -> None:
        last = book.audit.all()[-1]

        assert last.action == AuditAction.CREATE
        assert last.details == "New Loan Created: Maria Santos"

    @pytest.mark.parametrize(
        "name,area,principal",
        [("", "Poblacion", 1000), ("Ana", "  ", 1000), ("Ana", "Poblacion", 0), ("Ana", "Poblacion", -5)],
    )
    def test_validation_before_any_write(self, book: Book, engine: LoanEngine, name, area, principal) -> None:
        ledger_before = len(book.ledger)

        with pytest.raises(ValidationError):
            engine.originate(name, area, principal, 60, "Juan")

        assert len(book.loans) == 0
        assert len(book.ledger) == ledger_before

    def test_negative_fee_rejected(self, engine: LoanEngine) -> None:
        with pytest.raises(ValidationError):
            engine.originate("Ana", "Poblacion", 1000, 60, "Juan", service_fee=-1)


class TestApplyPayment:
    """Tests for LoanEngine.apply_payment."""

    def test_partial_payment(self, book: Book, engine: LoanEngine, loan) -> None:
        engine.apply_payment(loan.loan_id, 20, "Juan")

        assert loan.balance == Decimal("1180.00")
        assert loan.status == LoanStatus.ACTIVE
        tx = book.ledger.all()[-1]
        assert tx.transaction_type == TransactionType.COLLECTION
        assert tx.amount == Decimal("20.00")
        assert tx.description == "Payment: Maria Santos"
        assert tx.loan_id == loan.loan_id

    def test_exact_balance_closes_loan(self, engine: LoanEngine, loan) -> None:
        engine.apply_payment(loan.loan_id, loan.balance, "Juan")

        assert loan.balance == Decimal("0.00")
        assert loan.status == LoanStatus.PAID

    def test_repeat_payment_on_paid_loan_stays_at_zero(self, book: Book, engine: LoanEngine, loan, caplog) -> None:
        engine.apply_payment(loan.loan_id, loan.balance, "Juan")

        with caplog.at_level(logging.WARNING, logger="microlend.engine.lifecycle"):
            engine.apply_payment(loan.loan_id, 10, "Juan")

        assert loan.balance == Decimal("0.00")
        assert loan.status == LoanStatus.PAID
        assert book.ledger.all()[-1].amount == Decimal("10.00")
        assert "paid loan" in caplog.text

    def test_overpayment_clamps_balance_but_records_full_amount(self, book: Book, engine: LoanEngine, loan) -> None:
        engine.apply_payment(loan.loan_id, 1500, "Juan")

        assert loan.balance == Decimal("0.00")
        assert loan.status == LoanStatus.PAID
        assert book.ledger.all()[-1].amount == Decimal("1500.00")

    def test_within_tolerance_snaps_to_paid(self, engine: LoanEngine, loan) -> None:
        engine.apply_payment(loan.loan_id, "1199.60", "Juan")

        assert loan.balance == Decimal("0.00")
        assert loan.status == LoanStatus.PAID

    def test_outside_tolerance_stays_active(self, engine: LoanEngine, loan) -> None:
        engine.apply_payment(loan.loan_id, "1199.40", "Juan")

        assert loan.balance == Decimal("0.60")
        assert loan.status == LoanStatus.ACTIVE

    def test_several_payments_same_day_allowed(self, book: Book, engine: LoanEngine, loan) -> None:
        engine.apply_payment(loan.loan_id, 20, "Juan")
        engine.apply_payment(loan.loan_id, 20, "Juan")

        assert loan.balance == Decimal("1160.00")
        assert len([tx for tx in loan_entries(book, loan.loan_id) if tx.amount > 0]) == 2

    def test_effective_date(self, book: Book, engine: LoanEngine, loan, today) -> None:
        engine.apply_payment(loan.loan_id, 20, "Juan", day=today - timedelta(days=1))

        assert book.ledger.all()[-1].simple_date == today - timedelta(days=1)

    def test_balance_stays_within_bounds(self, engine: LoanEngine, loan) -> None:
        for amount in ("20", "333.33", "0.01", "500", "999", "1"):
            engine.apply_payment(loan.loan_id, amount, "Juan")
            assert Decimal("0") <= loan.balance <= loan.total
            assert (loan.status == LoanStatus.PAID) == (loan.balance == 0)

    def test_unknown_loan(self, engine: LoanEngine) -> None:
        with pytest.raises(LoanNotFoundError):
            engine.apply_payment("missing", 20, "Juan")

    @pytest.mark.parametrize("amount", [0, -20, "abc"])
    def test_invalid_amount(self, book: Book, engine: LoanEngine, loan, amount) -> None:
        ledger_before = len(book.ledger)

        with pytest.raises(ValidationError):
            engine.apply_payment(loan.loan_id, amount, "Juan")

        assert loan.balance == loan.total
        assert len(book.ledger) == ledger_before


class TestRefinance:
    """Tests for refinancing."""

    @pytest.fixture
    def owing_300(self, engine: LoanEngine, loan):
        engine.apply_payment(loan.loan_id, 900, "Juan")
        assert loan.balance == Decimal("300.00")
        return loan

    def test_quote(self, engine: LoanEngine, owing_300) -> None:
        quote = engine.quote_refinance(owing_300.loan_id, 1000, 60, service_fee=20)

        assert quote.old_balance == Decimal("300.00")
        assert quote.terms.total == Decimal("1200.00")
        assert quote.net_cash == Decimal("680.00")
        assert not quote.below_balance

    def test_quote_below_balance(self, engine: LoanEngine, owing_300) -> None:
        quote = engine.quote_refinance(owing_300.loan_id, 200, 30)

        assert quote.below_balance
        assert quote.net_cash == Decimal("-100.00")

    def test_quote_changes_nothing(self, book: Book, engine: LoanEngine, owing_300) -> None:
        ledger_before = len(book.ledger)

        engine.quote_refinance(owing_300.loan_id, 1000, 60)

        assert owing_300.status == LoanStatus.ACTIVE
        assert len(book.ledger) == ledger_before

    def test_closes_old_and_opens_new(self, book: Book, engine: LoanEngine, owing_300) -> None:
        new = engine.refinance(owing_300.loan_id, 1000, 60, 20, 0, "Juan")

        assert owing_300.balance == Decimal("0.00")
        assert owing_300.status == LoanStatus.PAID
        assert new.status == LoanStatus.ACTIVE
        assert new.total == Decimal("1200.00")
        assert new.daily == Decimal("20.00")
        assert new.balance == new.total
        assert new.refinanced_from == owing_300.loan_id
        assert new.name == owing_300.name
        assert new.area == owing_300.area
        assert new.notes == "Refinanced from previous loan."
        assert len(book.loans) == 2

    def test_ledger_order(self, book: Book, engine: LoanEngine, owing_300) -> None:
        ledger_before = len(book.ledger)

        new = engine.refinance(owing_300.loan_id, 1000, 60, 20, 10, "Juan")

        entries = book.ledger.all()[ledger_before:]
        assert [(tx.transaction_type, tx.description, tx.amount, tx.loan_id) for tx in entries] == [
            (TransactionType.COLLECTION, "Refinance Payment: Maria Santos", Decimal("300.00"), owing_300.loan_id),
            (TransactionType.DISBURSEMENT, "Refinance Loan: Maria Santos", Decimal("-1000.00"), new.loan_id),
            (TransactionType.COLLECTION, "Service Fee (Ref): Maria Santos", Decimal("20.00"), new.loan_id),
            (TransactionType.COLLECTION, "Delivery Charge (Ref): Maria Santos", Decimal("10.00"), new.loan_id),
        ]

    def test_net_cash_matches_ledger(self, book: Book, engine: LoanEngine, owing_300) -> None:
        ledger_before = len(book.ledger)

        engine.refinance(owing_300.loan_id, 1000, 60, 20, 0, "Juan")

        net_out = -sum(tx.amount for tx in book.ledger.all()[ledger_before:])
        assert net_out == Decimal("680.00")

    def test_audited(self, book: Book, engine: LoanEngine, owing_300) -> None:
        engine.refinance(owing_300.loan_id, 1000, 60, 0, 0, "Juan")

        last = book.audit.all()[-1]
        assert last.action == AuditAction.UPDATE
        assert last.details == "Loan Refinanced: Maria Santos"

    def test_below_balance_warns(self, engine: LoanEngine, owing_300, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="microlend.engine.lifecycle"):
            engine.refinance(owing_300.loan_id, 200, 30, 0, 0, "Juan")

        assert "below outstanding balance" in caplog.text

    def test_paid_loan_cannot_be_refinanced(self, engine: LoanEngine, loan) -> None:
        engine.apply_payment(loan.loan_id, loan.balance, "Juan")

        with pytest.raises(InvalidEntityStateError):
            engine.refinance(loan.loan_id, 1000, 60, 0, 0, "Juan")

    def test_unknown_loan(self, engine: LoanEngine) -> None:
        with pytest.raises(LoanNotFoundError):
            engine.refinance("missing", 1000, 60, 0, 0, "Juan")


class TestDeleteLoan:
    """Tests for administrative delete."""

    def test_removes_loan_keeps_ledger(self, book: Book, engine: LoanEngine, loan) -> None:
        ledger_before = len(book.ledger)

        engine.delete_loan(loan.loan_id)

        assert loan.loan_id not in book.loans
        assert len(book.ledger) == ledger_before
        assert book.audit.all()[-1].action == AuditAction.DELETE
        assert loan.loan_id not in book.store.load()["loans"]

    def test_unknown_loan(self, engine: LoanEngine) -> None:
        with pytest.raises(LoanNotFoundError):
            engine.delete_loan("missing")
