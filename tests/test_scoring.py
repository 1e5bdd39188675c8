"""Tests for the credit score heuristic."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from microlend.engine.scoring import count_payments, credit_score, score_label
from microlend.models import LoanStatus, Transaction, TransactionType


def collection(loan_id: str | None, n: int = 0, kind: TransactionType = TransactionType.COLLECTION) -> Transaction:
    return Transaction(
        transaction_id=f"tx-{loan_id}-{n}",
        timestamp=datetime(2024, 3, 1, 10, 0),
        simple_date=date(2024, 3, 1),
        transaction_type=kind,
        description="Payment: Maria Santos",
        amount=Decimal("20.00"),
        user="Juan",
        loan_id=loan_id,
    )


class TestScoreLabel:
    """Label tiers."""

    @pytest.mark.parametrize(
        "score,label",
        [(100, "Elite"), (90, "Elite"), (89, "Good"), (70, "Good"), (69, "Fair"), (50, "Fair"), (49, "Risk"), (0, "Risk")],
    )
    def test_tiers(self, score: int, label: str) -> None:
        assert score_label(score) == label


class TestCountPayments:
    """payment_count is linked by loan id."""

    def test_counts_only_collections_for_loan(self, make_loan) -> None:
        loan = make_loan()
        ledger = [
            collection(loan.loan_id, 1),
            collection(loan.loan_id, 2),
            collection("other-loan", 3),
            collection(None, 4),
            collection(loan.loan_id, 5, kind=TransactionType.DISBURSEMENT),
        ]

        assert count_payments(loan, ledger) == 2


class TestCreditScore:
    """Tests for credit_score."""

    def test_new_loan_scores_75(self, make_loan) -> None:
        loan = make_loan(date=date(2024, 3, 1))

        result = credit_score(loan, [], on=date(2024, 3, 1))

        assert result.score == 75
        assert result.label == "Good"
        assert result.payment_count == 0
        assert result.days_late == 0

    def test_fully_paid_with_many_payments_clamps_to_100(self, make_loan) -> None:
        loan = make_loan(balance=Decimal("0.00"), status=LoanStatus.PAID)
        ledger = [collection(loan.loan_id, i) for i in range(11)]

        result = credit_score(loan, ledger, on=date(2025, 1, 1))

        assert result.score == 100
        assert result.label == "Elite"
        assert result.payment_count == 11

    def test_progress_adds_up_to_twenty(self, make_loan) -> None:
        loan = make_loan(balance=Decimal("600.00"))

        assert credit_score(loan, [], on=date(2024, 3, 2)).score == 85

    def test_late_penalty(self, make_loan) -> None:
        loan = make_loan(date=date(2024, 1, 1), term=30)

        result = credit_score(loan, [], on=date(2024, 2, 5))

        assert result.days_late == 5
        assert result.score == 60
        assert result.label == "Fair"

    def test_activity_bonus_after_five_payments(self, make_loan) -> None:
        loan = make_loan()
        ledger = [collection(loan.loan_id, i) for i in range(6)]

        assert credit_score(loan, ledger, on=date(2024, 3, 2)).score == 80

    def test_clamped_at_zero(self, make_loan) -> None:
        loan = make_loan(date=date(2023, 1, 1), term=30)

        result = credit_score(loan, [], on=date(2024, 1, 1))

        assert result.score == 0
        assert result.label == "Risk"
