"""Heuristic credit score derived from a loan and its ledger history."""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from microlend.models import Loan, Transaction, TransactionType
from microlend.utils import overdue_days

BASE_SCORE = Decimal(70)
PROGRESS_WEIGHT = Decimal(20)
CURRENT_BONUS = Decimal(5)
LATE_PENALTY_PER_DAY = Decimal(2)
ACTIVITY_TIERS = ((5, Decimal(5)), (10, Decimal(5)))

# (minimum score, label), checked top-down
LABEL_TIERS = (
    (90, "Elite"),
    (70, "Good"),
    (50, "Fair"),
)
FALLBACK_LABEL = "Risk"


@dataclass(frozen=True)
class CreditScore:
    score: int
    label: str
    payment_count: int
    days_late: int


def score_label(score: int) -> str:
    for floor, label in LABEL_TIERS:
        if score >= floor:
            return label
    return FALLBACK_LABEL


def count_payments(loan: Loan, ledger: Iterable[Transaction]) -> int:
    """Number of Collection entries linked to the loan."""
    return sum(
        1
        for tx in ledger
        if tx.transaction_type == TransactionType.COLLECTION and tx.loan_id == loan.loan_id
    )


def credit_score(loan: Loan, ledger: Iterable[Transaction], on: date | None = None) -> CreditScore:
    """Score a borrower 0-100 from repayment progress, lateness and activity.

    Parameters
    ----------
    loan : Loan
        Loan being scored.
    ledger : Iterable[Transaction]
        Ledger history; only Collection entries for this loan count.
    on : date | None
        Reference day for lateness (defaults to today).

    Returns
    -------
    CreditScore
        Clamped score with its label tier.
    """
    score = BASE_SCORE

    if loan.total > 0:
        score += PROGRESS_WEIGHT * (1 - loan.balance / loan.total)

    days_late = overdue_days(loan, on)
    if days_late > 0:
        score -= LATE_PENALTY_PER_DAY * days_late
    else:
        score += CURRENT_BONUS

    payments = count_payments(loan, ledger)
    for threshold, bonus in ACTIVITY_TIERS:
        if payments > threshold:
            score += bonus

    rounded = int(score.to_integral_value(rounding=ROUND_HALF_UP))
    clamped = min(100, max(0, rounded))
    return CreditScore(
        score=clamped,
        label=score_label(clamped),
        payment_count=payments,
        days_late=days_late,
    )
