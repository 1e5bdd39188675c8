"""Collector performance views: daily quota, rankings and payroll preview."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from microlend.exceptions import ValidationError
from microlend.models import (
    Attendance,
    AttendanceStatus,
    Collector,
    Loan,
    LoanStatus,
    Transaction,
    TransactionType,
)
from microlend.utils import ZERO, month_key, to_money, today

# Two-month ranking periods: (label, months)
BIMONTHLY_PERIODS: tuple[tuple[str, tuple[int, int]], ...] = (
    ("Jan - Feb", (1, 2)),
    ("Mar - Apr", (3, 4)),
    ("May - Jun", (5, 6)),
    ("Jul - Aug", (7, 8)),
    ("Sep - Oct", (9, 10)),
    ("Nov - Dec", (11, 12)),
)


@dataclass(frozen=True)
class QuotaProgress:
    """One collector's collections for one day against their quota."""

    collector_id: str
    name: str
    area: str
    day: date
    quota: Decimal
    collected: Decimal
    paid_count: int  # Active area loans with a collection that day
    unpaid_count: int

    @property
    def attainment(self) -> Decimal:
        """Collected / quota; 0 when no quota is set."""
        if self.quota <= 0:
            return ZERO
        return (self.collected / self.quota).quantize(Decimal("0.0001"))

    @property
    def quota_met(self) -> bool:
        return self.quota > 0 and self.collected >= self.quota


@dataclass(frozen=True)
class RankingEntry:
    rank: int
    collector: Collector
    total_collected: Decimal
    today: QuotaProgress


@dataclass(frozen=True)
class PayrollLine:
    """Computed pay for one employee and month, before it is processed."""

    employee_id: str
    employee_name: str
    month: str
    days_present: int
    daily_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal


def has_paid_on(loan: Loan, ledger: Iterable[Transaction], day: date) -> bool:
    """Whether any collection for ``loan`` was booked on ``day``."""
    return any(
        tx.transaction_type == TransactionType.COLLECTION
        and tx.loan_id == loan.loan_id
        and tx.simple_date == day
        for tx in ledger
    )


def collected_by(
    ledger: Iterable[Transaction],
    collector: Collector,
    days: Iterable[date] | None = None,
) -> Decimal:
    """Sum of collections recorded by the collector (optionally on given days)."""
    wanted = set(days) if days is not None else None
    return sum(
        (
            tx.amount
            for tx in ledger
            if tx.transaction_type == TransactionType.COLLECTION
            and tx.user == collector.name
            and (wanted is None or tx.simple_date in wanted)
        ),
        ZERO,
    )


def daily_quota(
    collector: Collector,
    ledger: Iterable[Transaction],
    loans: Iterable[Loan],
    day: date | None = None,
) -> QuotaProgress:
    """Today's collections for a collector, matched on the ``user`` field."""
    reference = day or today()
    entries = list(ledger)
    area_loans = [
        loan for loan in loans if loan.status == LoanStatus.ACTIVE and loan.area == collector.area
    ]
    paid = sum(1 for loan in area_loans if has_paid_on(loan, entries, reference))

    return QuotaProgress(
        collector_id=collector.collector_id,
        name=collector.name,
        area=collector.area,
        day=reference,
        quota=collector.quota,
        collected=collected_by(entries, collector, [reference]),
        paid_count=paid,
        unpaid_count=len(area_loans) - paid,
    )


def period_index(month: int) -> int:
    """Index into :data:`BIMONTHLY_PERIODS` for a calendar month."""
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be 1-12, got {month}")
    return (month - 1) // 2


def ranking(
    collectors: Iterable[Collector],
    ledger: Iterable[Transaction],
    loans: Iterable[Loan],
    period: int,
    year: int,
    on: date | None = None,
) -> list[RankingEntry]:
    """Rank collectors by collections in a bi-monthly period, highest first.

    Parameters
    ----------
    collectors : Iterable[Collector]
        Candidates; admin accounts are skipped.
    ledger : Iterable[Transaction]
        Ledger history.
    loans : Iterable[Loan]
        Loans, for today's paid/unpaid counts.
    period : int
        Index into :data:`BIMONTHLY_PERIODS`.
    year : int
        Calendar year of the period.
    on : date | None
        Day used for the per-collector daily progress.

    Raises
    ------
    ValidationError
        If ``period`` is not an index into :data:`BIMONTHLY_PERIODS`.
    """
    valid = isinstance(period, int) and not isinstance(period, bool)
    if not valid or not 0 <= period < len(BIMONTHLY_PERIODS):
        raise ValidationError(
            f"Ranking period must be 0-{len(BIMONTHLY_PERIODS) - 1}, got {period!r}"
        )
    months = BIMONTHLY_PERIODS[period][1]
    entries = list(ledger)
    loan_list = list(loans)
    in_period = [
        tx for tx in entries if tx.simple_date.year == year and tx.simple_date.month in months
    ]

    scored = [
        (
            collector,
            collected_by(in_period, collector),
            daily_quota(collector, entries, loan_list, on),
        )
        for collector in collectors
        if not collector.is_admin
    ]
    scored.sort(key=lambda row: row[1], reverse=True)

    return [
        RankingEntry(rank=i, collector=collector, total_collected=total, today=progress)
        for i, (collector, total, progress) in enumerate(scored, start=1)
    ]


def payroll_preview(
    collectors: Iterable[Collector],
    attendance: Iterable[Attendance],
    month: str,
) -> list[PayrollLine]:
    """Days present in ``month`` times daily rate, per non-admin employee."""
    marks = [
        mark
        for mark in attendance
        if mark.status == AttendanceStatus.PRESENT and month_key(mark.date) == month
    ]

    lines = []
    for collector in collectors:
        if collector.is_admin:
            continue
        days_present = sum(1 for mark in marks if mark.employee_id == collector.collector_id)
        rate = collector.daily_rate or ZERO
        gross = to_money(rate * days_present)
        deductions = ZERO
        lines.append(
            PayrollLine(
                employee_id=collector.collector_id,
                employee_name=collector.name,
                month=month,
                days_present=days_present,
                daily_rate=rate,
                gross_pay=gross,
                deductions=deductions,
                net_pay=gross - deductions,
            )
        )
    return lines
