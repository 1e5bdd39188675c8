"""Portfolio and cash views computed from loans and the ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from microlend.models import Collector, Loan, LoanStatus, Transaction, TransactionType
from microlend.reports.performance import has_paid_on
from microlend.store.book import Book
from microlend.utils import ZERO, is_overdue, month_key, overdue_days, today

UNSECURED = "Unsecured"


@dataclass(frozen=True)
class PortfolioTotals:
    """Sums over a set of loans."""

    count: int
    loaned: Decimal  # Sum of total payable
    collected: Decimal  # Sum of total - balance
    outstanding: Decimal  # Sum of balance


@dataclass(frozen=True)
class CashFlow:
    total_in: Decimal
    total_out: Decimal

    @property
    def net(self) -> Decimal:
        return self.total_in - self.total_out


@dataclass(frozen=True)
class ProfitAndLoss:
    """Realized profit: collections less disbursements, expenses and dividends."""

    collected: Decimal
    disbursed: Decimal
    expenses: Decimal
    dividends: Decimal
    portfolio: Decimal  # Outstanding balance on active loans

    @property
    def net_profit(self) -> Decimal:
        return self.collected - self.disbursed - self.expenses - self.dividends


@dataclass(frozen=True)
class PastDueLoan:
    loan: Loan
    days_late: int


@dataclass
class MasterListGroup:
    """Active loans of one collector's area."""

    collector: Collector
    loans: list[Loan] = field(default_factory=list)

    @property
    def total_balance(self) -> Decimal:
        return sum((loan.balance for loan in self.loans), ZERO)


@dataclass(frozen=True)
class DashboardStats:
    total_in: Decimal
    total_out: Decimal
    income: Decimal  # Collections in the selected month
    liquidity: Decimal
    active_count: int
    past_due_count: int
    portfolio_value: Decimal
    total_clients: int
    daily_collected: Decimal = ZERO
    absent_count: int = 0


def select_loans(
    loans: Iterable[Loan],
    area: str | None = None,
    status: LoanStatus | None = None,
) -> list[Loan]:
    return [
        loan
        for loan in loans
        if (area is None or loan.area == area) and (status is None or loan.status == status)
    ]


def portfolio_totals(
    loans: Iterable[Loan],
    area: str | None = None,
    status: LoanStatus | None = None,
) -> PortfolioTotals:
    """Total payable, collected and outstanding across matching loans."""
    selected = select_loans(loans, area, status)
    return PortfolioTotals(
        count=len(selected),
        loaned=sum((loan.total for loan in selected), ZERO),
        collected=sum((loan.total - loan.balance for loan in selected), ZERO),
        outstanding=sum((loan.balance for loan in selected), ZERO),
    )


def system_liquidity(ledger: Iterable[Transaction]) -> Decimal:
    """All-time cash position: the sum of every ledger amount."""
    return sum((tx.amount for tx in ledger), ZERO)


def filter_ledger(
    ledger: Iterable[Transaction],
    transaction_type: TransactionType | None = None,
    month: str | None = None,
    user: str | None = None,
) -> list[Transaction]:
    """Ledger entries by type, ``YYYY-MM`` month and actor."""
    return [
        tx
        for tx in ledger
        if (transaction_type is None or tx.transaction_type == transaction_type)
        and (month is None or month_key(tx.simple_date) == month)
        and (user is None or tx.user == user)
    ]


def cash_flow(ledger: Iterable[Transaction]) -> CashFlow:
    total_in = ZERO
    total_out = ZERO
    for tx in ledger:
        if tx.amount > 0:
            total_in += tx.amount
        elif tx.amount < 0:
            total_out += -tx.amount
    return CashFlow(total_in=total_in, total_out=total_out)


def monthly_income(ledger: Iterable[Transaction], month: str) -> Decimal:
    """Collections booked in a ``YYYY-MM`` month."""
    return sum(
        (tx.amount for tx in filter_ledger(ledger, TransactionType.COLLECTION, month)),
        ZERO,
    )


def expenses_by_category(ledger: Iterable[Transaction], month: str | None = None) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = {}
    for tx in filter_ledger(ledger, TransactionType.EXPENSE, month):
        category = tx.category or "Uncategorized"
        totals[category] = totals.get(category, ZERO) + -tx.amount
    return totals


def profit_and_loss(ledger: Iterable[Transaction], loans: Iterable[Loan]) -> ProfitAndLoss:
    sums = {kind: ZERO for kind in TransactionType}
    for tx in ledger:
        sums[tx.transaction_type] += tx.amount

    return ProfitAndLoss(
        collected=sums[TransactionType.COLLECTION],
        disbursed=abs(sums[TransactionType.DISBURSEMENT]),
        expenses=abs(sums[TransactionType.EXPENSE]),
        dividends=abs(sums[TransactionType.DIVIDEND]),
        portfolio=portfolio_totals(loans, status=LoanStatus.ACTIVE).outstanding,
    )


def past_due_loans(loans: Iterable[Loan], on: date | None = None) -> list[PastDueLoan]:
    """Overdue active loans, most days late first."""
    reference = on or today()
    overdue = [
        PastDueLoan(loan=loan, days_late=overdue_days(loan, reference))
        for loan in loans
        if is_overdue(loan, reference)
    ]
    return sorted(overdue, key=lambda item: item.days_late, reverse=True)


def collateral_register(loans: Iterable[Loan]) -> list[Loan]:
    """Loans secured by something other than ``Unsecured``, by borrower."""
    secured = [loan for loan in loans if loan.collateral and loan.collateral != UNSECURED]
    return sorted(secured, key=lambda loan: loan.name.lower())


def master_list(
    loans: Iterable[Loan],
    collectors: Iterable[Collector],
    area: str | None = None,
    past_due_only: bool = False,
    on: date | None = None,
) -> list[MasterListGroup]:
    """Active loans grouped under the collector of their area.

    Admin accounts are skipped and groups without loans are dropped.
    """
    reference = on or today()
    active = select_loans(loans, area=area, status=LoanStatus.ACTIVE)
    if past_due_only:
        active = [loan for loan in active if is_overdue(loan, reference)]

    groups = []
    for collector in collectors:
        if collector.is_admin or (area is not None and collector.area != area):
            continue
        members = sorted(
            (loan for loan in active if loan.area == collector.area),
            key=lambda loan: loan.name.lower(),
        )
        if members:
            groups.append(MasterListGroup(collector=collector, loans=members))
    return groups


def dashboard_stats(
    book: Book,
    viewer: Collector,
    month: str | None = None,
    on: date | None = None,
) -> DashboardStats:
    """Headline numbers for the dashboard.

    Admins see the whole book. A collector sees loans in their own area
    and ledger entries they recorded, plus today's collection and the
    count of area borrowers who have not paid today.

    Parameters
    ----------
    book : Book
        Current state.
    viewer : Collector
        Who is looking.
    month : str | None
        ``YYYY-MM`` month for the income figure (defaults to ``on``'s month).
    on : date | None
        Reference day (defaults to today).
    """
    reference = on or today()
    month = month or month_key(reference)
    scope_area = None if viewer.is_admin else viewer.area
    scope_user = None if viewer.is_admin else viewer.name

    entries = filter_ledger(book.ledger, user=scope_user)
    flow = cash_flow(entries)
    all_loans = select_loans(book.loans, area=scope_area)
    active = select_loans(all_loans, status=LoanStatus.ACTIVE)

    daily_collected = ZERO
    absent_count = 0
    if not viewer.is_admin:
        daily_collected = sum(
            (
                tx.amount
                for tx in entries
                if tx.transaction_type == TransactionType.COLLECTION and tx.simple_date == reference
            ),
            ZERO,
        )
        ledger = book.ledger.all()
        absent_count = sum(1 for loan in active if not has_paid_on(loan, ledger, reference))

    return DashboardStats(
        total_in=flow.total_in,
        total_out=flow.total_out,
        income=monthly_income(entries, month),
        liquidity=flow.net,
        active_count=len(active),
        past_due_count=sum(1 for loan in active if is_overdue(loan, reference)),
        portfolio_value=sum((loan.balance for loan in active), ZERO),
        total_clients=len(all_loans),
        daily_collected=daily_collected,
        absent_count=absent_count,
    )
