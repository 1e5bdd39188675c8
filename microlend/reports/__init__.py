"""Read-side projections over loans, the ledger and attendance."""

from microlend.reports.performance import (
    BIMONTHLY_PERIODS,
    PayrollLine,
    QuotaProgress,
    RankingEntry,
    daily_quota,
    has_paid_on,
    payroll_preview,
    period_index,
    ranking,
)
from microlend.reports.portfolio import (
    CashFlow,
    DashboardStats,
    MasterListGroup,
    PastDueLoan,
    PortfolioTotals,
    ProfitAndLoss,
    cash_flow,
    collateral_register,
    dashboard_stats,
    expenses_by_category,
    filter_ledger,
    master_list,
    monthly_income,
    past_due_loans,
    portfolio_totals,
    profit_and_loss,
    system_liquidity,
)

__all__ = [
    "BIMONTHLY_PERIODS",
    "CashFlow",
    "DashboardStats",
    "MasterListGroup",
    "PastDueLoan",
    "PayrollLine",
    "PortfolioTotals",
    "ProfitAndLoss",
    "QuotaProgress",
    "RankingEntry",
    "cash_flow",
    "collateral_register",
    "daily_quota",
    "dashboard_stats",
    "expenses_by_category",
    "filter_ledger",
    "has_paid_on",
    "master_list",
    "monthly_income",
    "past_due_loans",
    "payroll_preview",
    "period_index",
    "portfolio_totals",
    "profit_and_loss",
    "ranking",
    "system_liquidity",
]
