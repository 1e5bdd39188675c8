"""Back-office models: audit log, investors, tasks and assets."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from microlend.models.enums import (
    AssetStatus,
    AssetType,
    AuditAction,
    TaskPriority,
    TaskStatus,
)


@dataclass(frozen=True)
class AuditLog:
    """Append-only record of an administrative action."""

    audit_id: str
    timestamp: datetime
    user: str
    action: AuditAction
    details: str


@dataclass
class Investor:
    """Capital source receiving dividends."""

    investor_id: str
    name: str
    capital_invested: Decimal
    date_joined: date
    dividend_rate: Decimal  # Percent per period, e.g. 5 for 5%
    total_payouts: Decimal = Decimal("0.00")


@dataclass
class Task:
    """Work item assigned to a collector."""

    task_id: str
    title: str
    description: str
    assigned_to: str  # Collector id
    due_date: date
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM


@dataclass
class Asset:
    """Company property, optionally assigned to a collector."""

    asset_id: str
    name: str
    asset_type: AssetType
    value: Decimal
    purchase_date: date
    assigned_to: str = "Unassigned"
    status: AssetStatus = AssetStatus.GOOD
    notes: str = ""
