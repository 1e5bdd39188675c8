"""Lending domain models."""

from microlend.models.admin import Asset, AuditLog, Investor, Task
from microlend.models.base import Event
from microlend.models.enums import (
    AssetStatus,
    AssetType,
    AttendanceStatus,
    AuditAction,
    LoanStatus,
    PayrollStatus,
    TaskPriority,
    TaskStatus,
    TransactionType,
    UserRole,
)
from microlend.models.loan import Loan
from microlend.models.staff import Attendance, Collector, PayrollRecord
from microlend.models.transaction import Transaction

__all__ = [
    "Asset",
    "AssetStatus",
    "AssetType",
    "Attendance",
    "AttendanceStatus",
    "AuditAction",
    "AuditLog",
    "Collector",
    "Event",
    "Investor",
    "Loan",
    "LoanStatus",
    "PayrollRecord",
    "PayrollStatus",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "Transaction",
    "TransactionType",
    "UserRole",
]
