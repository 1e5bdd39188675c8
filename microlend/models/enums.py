"""Enumeration types for lending domain entities."""

from enum import Enum


class LoanStatus(str, Enum):
    ACTIVE = "Active"
    PAID = "Paid"


class TransactionType(str, Enum):
    COLLECTION = "Collection"
    DISBURSEMENT = "Disbursement"
    EXPENSE = "Expense"
    CAPITAL = "Capital"
    PAYROLL = "Payroll"
    DIVIDEND = "Dividend"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    REST_DAY = "Rest Day"


class PayrollStatus(str, Enum):
    PAID = "Paid"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SYSTEM = "SYSTEM"


class UserRole(str, Enum):
    ADMIN = "admin"
    COLLECTOR = "collector"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AssetType(str, Enum):
    VEHICLE = "Vehicle"
    ELECTRONICS = "Electronics"
    FURNITURE = "Furniture"
    OTHER = "Other"


class AssetStatus(str, Enum):
    GOOD = "Good"
    MAINTENANCE = "Maintenance"
    LOST = "Lost"
    DISPOSED = "Disposed"
