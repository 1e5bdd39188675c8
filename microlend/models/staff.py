"""Collector, attendance and payroll models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from microlend.models.enums import AttendanceStatus, PayrollStatus, UserRole


@dataclass
class Collector:
    """Field collector (also the login identity and payroll employee)."""

    collector_id: str
    name: str
    area: str
    daily_rate: Decimal = Decimal("0.00")
    quota: Decimal = Decimal("0.00")  # Expected daily collection
    role: UserRole = UserRole.COLLECTOR
    start_date: date | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass
class Attendance:
    """One attendance mark per (employee, date)."""

    attendance_id: str
    date: date
    employee_id: str
    status: AttendanceStatus


@dataclass
class PayrollRecord:
    """Frozen payroll snapshot for one employee and month."""

    payroll_id: str
    processed_at: datetime
    month: str  # YYYY-MM
    employee_id: str
    employee_name: str
    days_present: int
    daily_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: PayrollStatus = PayrollStatus.PAID
