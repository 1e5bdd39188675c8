"""Collectors, attendance and payroll."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from microlend.engine.base import BookService, require_non_negative, require_text
from microlend.exceptions import (
    InvalidEntityStateError,
    PayrollAlreadyProcessedError,
    ReferentialIntegrityError,
    ValidationError,
)
from microlend.models import (
    Attendance,
    AttendanceStatus,
    AuditAction,
    Collector,
    PayrollRecord,
    TransactionType,
    UserRole,
)
from microlend.reports.performance import payroll_preview
from microlend.utils import ZERO, new_id, parse_month

logger = logging.getLogger(__name__)


class WorkforceService(BookService):
    """Maintain collectors and turn attendance into payroll."""

    def save_collector(
        self,
        name: str,
        area: str,
        daily_rate: Decimal | int | str = ZERO,
        quota: Decimal | int | str = ZERO,
        *,
        collector_id: str | None = None,
        role: UserRole | str = UserRole.COLLECTOR,
        start_date: date | None = None,
        actor: str = "Admin",
    ) -> Collector:
        """Create a collector, or overwrite the one with ``collector_id``."""
        name = require_text(name, "Collector name")
        area = require_text(area, "Area")
        rate = require_non_negative(daily_rate, "Daily rate")
        target = require_non_negative(quota, "Quota")
        try:
            role = UserRole(role)
        except ValueError as e:
            raise ValidationError(f"Unknown role {role!r}") from e

        created = collector_id is None or collector_id not in self.book.collectors
        collector = Collector(
            collector_id=collector_id or new_id(),
            name=name,
            area=area,
            daily_rate=rate,
            quota=target,
            role=role,
            start_date=start_date,
        )
        self.book.collectors.save(collector)
        verb = "Created" if created else "Updated"
        self._audit(AuditAction.UPDATE, f"Collector {verb}: {name}", actor)
        logger.info("Collector %s %s (%s)", collector.collector_id, verb.lower(), area)
        return collector

    def delete_collector(self, collector_id: str, actor: str = "Admin") -> Collector:
        collector = self.book.collectors.get(collector_id)
        if collector.is_admin:
            raise InvalidEntityStateError(f"Admin account {collector.name!r} cannot be deleted")

        self.book.collectors.remove(collector_id)
        self._audit(AuditAction.DELETE, f"Collector Deleted: {collector.name}", actor)
        logger.info("Deleted collector %s (%s)", collector_id, collector.name)
        return collector

    def mark_attendance(
        self,
        day: date,
        employee_id: str,
        status: AttendanceStatus | str,
    ) -> Attendance:
        """Set the attendance mark for ``(employee, day)``, replacing any earlier one."""
        try:
            status = AttendanceStatus(status)
        except ValueError as e:
            raise ValidationError(f"Unknown attendance status {status!r}") from e
        if employee_id not in self.book.collectors:
            raise ReferentialIntegrityError(f"Attendance for unknown employee {employee_id!r}")

        existing = self.book.attendance.filter(
            lambda mark: mark.employee_id == employee_id and mark.date == day
        )
        mark = Attendance(
            attendance_id=existing[0].attendance_id if existing else new_id(),
            date=day,
            employee_id=employee_id,
            status=status,
        )
        self.book.attendance.save(mark)
        logger.debug("Attendance %s for %s on %s", status.value, employee_id, day)
        return mark

    def process_payroll(self, month: str, actor: str = "Admin") -> list[PayrollRecord]:
        """Freeze payroll for ``month`` and pay it out of the ledger.

        Writes one :class:`PayrollRecord` and one ``Payroll`` ledger entry of
        ``-net_pay`` per non-admin employee. A month can only be processed
        once.

        Parameters
        ----------
        month : str
            ``YYYY-MM``.
        actor : str
            User running payroll.

        Returns
        -------
        list[PayrollRecord]
            Records written, one per employee.

        Raises
        ------
        PayrollAlreadyProcessedError
            If any record already exists for ``month``.
        """
        try:
            parse_month(month)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Payroll month must be YYYY-MM, got {month!r}") from e

        if self.book.payroll.filter(lambda record: record.month == month):
            logger.warning("Payroll for %s already processed, refusing to re-run", month)
            raise PayrollAlreadyProcessedError(f"Payroll for {month} has already been processed")

        lines = payroll_preview(self.book.collectors, self.book.attendance, month)
        processed_at = self.now()
        records = []
        for line in lines:
            record = PayrollRecord(
                payroll_id=new_id(),
                processed_at=processed_at,
                month=month,
                employee_id=line.employee_id,
                employee_name=line.employee_name,
                days_present=line.days_present,
                daily_rate=line.daily_rate,
                gross_pay=line.gross_pay,
                deductions=line.deductions,
                net_pay=line.net_pay,
            )
            self.book.payroll.add(record)
            self._post(
                TransactionType.PAYROLL,
                f"Salary: {line.employee_name} ({month})",
                -line.net_pay,
                actor,
            )
            records.append(record)

        self._audit(AuditAction.CREATE, f"Payroll Processed for {len(records)} employees", actor)
        logger.info(
            "Processed payroll for %s: %d employees, total %s",
            month,
            len(records),
            sum((record.net_pay for record in records), ZERO),
        )
        return records
