"""Tests for collectors, attendance and payroll."""

from datetime import date
from decimal import Decimal

import pytest

from microlend.engine import WorkforceService
from microlend.exceptions import (
    CollectorNotFoundError,
    InvalidEntityStateError,
    PayrollAlreadyProcessedError,
    ReferentialIntegrityError,
    ValidationError,
)
from microlend.models import AttendanceStatus, AuditAction, TransactionType, UserRole
from microlend.store import ADMIN_ID, Book


class TestCollectors:
    """Collector upsert and delete."""

    def test_create(self, book: Book, collector) -> None:
        assert collector.role == UserRole.COLLECTOR
        assert collector.daily_rate == Decimal("500.00")
        assert collector.quota == Decimal("3000.00")
        assert book.collectors.get(collector.collector_id) == collector
        assert book.audit.all()[-1].details == "Collector Created: Juan Dela Cruz"

    def test_update_in_place(self, book: Book, workforce: WorkforceService, collector) -> None:
        updated = workforce.save_collector(
            "Juan Dela Cruz", "San Roque", daily_rate=550, collector_id=collector.collector_id
        )

        assert len(book.collectors) == 2  # admin + collector
        assert book.collectors.get(collector.collector_id).area == "San Roque"
        assert updated.daily_rate == Decimal("550.00")
        assert book.audit.all()[-1].action == AuditAction.UPDATE
        assert book.audit.all()[-1].details == "Collector Updated: Juan Dela Cruz"

    def test_invalid_role(self, workforce: WorkforceService) -> None:
        with pytest.raises(ValidationError):
            workforce.save_collector("Pedro", "Rizal", role="boss")

    def test_delete(self, book: Book, workforce: WorkforceService, collector) -> None:
        workforce.delete_collector(collector.collector_id)

        assert collector.collector_id not in book.collectors
        assert book.audit.all()[-1].action == AuditAction.DELETE

    def test_admin_cannot_be_deleted(self, workforce: WorkforceService) -> None:
        with pytest.raises(InvalidEntityStateError):
            workforce.delete_collector(ADMIN_ID)

    def test_delete_unknown(self, workforce: WorkforceService) -> None:
        with pytest.raises(CollectorNotFoundError):
            workforce.delete_collector("missing")


class TestAttendance:
    """Attendance upsert."""

    def test_mark(self, workforce: WorkforceService, collector) -> None:
        mark = workforce.mark_attendance(date(2024, 3, 1), collector.collector_id, "Present")

        assert mark.status == AttendanceStatus.PRESENT

    def test_upsert_keeps_one_record(self, book: Book, workforce: WorkforceService, collector) -> None:
        first = workforce.mark_attendance(date(2024, 3, 1), collector.collector_id, AttendanceStatus.PRESENT)
        second = workforce.mark_attendance(date(2024, 3, 1), collector.collector_id, AttendanceStatus.ABSENT)

        assert len(book.attendance) == 1
        assert second.attendance_id == first.attendance_id
        assert book.attendance.get(first.attendance_id).status == AttendanceStatus.ABSENT

    def test_unknown_employee(self, workforce: WorkforceService) -> None:
        with pytest.raises(ReferentialIntegrityError):
            workforce.mark_attendance(date(2024, 3, 1), "ghost", AttendanceStatus.PRESENT)

    def test_unknown_status(self, workforce: WorkforceService, collector) -> None:
        with pytest.raises(ValidationError):
            workforce.mark_attendance(date(2024, 3, 1), collector.collector_id, "Sick")


class TestPayroll:
    """Payroll processing."""

    @pytest.fixture
    def february(self, workforce: WorkforceService, collector) -> None:
        for day in (1, 2, 5, 6):
            workforce.mark_attendance(date(2024, 2, day), collector.collector_id, AttendanceStatus.PRESENT)
        workforce.mark_attendance(date(2024, 2, 7), collector.collector_id, AttendanceStatus.ABSENT)
        workforce.mark_attendance(date(2024, 2, 4), collector.collector_id, AttendanceStatus.REST_DAY)
        workforce.mark_attendance(date(2024, 3, 1), collector.collector_id, AttendanceStatus.PRESENT)
        workforce.mark_attendance(date(2024, 2, 1), ADMIN_ID, AttendanceStatus.PRESENT)

    def test_process(self, book: Book, workforce: WorkforceService, collector, february) -> None:
        records = workforce.process_payroll("2024-02")

        assert len(records) == 1
        record = records[0]
        assert record.employee_id == collector.collector_id
        assert record.days_present == 4
        assert record.gross_pay == Decimal("2000.00")
        assert record.net_pay == Decimal("2000.00")
        assert record.month == "2024-02"

        tx = book.ledger.all()[-1]
        assert tx.transaction_type == TransactionType.PAYROLL
        assert tx.amount == Decimal("-2000.00")
        assert tx.description == "Salary: Juan Dela Cruz (2024-02)"
        assert book.audit.all()[-1].details == "Payroll Processed for 1 employees"

    def test_second_run_rejected(self, book: Book, workforce: WorkforceService, february) -> None:
        workforce.process_payroll("2024-02")
        payroll_before = len(book.payroll)
        ledger_before = len(book.ledger)

        with pytest.raises(PayrollAlreadyProcessedError):
            workforce.process_payroll("2024-02")

        assert len(book.payroll) == payroll_before
        assert len(book.ledger) == ledger_before

    def test_other_month_still_allowed(self, workforce: WorkforceService, february) -> None:
        workforce.process_payroll("2024-02")

        records = workforce.process_payroll("2024-03")

        assert records[0].days_present == 1

    @pytest.mark.parametrize("month", ["2024-13", "Feb 2024", ""])
    def test_invalid_month(self, workforce: WorkforceService, month: str) -> None:
        with pytest.raises(ValidationError):
            workforce.process_payroll(month)
