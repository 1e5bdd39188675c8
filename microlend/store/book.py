"""The book: every collection of the back office behind one object."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from microlend.exceptions import (
    CollectorNotFoundError,
    InvestorNotFoundError,
    LoanNotFoundError,
    ValidationError,
)
from microlend.models import (
    Asset,
    Attendance,
    AuditLog,
    Collector,
    Event,
    Investor,
    Loan,
    PayrollRecord,
    Task,
    Transaction,
    UserRole,
)
from microlend.sinks.base import EventSink
from microlend.store.base import Documents, MemoryStore, Store
from microlend.store.repository import AppendOnlyRepository, Repository
from microlend.store.serialization import to_dict
from microlend.utils import new_id

logger = logging.getLogger(__name__)

# Snapshot layout: collection name -> list of documents
Snapshot = dict[str, list[dict[str, Any]]]

ADMIN_ID = "1"

COLLECTIONS = (
    "collectors",
    "loans",
    "ledger",
    "attendance",
    "payroll",
    "investors",
    "tasks",
    "assets",
    "audit",
)


class Book:
    """Aggregate of the nine back-office repositories.

    Engine services receive a book and only touch state through its
    repositories. Reads are recomputed from the repositories every time.
    """

    def __init__(
        self,
        store: Store | None = None,
        events: EventSink | None = None,
        admin_name: str = "Admin",
        admin_area: str = "HQ",
    ) -> None:
        self.store = store or MemoryStore()
        self.events = events
        self.admin_name = admin_name
        self.admin_area = admin_area

        self.collectors: Repository[Collector] = Repository(
            "collectors", Collector, "collector_id", self.store, CollectorNotFoundError
        )
        self.loans: Repository[Loan] = Repository(
            "loans", Loan, "loan_id", self.store, LoanNotFoundError
        )
        self.ledger: AppendOnlyRepository[Transaction] = AppendOnlyRepository(
            "ledger", Transaction, "transaction_id", self.store
        )
        self.attendance: Repository[Attendance] = Repository(
            "attendance", Attendance, "attendance_id", self.store
        )
        self.payroll: AppendOnlyRepository[PayrollRecord] = AppendOnlyRepository(
            "payroll", PayrollRecord, "payroll_id", self.store
        )
        self.investors: Repository[Investor] = Repository(
            "investors", Investor, "investor_id", self.store, InvestorNotFoundError
        )
        self.tasks: Repository[Task] = Repository("tasks", Task, "task_id", self.store)
        self.assets: Repository[Asset] = Repository("assets", Asset, "asset_id", self.store)
        self.audit: AppendOnlyRepository[AuditLog] = AppendOnlyRepository(
            "audit", AuditLog, "audit_id", self.store
        )

    @classmethod
    def open(cls, store: Store | None = None, events: EventSink | None = None, **kwargs: Any) -> Book:
        """Create a book and load it from ``store``."""
        book = cls(store, events, **kwargs)
        book.reload()
        return book

    def repositories(self) -> dict[str, Repository]:
        return {name: getattr(self, name) for name in COLLECTIONS}

    def reload(self) -> None:
        """Re-read every collection from the store."""
        self._populate(self.store.load())
        self._ensure_admin()
        logger.info("Book loaded: %s", self.summary())

    def record(self, transaction: Transaction) -> Transaction:
        """Append a ledger entry and publish it."""
        self.ledger.add(transaction)
        self._publish(
            f"ledger.{transaction.transaction_type.value.lower()}",
            transaction.loan_id or transaction.transaction_id,
            transaction.timestamp,
            transaction,
        )
        return transaction

    def log(self, entry: AuditLog) -> AuditLog:
        """Append an audit log entry and publish it."""
        self.audit.add(entry)
        self._publish(f"audit.{entry.action.value.lower()}", entry.user, entry.timestamp, entry)
        return entry

    def export_snapshot(self) -> Snapshot:
        """Full state as ``{collection: [document, ...]}`` for backup."""
        return {
            name: list(repo.dump().values())
            for name, repo in self.repositories().items()
        }

    def import_snapshot(self, snapshot: dict[str, Any]) -> None:
        """Replace the whole state with ``snapshot``.

        Missing collections become empty. Every record is decoded before
        anything is written, so a malformed snapshot leaves both the store
        and memory untouched. The store is rewritten next, so a failed
        write leaves memory untouched too.
        """
        if not isinstance(snapshot, dict):
            raise ValidationError("Snapshot must be a mapping of collection name to records")

        unknown = set(snapshot) - set(COLLECTIONS)
        if unknown:
            logger.warning("Ignoring unknown snapshot collections: %s", sorted(unknown))

        documents: Documents = {}
        staged: dict[str, dict[str, Any]] = {}
        for name, repo in self.repositories().items():
            records = snapshot.get(name) or []
            if not isinstance(records, list):
                raise ValidationError(f"Snapshot collection {name!r} must be a list")
            try:
                documents[name] = {str(doc[repo.key]): doc for doc in records}
            except (KeyError, TypeError) as e:
                raise ValidationError(f"Snapshot record in {name!r} lacks {repo.key!r}") from e
            try:
                staged[name] = repo.decode(documents[name])
            except (ValueError, TypeError, ArithmeticError) as e:
                raise ValidationError(f"Invalid record in snapshot collection {name!r}: {e}") from e

        self.store.replace_all(documents)
        for name, repo in self.repositories().items():
            repo.replace(staged[name])
        logger.info("Snapshot imported: %s", self.summary())

    def summary(self) -> dict[str, int]:
        """Return summary counts of all collections."""
        return {name: len(repo) for name, repo in self.repositories().items()}

    def _populate(self, documents: Documents) -> None:
        for name, repo in self.repositories().items():
            repo.load(documents.get(name, {}))

    def _ensure_admin(self) -> None:
        if len(self.collectors):
            return
        admin = Collector(
            collector_id=ADMIN_ID,
            name=self.admin_name,
            area=self.admin_area,
            role=UserRole.ADMIN,
        )
        self.collectors.add(admin)
        logger.info("Seeded default admin collector")

    def _publish(self, event_type: str, subject: str, when: datetime, record: Any) -> None:
        if self.events is None:
            return
        self.events.publish(
            Event(
                event_id=new_id(),
                event_type=event_type,
                event_time=when,
                source="microlend",
                subject=subject,
                data=to_dict(record),
            )
        )
