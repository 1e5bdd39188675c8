"""Pytest configuration and fixtures."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from microlend.engine import AdminService, LedgerService, LoanEngine, WorkforceService
from microlend.models import Collector, Loan
from microlend.store import Book, MemoryStore

NOW = datetime(2024, 3, 15, 9, 30)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def now() -> datetime:
    """Fixed 'now' shared by every service fixture."""
    return NOW


@pytest.fixture
def today() -> date:
    return NOW.date()


@pytest.fixture
def clock():
    """Clock returning the fixed 'now'."""
    return lambda: NOW


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def book(store: MemoryStore) -> Book:
    """Empty book (only the seeded admin collector)."""
    return Book.open(store)


@pytest.fixture
def engine(book: Book, clock) -> LoanEngine:
    return LoanEngine(book, clock=clock)


@pytest.fixture
def ledger_service(book: Book, clock) -> LedgerService:
    return LedgerService(book, clock=clock)


@pytest.fixture
def workforce(book: Book, clock) -> WorkforceService:
    return WorkforceService(book, clock=clock)


@pytest.fixture
def admin_service(book: Book, clock) -> AdminService:
    return AdminService(book, clock=clock)


@pytest.fixture
def collector(workforce: WorkforceService) -> Collector:
    """Collector assigned to the 'Poblacion' route."""
    return workforce.save_collector("Juan Dela Cruz", "Poblacion", daily_rate=500, quota=3000)


@pytest.fixture
def loan(engine: LoanEngine, collector: Collector) -> Loan:
    """Active 1000 / 60-day loan originated today: total 1200, daily 20."""
    return engine.originate("Maria Santos", "Poblacion", 1000, 60, collector.name)


@pytest.fixture
def make_loan():
    """Factory building standalone loans without going through the engine."""
    return _make_loan


def _make_loan(**overrides) -> Loan:
    values = {
        "loan_id": "loan-test-001",
        "name": "Maria Santos",
        "area": "Poblacion",
        "principal": Decimal("1000.00"),
        "term": 60,
        "interest_rate": Decimal("0.20"),
        "total": Decimal("1200.00"),
        "daily": Decimal("20.00"),
        "balance": Decimal("1200.00"),
        "date": date(2024, 3, 1),
    }
    values.update(overrides)
    return Loan(**values)
