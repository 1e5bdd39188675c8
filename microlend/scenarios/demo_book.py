"""Demo book scenario: collectors, borrowers and daily collections."""

from __future__ import annotations

import logging
import random
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from faker import Faker

from microlend.engine import LedgerService, LoanEngine, WorkforceService
from microlend.engine.terms import STANDARD_TERMS
from microlend.exceptions import PayrollAlreadyProcessedError
from microlend.models import AttendanceStatus, Collector, Loan, LoanStatus
from microlend.sinks.base import EventSink
from microlend.store import Book, Store
from microlend.utils import month_key, today

logger = logging.getLogger(__name__)

ROUTES = (
    "Poblacion",
    "San Isidro",
    "Santa Cruz",
    "Bagong Silang",
    "San Roque",
    "Mabini",
    "Rizal",
    "Malvar",
)
PRINCIPALS = (1000, 2000, 3000, 5000, 8000, 10000)
COLLATERAL = ("Unsecured", "Unsecured", "Unsecured", "Motorcycle OR/CR", "Appliance", "Sari-sari store goods")
EXPENSE_ITEMS = (
    ("Fuel", "Operational", 300, 800),
    ("Office supplies", "Operational", 150, 600),
    ("Load and data", "Utilities", 100, 300),
    ("Motorcycle repair", "Maintenance", 500, 2500),
)
ADMIN = "Admin"


class DemoBookScenario:
    """Run a realistic daily-collection business through the engine.

    Every record is produced by the same services a live deployment uses,
    so the generated book satisfies all engine invariants:

    - Collectors, one per route, with daily rate and quota
    - Loans originated over the first half of the window
    - Daily attendance (Sundays are rest days)
    - Daily collections with a mix of punctual and skipping borrowers
    - Occasional refinances, weekly expenses and monthly payroll
    """

    def __init__(
        self,
        num_collectors: int = 3,
        loans_per_collector: int = 12,
        days: int = 60,
        on_time_rate: float = 0.85,
        refinance_rate: float = 0.02,
        initial_capital: int = 500_000,
        seed: int | None = None,
        locale: str = "en_PH",
        *,
        end_date: date | None = None,
        store: Store | None = None,
        events: EventSink | None = None,
    ) -> None:
        """Initialize demo book scenario.

        Parameters
        ----------
        num_collectors : int
            Number of collectors (one route each, at most ``len(ROUTES)``).
        loans_per_collector : int
            Loans originated on each route.
        days : int
            Length of the simulated window, ending at ``end_date``.
        on_time_rate : float
            Probability a borrower pays on a given working day.
        refinance_rate : float
            Daily probability a half-paid loan is refinanced.
        initial_capital : int
            Capital injected on the first day.
        seed : int | None
            Random seed for reproducibility.
        locale : str
            Faker locale for names, phones and addresses.
        end_date : date | None
            Last simulated day (defaults to today).
        store : Store | None
            Backend the book is written to (defaults to memory).
        events : EventSink | None
            Optional event sink for every ledger and audit entry.
        """
        if not 1 <= num_collectors <= len(ROUTES):
            raise ValueError(f"num_collectors must be between 1 and {len(ROUTES)}")
        if days < 1:
            raise ValueError("days must be positive")

        self.num_collectors = num_collectors
        self.loans_per_collector = loans_per_collector
        self.days = days
        self.on_time_rate = on_time_rate
        self.refinance_rate = refinance_rate
        self.initial_capital = initial_capital
        self.seed = seed
        self.end_date = end_date or today()
        self.start_date = self.end_date - timedelta(days=days - 1)

        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)

        self._now = datetime.combine(self.start_date, time(8, 0))
        self.book = Book.open(store, events)
        self.loans = LoanEngine(self.book, clock=self._clock)
        self.ledger = LedgerService(self.book, clock=self._clock)
        self.workforce = WorkforceService(self.book, clock=self._clock)

    def _clock(self) -> datetime:
        return self._now

    def generate(self) -> Book:
        """Simulate every day of the window.

        Returns
        -------
        Book
            The populated book.
        """
        logger.info(
            "Starting demo book scenario: %d collectors, %d loans each, %d days",
            self.num_collectors,
            self.loans_per_collector,
            self.days,
        )

        self.ledger.add_capital(self.initial_capital, ADMIN)
        collectors = [self._hire(route) for route in ROUTES[: self.num_collectors]]
        schedule = self._origination_schedule(collectors)

        for offset in range(self.days):
            day = self.start_date + timedelta(days=offset)
            self._now = datetime.combine(day, time(8, 0))

            if day.day == 1 and offset > 0:
                self._run_payroll(month_key(day - timedelta(days=1)))

            present = self._take_attendance(collectors, day)
            for collector in schedule.get(offset, []):
                self._originate(collector)

            self._now = datetime.combine(day, time(14, 0))
            for collector in present:
                self._collect_route(collector, day)

            if day.weekday() == 5:
                self._spend()

        logger.info("Demo book complete: %s", self.book.summary())
        return self.book

    def _hire(self, route: str) -> Collector:
        return self.workforce.save_collector(
            self.fake.name(),
            route,
            daily_rate=random.choice((450, 500, 550, 600)),
            quota=random.choice((3000, 4000, 5000)),
            start_date=self.start_date,
            actor=ADMIN,
        )

    def _origination_schedule(self, collectors: list[Collector]) -> dict[int, list[Collector]]:
        """Spread originations over the first half of the window."""
        last = max(0, self.days // 2 - 1)
        schedule: dict[int, list[Collector]] = {}
        for collector in collectors:
            for _ in range(self.loans_per_collector):
                schedule.setdefault(random.randint(0, last), []).append(collector)
        return schedule

    def _take_attendance(self, collectors: list[Collector], day: date) -> list[Collector]:
        present = []
        for collector in collectors:
            if day.weekday() == 6:
                status = AttendanceStatus.REST_DAY
            elif random.random() < 0.05:
                status = AttendanceStatus.ABSENT
            else:
                status = AttendanceStatus.PRESENT
                present.append(collector)
            self.workforce.mark_attendance(day, collector.collector_id, status)
        return present

    def _originate(self, collector: Collector) -> Loan:
        principal = random.choice(PRINCIPALS)
        return self.loans.originate(
            self.fake.name(),
            collector.area,
            principal,
            random.choice(STANDARD_TERMS),
            collector.name,
            address=self.fake.address().replace("\n", ", "),
            phone=self._phone(),
            service_fee=Decimal(principal) * Decimal("0.02"),
            delivery_charge=random.choice((0, 0, 50, 100)),
            collateral=random.choice(COLLATERAL),
        )

    def _phone(self) -> str:
        # en_PH only provides mobile_number/landline_number, most locales phone_number
        if hasattr(self.fake, "mobile_number"):
            return self.fake.mobile_number()
        return self.fake.phone_number()

    def _collect_route(self, collector: Collector, day: date) -> None:
        route = self.book.loans.filter(
            lambda loan: loan.area == collector.area
            and loan.status == LoanStatus.ACTIVE
            and loan.date < day
        )
        for loan in route:
            if loan.collected * 2 >= loan.total and random.random() < self.refinance_rate:
                self._refinance(loan, collector)
                continue
            if random.random() >= self.on_time_rate:
                continue
            self.loans.apply_payment(loan.loan_id, min(loan.daily, loan.balance), collector.name, day)

    def _refinance(self, loan: Loan, collector: Collector) -> Loan:
        principal = max(random.choice(PRINCIPALS), int(loan.principal))
        return self.loans.refinance(
            loan.loan_id,
            principal,
            random.choice(STANDARD_TERMS),
            Decimal(principal) * Decimal("0.02"),
            0,
            collector.name,
        )

    def _spend(self) -> None:
        description, category, low, high = random.choice(EXPENSE_ITEMS)
        self.ledger.add_expense(description, random.randint(low, high), ADMIN, category)

    def _run_payroll(self, month: str) -> None:
        try:
            self.workforce.process_payroll(month, ADMIN)
        except PayrollAlreadyProcessedError:
            logger.info("Payroll for %s was already in the book", month)
