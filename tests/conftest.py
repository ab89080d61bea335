"""Shared pytest fixtures for ledgerline tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from ledgerline.context import LedgerContext
from ledgerline.database.factories import create_sqlite_database
from ledgerline.domain.engine import LedgerEngine
from ledgerline.domain.entities import (
    Entry,
    LedgerData,
    MonthlySchedule,
    Override,
    RecurringRule,
)
from ledgerline.domain.ledger import LedgerService
from ledgerline.sync import RemoteSync, SyncError


class RecordingSync(RemoteSync):
    """Remote double that remembers every push."""

    def __init__(self, fail: bool = False):
        self.pushes = []
        self.fail = fail

    def push(self, key, value):
        if self.fail:
            raise SyncError("remote unavailable")
        self.pushes.append((key, value))

    @property
    def keys(self) -> list[str]:
        return [key for key, _ in self.pushes]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def sync():
    """Create a recording remote."""
    return RecordingSync()


@pytest.fixture
def context(temp_db, sync):
    """Create a session context over the temporary database."""
    ctx = LedgerContext(source=temp_db, sync=sync)
    yield ctx
    ctx.notifier.clear()


@pytest.fixture
def ledger_service(context):
    """Create a LedgerService over the temporary database."""
    return LedgerService(context)


@pytest.fixture
def engine(context):
    """Create a LedgerEngine over the temporary database."""
    return LedgerEngine(context)


@pytest.fixture
def rent_rule():
    """Monthly rent of 950.00 on the 1st, starting January 2025."""
    return RecurringRule(
        id="rent",
        amount="950.00",
        description="Rent",
        schedule=MonthlySchedule(day_of_month=1),
        start_date=date(2025, 1, 1),
    )


@pytest.fixture
def salary_rule():
    """Monthly salary of 3200.00 on the 25th, starting January 2025."""
    return RecurringRule(
        id="salary",
        amount="3200.00",
        description="Salary",
        schedule=MonthlySchedule(day_of_month=25),
        start_date=date(2025, 1, 1),
    )


@pytest.fixture
def sample_ledger(rent_rule, salary_rule):
    """Ledger with an anchor, one rule per kind, an override and one-offs."""
    return LedgerData(
        expenses=(Entry(amount="40.00", description="Groceries", date=date(2025, 2, 10)),),
        incomes=(Entry(amount="100.00", description="Gift", date=date(2025, 3, 5)),),
        recurring_expenses=(rent_rule,),
        recurring_incomes=(salary_rule,),
        overrides=(Override(recurring_id="salary", year_month="2025-03", amount="3800.00"),),
        initial_balance=Decimal("5000"),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def failing_sync():
    """Create a remote whose every push fails."""
    return RecordingSync(fail=True)
