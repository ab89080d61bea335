"""Tests for Database interface returning domain models."""

import logging

import pytest
from datetime import date
from decimal import Decimal

from sqlalchemy import text

from ledgerline.database.factories import create_sqlite_database
from ledgerline.domain import entities
from ledgerline.domain.entities import EntryKind


def _rule(rule_id, schedule, **kwargs):
    return entities.RecurringRule(
        id=rule_id,
        amount="10.00",
        description=f"Rule {rule_id}",
        schedule=schedule,
        start_date=date(2025, 1, 1),
        **kwargs,
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_empty_store(self, temp_db):
        """Test that a fresh store has no data and default settings."""
        assert temp_db.list_entries(EntryKind.EXPENSE) == []
        assert temp_db.list_rules(EntryKind.INCOME) == []
        assert temp_db.list_overrides() == []
        assert temp_db.get_initial_balance() is None
        assert temp_db.get_settings() == entities.AppSettings()
        assert temp_db.load_snapshot() is None
        assert not temp_db.read_only

    def test_replace_entries_keeps_order_and_kind(self, temp_db):
        """Test that entries come back as domain Entry entities in stored order."""
        later = entities.Entry(amount="2.00", description="later", date=date(2025, 2, 1))
        earlier = entities.Entry(
            amount="1.00", description="earlier", date=date(2025, 1, 1), speculative=True
        )
        temp_db.replace_entries(EntryKind.EXPENSE, [later, earlier])

        entries = temp_db.list_entries(EntryKind.EXPENSE)

        assert entries == [later, earlier]
        assert all(isinstance(e, entities.Entry) for e in entries)
        assert temp_db.list_entries(EntryKind.INCOME) == []

    def test_replace_entries_replaces_whole_collection(self, temp_db):
        first = entities.Entry(amount="1.00", description="a", date=date(2025, 1, 1))
        second = entities.Entry(amount="2.00", description="b", date=date(2025, 1, 2))
        income = entities.Entry(amount="3.00", description="c", date=date(2025, 1, 3))
        temp_db.replace_entries(EntryKind.EXPENSE, [first])
        temp_db.replace_entries(EntryKind.INCOME, [income])

        temp_db.replace_entries(EntryKind.EXPENSE, [second])

        assert temp_db.list_entries(EntryKind.EXPENSE) == [second]
        assert temp_db.list_entries(EntryKind.INCOME) == [income]

    def test_rules_round_trip_every_schedule(self, temp_db):
        """Test that each schedule variant survives storage."""
        rules = [
            _rule("d", entities.DailySchedule(), end_date=date(2025, 6, 30)),
            _rule("w", entities.WeeklySchedule(day_of_week=0)),
            _rule("m", entities.MonthlySchedule(day_of_month=31)),
            _rule("n", entities.MonthlySchedule()),
            _rule("y", entities.YearlySchedule(), speculative=True),
        ]
        temp_db.replace_rules(EntryKind.EXPENSE, rules)

        assert temp_db.list_rules(EntryKind.EXPENSE) == rules

    def test_replacing_rules_reuses_ids(self, temp_db):
        """Test that a rule can be rewritten under the same id."""
        temp_db.replace_rules(EntryKind.INCOME, [_rule("salary", entities.MonthlySchedule())])
        updated = _rule("salary", entities.MonthlySchedule(day_of_month=25))

        temp_db.replace_rules(EntryKind.INCOME, [updated])

        assert temp_db.list_rules(EntryKind.INCOME) == [updated]

    def test_overrides(self, temp_db):
        overrides = [
            entities.Override(recurring_id="salary", year_month="2025-06", amount="3800.00"),
            entities.Override(recurring_id="salary", year_month="2025-05", amount="0.00"),
        ]
        temp_db.replace_overrides(overrides)
        assert temp_db.list_overrides() == overrides

        temp_db.replace_overrides(overrides[1:])
        assert temp_db.list_overrides() == overrides[1:]

    def test_initial_balance(self, temp_db):
        temp_db.set_initial_balance(Decimal("5000.25"))
        assert temp_db.get_initial_balance() == Decimal("5000.25")

        temp_db.set_initial_balance(None)
        assert temp_db.get_initial_balance() is None

    def test_settings(self, temp_db):
        settings = entities.AppSettings(currency="EUR", theme=entities.Theme.SYSTEM)
        temp_db.set_settings(settings)
        temp_db.set_settings(settings)
        assert temp_db.get_settings() == settings

    def test_snapshot_round_trip(self, temp_db, sample_ledger):
        """Test that a snapshot comes back identical, speculative tags included."""
        tagged = entities.Entry(
            amount="7.00", description="maybe", date=date(2025, 4, 1), speculative=True
        )
        snapshot = entities.LedgerData(
            expenses=sample_ledger.expenses + (tagged,),
            incomes=sample_ledger.incomes,
            recurring_expenses=sample_ledger.recurring_expenses,
            recurring_incomes=sample_ledger.recurring_incomes,
            overrides=sample_ledger.overrides,
            initial_balance=sample_ledger.initial_balance,
        )

        temp_db.save_snapshot(snapshot)
        assert temp_db.load_snapshot() == snapshot

        temp_db.clear_snapshot()
        assert temp_db.load_snapshot() is None

    def test_restore_and_load_ledger(self, temp_db, sample_ledger):
        temp_db.restore_ledger(sample_ledger)
        assert temp_db.load_ledger() == sample_ledger

    def test_data_persists_across_connections(self, temp_db):
        entry = entities.Entry(amount="1.00", description="a", date=date(2025, 1, 1))
        temp_db.replace_entries(EntryKind.EXPENSE, [entry])
        temp_db.set_initial_balance(Decimal("10"))
        temp_db.disconnect()

        reopened = create_sqlite_database(database_path=temp_db.database_path)
        try:
            assert reopened.list_entries(EntryKind.EXPENSE) == [entry]
            assert reopened.get_initial_balance() == Decimal("10")
        finally:
            reopened.disconnect()


def test_factory_creates_parent_directory(tmp_path):
    db_path = tmp_path / "nested" / "dir" / "ledger.db"

    db = create_sqlite_database(database_path=str(db_path))
    try:
        db.connect()
        db.initialize_schema()
        assert db_path.parent.is_dir()
        assert db.database_url == f"sqlite:///{db_path}"
    finally:
        db.disconnect()


def test_factory_uses_configured_path(tmp_path, monkeypatch):
    from ledgerline.config import get_settings

    monkeypatch.setenv("LEDGERLINE_DB_PATH", str(tmp_path / "env.db"))
    get_settings.cache_clear()
    try:
        db = create_sqlite_database()
        assert db.database_url.endswith("env.db")
    finally:
        get_settings.cache_clear()


@pytest.mark.parametrize("kind", list(EntryKind))
def test_kinds_are_independent(temp_db, kind):
    other = EntryKind.INCOME if kind == EntryKind.EXPENSE else EntryKind.EXPENSE
    temp_db.replace_rules(kind, [_rule("x", entities.DailySchedule())])
    assert temp_db.list_rules(other) == []


def _corrupt(db, statement):
    """Write a raw value the domain layer would never store."""
    session = db._get_session()
    session.execute(text(statement))
    session.commit()


class TestUnreadableRules:
    """Stored rules with a bad shape must not block projections."""

    @pytest.fixture
    def stored(self, temp_db):
        temp_db.replace_rules(
            EntryKind.EXPENSE,
            [
                _rule("rent", entities.MonthlySchedule(day_of_month=15)),
                _rule("gym", entities.WeeklySchedule(day_of_week=1)),
            ],
        )
        return temp_db

    def test_day_of_month_zero_reads_as_first(self, stored, engine):
        _corrupt(stored, "UPDATE recurring_rules SET day_of_month = 0 WHERE id = 'rent'")

        rent = [r for r in stored.list_rules(EntryKind.EXPENSE) if r.id == "rent"][0]
        assert rent.schedule == entities.MonthlySchedule()

        occurrences = engine.expand_recurring_for_month(EntryKind.EXPENSE, "2025-03")
        assert date(2025, 3, 1) in [o.date for o in occurrences]

    def test_end_before_start_is_skipped(self, stored, engine, caplog):
        _corrupt(stored, "UPDATE recurring_rules SET end_date = '2024-01-01' WHERE id = 'rent'")

        with caplog.at_level(logging.WARNING, logger="ledgerline.serialization"):
            projection = engine.project_range(date(2025, 3, 1), date(2025, 3, 31))

        assert [r.id for r in stored.list_rules(EntryKind.EXPENSE)] == ["gym"]
        assert projection.total_expense == Decimal("50.00")
        assert "rent" in caplog.text

    def test_weekly_without_day_is_skipped(self, stored, engine):
        _corrupt(stored, "UPDATE recurring_rules SET day_of_week = NULL WHERE id = 'gym'")

        totals = engine.month_totals("2025-03")

        assert [r.id for r in stored.list_rules(EntryKind.EXPENSE)] == ["rent"]
        assert totals.expense == Decimal("10.00")
