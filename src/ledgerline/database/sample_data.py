"""Generated sample data for trying the application without a database.

Nothing here is ever written anywhere. Transactions are generated from a
seeded random source per month, so the same reference date always produces
the same data.
"""

import random
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from ledgerline.database.base import DataSource
from ledgerline.domain.entities import (
    AppSettings,
    Entry,
    EntryKind,
    MonthlySchedule,
    Override,
    RecurringRule,
)
from ledgerline.domain.periods import YearMonth

SAMPLE_INITIAL_BALANCE = Decimal("5000")


def _monthly(rule_id: str, amount: str, description: str, start: date, day: int) -> RecurringRule:
    return RecurringRule(
        id=rule_id,
        amount=amount,
        description=description,
        schedule=MonthlySchedule(day_of_month=day),
        start_date=start,
    )


SAMPLE_RECURRING_EXPENSES = (
    _monthly("sample-re-1", "950.00", "Rent", date(2024, 1, 1), 1),
    _monthly("sample-re-2", "15.99", "Netflix", date(2024, 1, 1), 5),
    _monthly("sample-re-3", "29.00", "Phone Bill", date(2024, 1, 1), 10),
    _monthly("sample-re-4", "35.00", "Gym Membership", date(2024, 1, 1), 15),
    _monthly("sample-re-5", "45.00", "Internet & Cable", date(2024, 1, 1), 3),
    _monthly("sample-re-6", "12.99", "Spotify", date(2024, 6, 1), 7),
    _monthly("sample-re-7", "8.99", "Cloud Storage", date(2025, 1, 1), 20),
)

SAMPLE_RECURRING_INCOMES = (
    _monthly("sample-ri-1", "3200.00", "Monthly Salary", date(2024, 1, 1), 25),
    _monthly("sample-ri-2", "420.00", "Freelance Work", date(2025, 4, 1), 28),
)

# (description, base amount, probability per month)
EXPENSE_TEMPLATES = (
    ("Groceries", 88, 1.0),
    ("Grocery Run", 64, 0.9),
    ("Weekly Shop", 72, 0.85),
    ("Dining Out", 42, 0.8),
    ("Restaurant", 68, 0.55),
    ("Takeaway", 26, 0.75),
    ("Coffee & Snacks", 18, 0.9),
    ("Public Transport", 45, 0.85),
    ("Fuel", 72, 0.65),
    ("Parking", 14, 0.5),
    ("Clothing", 98, 0.35),
    ("Shoes", 85, 0.2),
    ("Pharmacy", 24, 0.5),
    ("Doctor Visit", 55, 0.18),
    ("Home Supplies", 52, 0.5),
    ("Cleaning Products", 22, 0.6),
    ("Entertainment", 38, 0.55),
    ("Cinema", 24, 0.4),
    ("Haircut", 28, 0.45),
    ("Books", 32, 0.3),
    ("Gift", 48, 0.22),
    ("Electronics", 130, 0.12),
    ("Sport Equipment", 75, 0.1),
    ("Weekend Trip", 195, 0.18),
)

INCOME_TEMPLATES = (
    ("Cashback Reward", 18, 0.3),
    ("Sold Items Online", 72, 0.18),
    ("Tax Refund", 820, 0.06),
    ("Side Project Payment", 360, 0.12),
    ("Referral Bonus", 50, 0.1),
    ("Yearly Performance Bonus", 1500, 0.04),
    ("Quarterly Bonus", 600, 0.06),
)

HISTORY_MONTHS = 12
FUTURE_MONTHS = 3


def _generate(
    templates,
    year_month: YearMonth,
    rng: random.Random,
    variation: tuple[float, float],
    cutoff: Optional[date],
) -> list[Entry]:
    low, spread = variation
    entries = []
    for description, base, probability in templates:
        if rng.random() >= probability:
            # Consume the roll so later templates keep their sequence
            rng.random()
            continue
        day = year_month.day(int(rng.random() * year_month.days_in_month) + 1)
        if cutoff is not None and day > cutoff:
            continue
        amount = Decimal(str(base)) * Decimal(str(low + rng.random() * spread))
        entries.append(Entry(amount=f"{amount:.2f}", description=description, date=day))
    return entries


def generate_month(
    year_month: YearMonth, month_index: int, cutoff: Optional[date] = None
) -> tuple[list[Entry], list[Entry]]:
    """Generate one month of one-off expenses and incomes.

    Args:
        year_month: Month to generate
        month_index: Seed index, stable for a month's position in the window
        cutoff: Drop entries after this date (used for the current month)

    Returns:
        Tuple of (expenses, incomes)
    """
    rng = random.Random(month_index * 31337 + 99991)
    expenses = _generate(EXPENSE_TEMPLATES, year_month, rng, (0.75, 0.5), cutoff)
    incomes = _generate(INCOME_TEMPLATES, year_month, rng, (0.85, 0.3), cutoff)
    return expenses, incomes


class SampleDataSource(DataSource):
    """Read-only data source over generated sample data.

    Covers twelve months of history, the current month up to today, and
    three months ahead.
    """

    def __init__(self, today: Optional[date] = None):
        self.today = today or date.today()
        self._expenses: Optional[list[Entry]] = None
        self._incomes: Optional[list[Entry]] = None

    def _build(self) -> None:
        current = YearMonth.from_date(self.today)
        expenses: list[Entry] = []
        incomes: list[Entry] = []
        for offset in range(-HISTORY_MONTHS, FUTURE_MONTHS + 1):
            year_month = YearMonth.from_date(current.first_day + relativedelta(months=offset))
            cutoff = self.today if offset == 0 else None
            month_expenses, month_incomes = generate_month(
                year_month, offset + HISTORY_MONTHS, cutoff
            )
            expenses.extend(month_expenses)
            incomes.extend(month_incomes)
        self._expenses = sorted(expenses, key=lambda e: e.date)
        self._incomes = sorted(incomes, key=lambda e: e.date)

    def list_entries(self, kind: EntryKind) -> list[Entry]:
        if self._expenses is None:
            self._build()
        if EntryKind(kind) == EntryKind.EXPENSE:
            return list(self._expenses)
        return list(self._incomes)

    def list_rules(self, kind: EntryKind) -> list[RecurringRule]:
        if EntryKind(kind) == EntryKind.EXPENSE:
            return list(SAMPLE_RECURRING_EXPENSES)
        return list(SAMPLE_RECURRING_INCOMES)

    def list_overrides(self) -> list[Override]:
        return []

    def get_initial_balance(self) -> Optional[Decimal]:
        return SAMPLE_INITIAL_BALANCE

    def get_settings(self) -> AppSettings:
        return AppSettings()
