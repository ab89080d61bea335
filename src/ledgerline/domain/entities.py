"""Domain model entities for ledgerline.

These are pure data classes representing business concepts, independent of
the storage schema. Amounts are kept as the decimal strings the user entered;
they are only parsed when aggregated, so a malformed stored value can never
fail a read.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from ledgerline.domain.errors import (
    ValidationError,
    end_before_start,
    invalid_day_of_month,
    invalid_day_of_week,
)

RECURRING_MARKER = "(Recurring)"


class EntryKind(str, Enum):
    """Direction of a money movement."""

    EXPENSE = "expense"
    INCOME = "income"


class Frequency(str, Enum):
    """Recurring rule frequency."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Granularity(str, Enum):
    """Step size of a projection series."""

    MONTH = "month"
    DAY = "day"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@dataclass(frozen=True)
class Entry:
    """One-off expense or income entry."""

    amount: str
    description: str
    date: date
    speculative: bool = False

    def matches(self, other: "Entry") -> bool:
        """Match on (date, description, amount), ignoring the speculative flag."""
        return (
            self.date == other.date
            and self.description == other.description
            and self.amount == other.amount
        )


@dataclass(frozen=True)
class DailySchedule:
    frequency = Frequency.DAILY


@dataclass(frozen=True)
class WeeklySchedule:
    """Weekly on ``day_of_week`` (0 = Sunday ... 6 = Saturday)."""

    day_of_week: int
    frequency = Frequency.WEEKLY

    def __post_init__(self):
        if not 0 <= self.day_of_week <= 6:
            raise ValidationError(invalid_day_of_week(self.day_of_week))


@dataclass(frozen=True)
class MonthlySchedule:
    """Monthly on ``day_of_month``; short months clamp to their last day."""

    day_of_month: Optional[int] = None
    frequency = Frequency.MONTHLY

    def __post_init__(self):
        if self.day_of_month is not None and not 1 <= self.day_of_month <= 31:
            raise ValidationError(invalid_day_of_month(self.day_of_month))


@dataclass(frozen=True)
class YearlySchedule:
    """Yearly on the month and day of the rule's start date."""

    frequency = Frequency.YEARLY


Schedule = Union[DailySchedule, WeeklySchedule, MonthlySchedule, YearlySchedule]


def build_schedule(
    frequency: Frequency,
    day_of_month: Optional[int] = None,
    day_of_week: Optional[int] = None,
) -> Schedule:
    """Build the schedule variant for a frequency.

    Fields that do not belong to the frequency are dropped.

    Raises:
        ValidationError: If a weekly schedule has no day of week, or a day is
            out of range
    """
    try:
        frequency = Frequency(frequency)
    except ValueError:
        raise ValidationError(f"Unknown frequency '{frequency}'")
    if frequency == Frequency.DAILY:
        return DailySchedule()
    if frequency == Frequency.WEEKLY:
        if day_of_week is None:
            raise ValidationError("Weekly rules need a day of week")
        return WeeklySchedule(day_of_week=day_of_week)
    if frequency == Frequency.MONTHLY:
        return MonthlySchedule(day_of_month=day_of_month)
    return YearlySchedule()


@dataclass(frozen=True)
class RecurringRule:
    """Template that generates dated transactions on a schedule."""

    id: str
    amount: str
    description: str
    schedule: Schedule
    start_date: date
    end_date: Optional[date] = None
    speculative: bool = False

    def __post_init__(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValidationError(end_before_start(self.start_date, self.end_date))

    @property
    def frequency(self) -> Frequency:
        return self.schedule.frequency

    @property
    def day_of_month(self) -> Optional[int]:
        if isinstance(self.schedule, MonthlySchedule):
            return self.schedule.day_of_month
        return None

    @property
    def day_of_week(self) -> Optional[int]:
        if isinstance(self.schedule, WeeklySchedule):
            return self.schedule.day_of_week
        return None


@dataclass(frozen=True)
class Override:
    """Per-month replacement amount for a recurring income rule."""

    recurring_id: str
    year_month: str
    amount: str
    speculative: bool = False

    @property
    def key(self) -> tuple[str, str]:
        return (self.recurring_id, self.year_month)


@dataclass(frozen=True)
class Occurrence:
    """One concrete dated transaction produced by expanding a rule."""

    date: date
    amount: str
    description: str
    rule_id: str
    overridden: bool = False

    def to_entry(self) -> Entry:
        return Entry(amount=self.amount, description=self.description, date=self.date)


@dataclass(frozen=True)
class AppSettings:
    """User preferences. Persisted and snapshotted, not used by computation."""

    currency: str = "USD"
    theme: Theme = Theme.LIGHT


@dataclass(frozen=True)
class LedgerData:
    """Complete, immutable copy of every persisted collection.

    Used both as the read model for projections and as the snapshot taken
    when a simulation starts.
    """

    expenses: tuple[Entry, ...] = ()
    incomes: tuple[Entry, ...] = ()
    recurring_expenses: tuple[RecurringRule, ...] = ()
    recurring_incomes: tuple[RecurringRule, ...] = ()
    overrides: tuple[Override, ...] = ()
    initial_balance: Optional[Decimal] = None
    settings: AppSettings = field(default_factory=AppSettings)

    def entries(self, kind: EntryKind) -> tuple[Entry, ...]:
        return self.expenses if kind == EntryKind.EXPENSE else self.incomes

    def rules(self, kind: EntryKind) -> tuple[RecurringRule, ...]:
        if kind == EntryKind.EXPENSE:
            return self.recurring_expenses
        return self.recurring_incomes


@dataclass(frozen=True)
class MonthTotals:
    """Income and expense totals for a month or date window."""

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class ProjectionStep:
    """One step of a running-balance series."""

    label: str
    start: date
    end: date
    income: Decimal
    expense: Decimal
    balance: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class Projection:
    """Result of projecting a date range."""

    start: date
    end: date
    carried_in_balance: Decimal
    steps: tuple[ProjectionStep, ...] = ()

    @property
    def total_income(self) -> Decimal:
        return sum((step.income for step in self.steps), Decimal("0"))

    @property
    def total_expense(self) -> Decimal:
        return sum((step.expense for step in self.steps), Decimal("0"))

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense

    @property
    def balance(self) -> Decimal:
        """Closing balance of the range."""
        if not self.steps:
            return self.carried_in_balance
        return self.steps[-1].balance


@dataclass(frozen=True)
class ChangeSet:
    """Records added, removed or modified in one collection."""

    added: tuple = ()
    removed: tuple = ()
    modified: tuple = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified)
