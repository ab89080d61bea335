"""Calendar month helpers."""

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from dateutil.relativedelta import relativedelta

from ledgerline.domain.errors import ValidationError, invalid_year_month

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month, rendered as ``YYYY-MM``."""

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValidationError(invalid_year_month(f"{self.year}-{self.month}"))

    @classmethod
    def parse(cls, value: str) -> "YearMonth":
        """Parse a ``YYYY-MM`` string.

        Raises:
            ValidationError: If the string is not a valid year-month
        """
        match = _YEAR_MONTH_RE.match(value.strip()) if value else None
        if match is None:
            raise ValidationError(invalid_year_month(value))
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_date(cls, day: date) -> "YearMonth":
        return cls(day.year, day.month)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    def day(self, day_of_month: int) -> date:
        """Return the given day in this month, clamped to the month's length."""
        return date(self.year, self.month, min(day_of_month, self.days_in_month))

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def next(self) -> "YearMonth":
        return YearMonth.from_date(self.first_day + relativedelta(months=1))

    def previous(self) -> "YearMonth":
        return YearMonth.from_date(self.first_day - relativedelta(months=1))

    def days(self) -> Iterator[date]:
        """Iterate over every day of the month."""
        for day in range(1, self.days_in_month + 1):
            yield date(self.year, self.month, day)


def iter_months(first: YearMonth, last: YearMonth) -> Iterator[YearMonth]:
    """Iterate months from ``first`` to ``last`` inclusive."""
    current = first
    while current <= last:
        yield current
        if current == last:
            return
        current = current.next()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Iterate days from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        if current == end:
            return
        current += timedelta(days=1)


def js_weekday(day: date) -> int:
    """Return weekday numbered 0 (Sunday) through 6 (Saturday)."""
    return (day.weekday() + 1) % 7
