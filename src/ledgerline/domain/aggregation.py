"""Month and date-window aggregation."""

from datetime import date
from decimal import Decimal
from typing import Iterable

from ledgerline.domain.entities import (
    Entry,
    EntryKind,
    LedgerData,
    MonthTotals,
    Occurrence,
)
from ledgerline.domain.periods import YearMonth, iter_months
from ledgerline.domain.recurrence import expand_rules
from ledgerline.utils.amount_parser import ZERO, amount_or_zero


def sum_amounts(records: Iterable[Entry | Occurrence]) -> Decimal:
    """Sum record amounts; malformed amounts count as zero."""
    return sum((amount_or_zero(record.amount) for record in records), ZERO)


def occurrences_for_month(
    data: LedgerData, kind: EntryKind, year_month: YearMonth
) -> list[Occurrence]:
    """Expand every rule of ``kind`` for a month.

    Income occurrences are priced through the month's overrides.
    """
    if kind == EntryKind.INCOME:
        return expand_rules(data.recurring_incomes, year_month, data.overrides)
    return expand_rules(data.recurring_expenses, year_month)


def _in_window(day: date, start: date, end: date) -> bool:
    return start <= day <= end


def aggregate_period(data: LedgerData, start: date, end: date) -> MonthTotals:
    """Aggregate income and expense over an exact date window.

    One-off entries and recurring occurrences are filtered by date, not by
    month membership, so windows need not align with month boundaries.
    An inverted window totals zero.
    """
    if end < start:
        return MonthTotals()

    income = ZERO
    expense = ZERO
    for year_month in iter_months(YearMonth.from_date(start), YearMonth.from_date(end)):
        window_start = max(start, year_month.first_day)
        window_end = min(end, year_month.last_day)
        for kind in EntryKind:
            occurrences = [
                occ
                for occ in occurrences_for_month(data, kind, year_month)
                if _in_window(occ.date, window_start, window_end)
            ]
            total = sum_amounts(occurrences)
            if kind == EntryKind.INCOME:
                income += total
            else:
                expense += total

    income += sum_amounts(e for e in data.incomes if _in_window(e.date, start, end))
    expense += sum_amounts(e for e in data.expenses if _in_window(e.date, start, end))
    return MonthTotals(income=income, expense=expense)


def aggregate_month(data: LedgerData, year_month: YearMonth) -> MonthTotals:
    """Aggregate income and expense for a calendar month."""
    return aggregate_period(data, year_month.first_day, year_month.last_day)
