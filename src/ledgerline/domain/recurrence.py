"""Recurring rule expansion.

Expansion is a pure function of a rule and a calendar month: it never looks
at stored data and returns the same occurrences for the same inputs.
"""

from datetime import date
from typing import Iterable, Optional, Sequence

from ledgerline.domain.entities import (
    RECURRING_MARKER,
    DailySchedule,
    MonthlySchedule,
    Occurrence,
    Override,
    RecurringRule,
    WeeklySchedule,
    YearlySchedule,
)
from ledgerline.domain.overrides import find_override
from ledgerline.domain.periods import YearMonth, js_weekday


def occurrence_description(description: str) -> str:
    return f"{description} {RECURRING_MARKER}"


def is_active_in(rule: RecurringRule, year_month: YearMonth) -> bool:
    """Check whether the rule's bounds overlap the month at all."""
    if rule.start_date > year_month.last_day:
        return False
    if rule.end_date is not None and rule.end_date < year_month.first_day:
        return False
    return True


def _within_bounds(rule: RecurringRule, day: date) -> bool:
    return day >= rule.start_date and (rule.end_date is None or day <= rule.end_date)


def occurrence_dates(rule: RecurringRule, year_month: YearMonth) -> list[date]:
    """Return the dates ``rule`` fires on in ``year_month``.

    Raises:
        TypeError: If the rule carries an unknown schedule type
    """
    if not is_active_in(rule, year_month):
        return []

    schedule = rule.schedule
    if isinstance(schedule, DailySchedule):
        candidates = list(year_month.days())
    elif isinstance(schedule, WeeklySchedule):
        candidates = [
            day for day in year_month.days() if js_weekday(day) == schedule.day_of_week
        ]
    elif isinstance(schedule, MonthlySchedule):
        candidates = [year_month.day(schedule.day_of_month or 1)]
    elif isinstance(schedule, YearlySchedule):
        if rule.start_date.month != year_month.month:
            return []
        # 29 February falls back to the 28th in common years
        candidates = [year_month.day(rule.start_date.day)]
    else:
        raise TypeError(f"Unknown schedule type: {type(schedule).__name__}")

    return [day for day in candidates if _within_bounds(rule, day)]


def expand_rule(
    rule: RecurringRule, year_month: YearMonth, amount: Optional[str] = None
) -> list[Occurrence]:
    """Expand one rule into its occurrences for a month.

    Args:
        rule: Recurring rule to expand
        year_month: Target month
        amount: Amount to price occurrences at (defaults to the rule's amount)

    Returns:
        Occurrences in date order
    """
    description = occurrence_description(rule.description)
    return [
        Occurrence(
            date=day,
            amount=rule.amount if amount is None else amount,
            description=description,
            rule_id=rule.id,
            overridden=amount is not None,
        )
        for day in occurrence_dates(rule, year_month)
    ]


def expand_rules(
    rules: Iterable[RecurringRule],
    year_month: YearMonth,
    overrides: Optional[Sequence[Override]] = None,
) -> list[Occurrence]:
    """Expand a collection of rules for a month.

    When ``overrides`` is given, each rule's occurrences are priced at the
    override for the month if one exists.
    """
    occurrences: list[Occurrence] = []
    for rule in rules:
        amount = None
        if overrides:
            override = find_override(rule.id, overrides, year_month)
            if override is not None:
                amount = override.amount
        occurrences.extend(expand_rule(rule, year_month, amount=amount))
    return occurrences
