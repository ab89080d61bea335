"""Tests for recurring rule expansion."""

from datetime import date

import pytest

from ledgerline.domain.entities import (
    DailySchedule,
    MonthlySchedule,
    Override,
    RecurringRule,
    WeeklySchedule,
    YearlySchedule,
)
from ledgerline.domain.periods import YearMonth
from ledgerline.domain.recurrence import (
    expand_rule,
    expand_rules,
    is_active_in,
    occurrence_dates,
    occurrence_description,
)


def _rule(schedule, start=date(2025, 1, 1), end=None, amount="10.00", rule_id="r1"):
    return RecurringRule(
        id=rule_id,
        amount=amount,
        description="Thing",
        schedule=schedule,
        start_date=start,
        end_date=end,
    )


class TestMonthly:
    """Tests for monthly expansion."""

    def test_rent_in_february(self, rent_rule):
        """Rent of 950.00 on the 1st yields exactly one February occurrence."""
        occurrences = expand_rule(rent_rule, YearMonth(2025, 2))

        assert len(occurrences) == 1
        assert occurrences[0].date == date(2025, 2, 1)
        assert occurrences[0].amount == "950.00"
        assert occurrences[0].description == "Rent (Recurring)"
        assert occurrences[0].rule_id == "rent"
        assert not occurrences[0].overridden

    @pytest.mark.parametrize(
        "year_month,expected",
        [
            (YearMonth(2025, 2), date(2025, 2, 28)),
            (YearMonth(2024, 2), date(2024, 2, 29)),
            (YearMonth(2025, 4), date(2025, 4, 30)),
            (YearMonth(2025, 5), date(2025, 5, 31)),
        ],
    )
    def test_day_31_clamps_to_month_end(self, year_month, expected):
        rule = _rule(MonthlySchedule(day_of_month=31), start=date(2024, 1, 1))
        assert occurrence_dates(rule, year_month) == [expected]

    def test_missing_day_defaults_to_first(self):
        assert occurrence_dates(_rule(MonthlySchedule()), YearMonth(2025, 6)) == [date(2025, 6, 1)]

    def test_start_after_day_in_first_month(self):
        """A rule starting on the 10th does not fire on the 5th of that month."""
        rule = _rule(MonthlySchedule(day_of_month=5), start=date(2025, 3, 10))
        assert occurrence_dates(rule, YearMonth(2025, 3)) == []
        assert occurrence_dates(rule, YearMonth(2025, 4)) == [date(2025, 4, 5)]

    def test_end_date_is_inclusive(self):
        rule = _rule(MonthlySchedule(day_of_month=15), end=date(2025, 3, 15))
        assert occurrence_dates(rule, YearMonth(2025, 3)) == [date(2025, 3, 15)]
        assert occurrence_dates(rule, YearMonth(2025, 4)) == []


class TestWeekly:
    """Tests for weekly expansion."""

    def test_sundays_in_march_2025(self):
        rule = _rule(WeeklySchedule(day_of_week=0))
        assert occurrence_dates(rule, YearMonth(2025, 3)) == [
            date(2025, 3, 2),
            date(2025, 3, 9),
            date(2025, 3, 16),
            date(2025, 3, 23),
            date(2025, 3, 30),
        ]

    def test_fridays_in_february_2025(self):
        rule = _rule(WeeklySchedule(day_of_week=5))
        assert len(occurrence_dates(rule, YearMonth(2025, 2))) == 4

    def test_weekly_respects_bounds(self):
        rule = _rule(
            WeeklySchedule(day_of_week=0), start=date(2025, 3, 5), end=date(2025, 3, 20)
        )
        assert occurrence_dates(rule, YearMonth(2025, 3)) == [date(2025, 3, 9), date(2025, 3, 16)]


class TestDaily:
    """Tests for daily expansion."""

    def test_every_day_of_month(self):
        assert len(occurrence_dates(_rule(DailySchedule()), YearMonth(2025, 2))) == 28

    def test_partial_month(self):
        rule = _rule(DailySchedule(), start=date(2025, 1, 30), end=date(2025, 2, 2))
        assert occurrence_dates(rule, YearMonth(2025, 1)) == [date(2025, 1, 30), date(2025, 1, 31)]
        assert occurrence_dates(rule, YearMonth(2025, 2)) == [date(2025, 2, 1), date(2025, 2, 2)]


class TestYearly:
    """Tests for yearly expansion."""

    def test_only_in_start_month(self):
        rule = _rule(YearlySchedule(), start=date(2024, 6, 12))
        assert occurrence_dates(rule, YearMonth(2025, 6)) == [date(2025, 6, 12)]
        assert occurrence_dates(rule, YearMonth(2025, 7)) == []

    def test_leap_day_clamps_in_common_years(self):
        rule = _rule(YearlySchedule(), start=date(2024, 2, 29))
        assert occurrence_dates(rule, YearMonth(2025, 2)) == [date(2025, 2, 28)]
        assert occurrence_dates(rule, YearMonth(2028, 2)) == [date(2028, 2, 29)]

    def test_not_before_start_year(self):
        rule = _rule(YearlySchedule(), start=date(2025, 6, 12))
        assert occurrence_dates(rule, YearMonth(2024, 6)) == []


def test_is_active_in():
    rule = _rule(MonthlySchedule(), start=date(2025, 3, 31), end=date(2025, 5, 1))
    assert not is_active_in(rule, YearMonth(2025, 2))
    assert is_active_in(rule, YearMonth(2025, 3))
    assert is_active_in(rule, YearMonth(2025, 5))
    assert not is_active_in(rule, YearMonth(2025, 6))


def test_unknown_schedule_type():
    rule = _rule(object())
    with pytest.raises(TypeError, match="Unknown schedule type"):
        occurrence_dates(rule, YearMonth(2025, 1))


def test_occurrence_description():
    assert occurrence_description("Gym") == "Gym (Recurring)"


def test_expansion_is_deterministic(rent_rule):
    first = expand_rule(rent_rule, YearMonth(2025, 7))
    assert expand_rule(rent_rule, YearMonth(2025, 7)) == first


def test_expand_rule_with_amount_marks_overridden(salary_rule):
    occurrences = expand_rule(salary_rule, YearMonth(2025, 3), amount="3800.00")
    assert occurrences[0].amount == "3800.00"
    assert occurrences[0].overridden


def test_expand_rules_applies_overrides(rent_rule, salary_rule):
    overrides = [Override(recurring_id="salary", year_month="2025-03", amount="3800.00")]

    march = expand_rules([rent_rule, salary_rule], YearMonth(2025, 3), overrides)
    april = expand_rules([rent_rule, salary_rule], YearMonth(2025, 4), overrides)

    assert [o.amount for o in march] == ["950.00", "3800.00"]
    assert [o.amount for o in april] == ["950.00", "3200.00"]
