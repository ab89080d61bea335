"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from ledgerline.utils.date_parser import parse_date, get_date_range

TODAY = date(2025, 3, 15)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()
    assert parse_date("Today", today=TODAY) == TODAY


def test_parse_yesterday_and_tomorrow():
    """Test parsing 'yesterday' and 'tomorrow'."""
    assert parse_date("yesterday", today=TODAY) == TODAY - timedelta(days=1)
    assert parse_date("tomorrow", today=TODAY) == TODAY + timedelta(days=1)


def test_parse_last_month_across_year():
    """'last month' in January is December of the previous year."""
    assert parse_date("last month", today=date(2025, 1, 20)) == date(2024, 12, 1)


def test_parse_this_and_next_month():
    """Test parsing 'this month' and 'next month'."""
    assert parse_date("this month", today=TODAY) == date(2025, 3, 1)
    assert parse_date("next month", today=date(2025, 12, 31)) == date(2026, 1, 1)


def test_parse_years():
    """Test parsing relative years."""
    assert parse_date("this year", today=TODAY) == date(2025, 1, 1)
    assert parse_date("last year", today=TODAY) == date(2024, 1, 1)
    assert parse_date("next year", today=TODAY) == date(2026, 1, 1)


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


def test_parse_week_is_not_supported():
    """Weeks are not a projection period."""
    with pytest.raises(ValueError, match="unknown period"):
        parse_date("last week")


def test_parse_garbage():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not-a-date")


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


def test_get_date_range_this_month_covers_whole_month():
    """Projections look ahead, so this-month ends on the last day."""
    start, end = get_date_range("this-month", today=date(2024, 2, 10))
    assert start == date(2024, 2, 1)
    assert end == date(2024, 2, 29)


def test_get_date_range_this_year():
    """Test get_date_range for this-year."""
    start, end = get_date_range("this-year", today=TODAY)
    assert start == date(2025, 1, 1)
    assert end == date(2025, 12, 31)


def test_get_date_range_last_month_in_january():
    """Test get_date_range for last-month across a year boundary."""
    start, end = get_date_range("last-month", today=date(2025, 1, 5))
    assert start == date(2024, 12, 1)
    assert end == date(2024, 12, 31)


def test_get_date_range_next_month():
    start, end = get_date_range("next-month", today=date(2025, 1, 31))
    assert start == date(2025, 2, 1)
    assert end == date(2025, 2, 28)


def test_get_date_range_last_and_next_year():
    """Test get_date_range for last-year and next-year."""
    assert get_date_range("last-year", today=TODAY) == (date(2024, 1, 1), date(2024, 12, 31))
    assert get_date_range("next-year", today=TODAY) == (date(2026, 1, 1), date(2026, 12, 31))


def test_get_date_range_defaults_to_today():
    """Without a reference date the current month is used."""
    today = date.today()
    start, end = get_date_range("this-month")
    assert start == date(today.year, today.month, 1)
    assert end.month == today.month
    assert (end + timedelta(days=1)).day == 1


@pytest.mark.parametrize("period", ["invalid-period", "this-week", "last-week"])
def test_get_date_range_invalid_period(period):
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range(period)
