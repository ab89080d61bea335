"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = (
    "this-month",
    "this-year",
    "last-month",
    "last-year",
    "next-month",
    "next-year",
)


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "last month",
      "this year", "next month", etc. (month and year resolve to their
      first day)

    Args:
        date_str: Date string in various formats
        today: Reference date for relative expressions (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    offsets = {"last ": -1, "this ": 0, "next ": 1}
    for prefix, offset in offsets.items():
        if not date_str.startswith(prefix):
            continue
        period = date_str[len(prefix):]
        if period == "month":
            return today.replace(day=1) + relativedelta(months=offset)
        if period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=offset)
        raise ValueError(f"Could not parse date '{date_str}': unknown period '{period}'")

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Projections look forward as well as back, so every period covers the full
    calendar month or year rather than stopping at today.

    Args:
        period: One of this-month, this-year, last-month, last-year,
            next-month, next-year
        today: Reference date (defaults to today)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period.endswith("-month"):
        offsets = {"this-month": 0, "last-month": -1, "next-month": 1}
        if period in offsets:
            start_date = today.replace(day=1) + relativedelta(months=offsets[period])
            end_date = start_date + relativedelta(months=1) - timedelta(days=1)
            return (start_date, end_date)

    elif period.endswith("-year"):
        offsets = {"this-year": 0, "last-year": -1, "next-year": 1}
        if period in offsets:
            start_date = date(today.year + offsets[period], 1, 1)
            end_date = date(start_date.year, 12, 31)
            return (start_date, end_date)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}"
    )
