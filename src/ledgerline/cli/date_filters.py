"""CLI helpers for date and month resolution."""

from datetime import date

import click

from ledgerline.domain.errors import ValidationError
from ledgerline.domain.periods import YearMonth
from ledgerline.utils.date_parser import get_date_range, parse_date

PERIOD_OPTIONS = ", ".join(
    f"--{p}" for p in ("this-month", "this-year", "last-month", "last-year", "next-month", "next-year")
)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            f"Error: Only one period option ({PERIOD_OPTIONS}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period)
                break
    else:
        if start_date:
            try:
                start = parse_date(start_date)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if end_date:
            try:
                end = parse_date(end_date)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

        if start is None and end is None and default_range is not None:
            start, end = default_range

    return start, end


def parse_date_or_exit(ctx, value: str, label: str = "date") -> date:
    """Parse a date option, exiting with an error message on failure."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_year_month_or_exit(ctx, value: str) -> YearMonth:
    """Parse a YYYY-MM argument, exiting with an error message on failure."""
    try:
        return YearMonth.parse(value)
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
