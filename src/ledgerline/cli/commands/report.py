"""Month, range and year report commands."""

from decimal import Decimal
from typing import Optional

import click

from ledgerline.cli.date_filters import parse_year_month_or_exit, resolve_cli_date_range
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.engine import LedgerEngine
from ledgerline.domain.entities import EntryKind, Granularity, Projection
from ledgerline.domain.errors import DomainError
from ledgerline.utils.date_parser import get_date_range


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


def _print_projection(projection: Projection, baseline: Optional[Projection] = None) -> None:
    """Print one row per step, with the baseline balance when comparing."""
    width = 100 if baseline is not None else 80
    click.echo(f"\nCarried in: {_money(projection.carried_in_balance)}")
    click.echo("-" * width)
    header = f"{'Period':<12} {'Income':>16} {'Expense':>16} {'Net':>16} {'Balance':>16}"
    if baseline is not None:
        header += f" {'Before':>16}"
    click.echo(header)
    click.echo("-" * width)

    before = {step.label: step for step in baseline.steps} if baseline is not None else {}
    for step in projection.steps:
        row = (
            f"{step.label:<12} {_money(step.income):>16} {_money(step.expense):>16} "
            f"{_money(step.net):>16} {_money(step.balance):>16}"
        )
        if baseline is not None:
            previous = before.get(step.label)
            row += f" {_money(previous.balance) if previous else '':>16}"
        click.echo(row)

    click.echo("-" * width)
    click.echo(
        f"{'Total':<12} {_money(projection.total_income):>16} "
        f"{_money(projection.total_expense):>16} {_money(projection.net):>16} "
        f"{_money(projection.balance):>16}"
    )


@click.command("month")
@click.argument("year_month", metavar="YYYY-MM")
@click.pass_context
def month_report(ctx, year_month: str):
    """Show every entry of a month, recurring occurrences included, with totals."""
    month = parse_year_month_or_exit(ctx, year_month)
    engine = LedgerEngine(ctx.obj["context"])

    for kind in EntryKind:
        entries = engine.month_entries(kind, month)
        click.echo(f"\n{kind.value.capitalize()} ({month}):")
        click.echo("-" * 72)
        if not entries:
            click.echo("  (none)")
            continue
        for item in entries:
            marker = " *" if item.speculative else ""
            click.echo(f"{item.date.isoformat():<12} {item.amount:>12}  {item.description}{marker}")

    totals = engine.month_totals(month)
    click.echo("-" * 72)
    click.echo(f"{'Income':<12} {_money(totals.income):>12}")
    click.echo(f"{'Expense':<12} {_money(totals.expense):>12}")
    click.echo(f"{'Net':<12} {_money(totals.net):>12}")


@click.command("project")
@click.option("--start-date", help="First day of the projection")
@click.option("--end-date", help="Last day of the projection")
@click.option("--this-month", is_flag=True, help="Project the current month")
@click.option("--this-year", is_flag=True, help="Project the current year")
@click.option("--last-month", is_flag=True, help="Project last month")
@click.option("--last-year", is_flag=True, help="Project last year")
@click.option("--next-month", is_flag=True, help="Project next month")
@click.option("--next-year", is_flag=True, help="Project next year")
@click.option("--daily", is_flag=True, help="One row per day instead of per month")
@click.option(
    "--compare",
    is_flag=True,
    help="While simulating, show the balance before the simulation next to each row",
)
@click.pass_context
def project(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    next_month: bool,
    next_year: bool,
    daily: bool,
    compare: bool,
):
    """Project the running balance over a date range.

    Without dates or period options the current year is projected.

    Examples:
        ledgerline project --next-year
        ledgerline project --start-date 2025-03-10 --end-date 2025-04-20 --daily
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
            "next-month": next_month,
            "next-year": next_year,
        },
        default_range=get_date_range("this-year"),
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required", err=True)
        ctx.exit(1)

    granularity = Granularity.DAY if daily else Granularity.MONTH
    engine = LedgerEngine(ctx.obj["context"])
    try:
        projection = engine.project_range(start, end, granularity)
        baseline = engine.baseline_projection(start, end, granularity) if compare else None
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if compare and baseline is None:
        click.echo("No simulation active; nothing to compare against.")
    if not projection.steps:
        click.echo("End date is before start date; nothing to project.")
        click.echo(f"Balance: {_money(projection.carried_in_balance)}")
        return
    _print_projection(projection, baseline)


@click.command("year")
@click.argument("year", type=click.IntRange(1, 9999))
@click.pass_context
def year_report(ctx, year: int):
    """Project the running balance month by month for a calendar year."""
    try:
        projection = LedgerEngine(ctx.obj["context"]).project_year(year)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _print_projection(projection)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(month_report, name="month")
    cli.add_command(project, name="project")
    cli.add_command(year_report, name="year")
