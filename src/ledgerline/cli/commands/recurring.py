"""Recurring rule and override commands."""

import click

from ledgerline.cli.date_filters import parse_date_or_exit
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.entities import EntryKind, Frequency, RecurringRule
from ledgerline.domain.errors import DomainError
from ledgerline.domain.ledger import LedgerService

KIND_CHOICE = click.Choice([k.value for k in EntryKind])
FREQUENCY_CHOICE = click.Choice([f.value for f in Frequency])
WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def describe_schedule(rule: RecurringRule) -> str:
    """Render a rule's schedule for display."""
    if rule.frequency == Frequency.WEEKLY:
        return f"weekly on {WEEKDAYS[rule.day_of_week]}"
    if rule.frequency == Frequency.MONTHLY:
        return f"monthly on day {rule.day_of_month or 1}"
    if rule.frequency == Frequency.YEARLY:
        return f"yearly on {rule.start_date.strftime('%b %d')}"
    return "daily"


@click.group()
def recurring_group():
    """Manage recurring expense and income rules."""
    pass


@recurring_group.command("add")
@click.argument("kind", type=KIND_CHOICE)
@click.option("--amount", required=True, help="Base amount")
@click.option("--description", required=True, help="Description")
@click.option("--frequency", type=FREQUENCY_CHOICE, default="monthly", show_default=True)
@click.option("--start-date", required=True, help="First day the rule applies")
@click.option("--end-date", help="Last day the rule applies")
@click.option("--day-of-month", type=click.IntRange(1, 31), help="Day for monthly rules")
@click.option(
    "--day-of-week",
    type=click.IntRange(0, 6),
    help="Day for weekly rules (0 = Sunday ... 6 = Saturday)",
)
@click.option("--id", "rule_id", help="Rule ID (generated if not provided)")
@click.pass_context
def add_rule(
    ctx,
    kind: str,
    amount: str,
    description: str,
    frequency: str,
    start_date: str,
    end_date: str | None,
    day_of_month: int | None,
    day_of_week: int | None,
    rule_id: str | None,
):
    """Create a recurring rule.

    Examples:
        ledgerline recurring add expense --amount 950 --description Rent --start-date 2024-01-01 --day-of-month 1
        ledgerline recurring add income --amount 3200 --description Salary --start-date 2024-01-01 --day-of-month 25
    """
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    try:
        rule = LedgerService(ctx.obj["context"]).add_rule(
            EntryKind(kind),
            amount=amount,
            description=description,
            frequency=Frequency(frequency),
            start_date=start,
            end_date=end,
            day_of_month=day_of_month,
            day_of_week=day_of_week,
            rule_id=rule_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created recurring {kind} '{rule.description}' (ID: {rule.id})")
    click.echo(f"  {rule.amount} {describe_schedule(rule)} from {rule.start_date}")


@recurring_group.command("list")
@click.argument("kind", type=KIND_CHOICE, required=False)
@click.pass_context
def list_rules(ctx, kind: str | None):
    """List recurring rules and their overrides."""
    source = ctx.obj["context"].source
    kinds = [EntryKind(kind)] if kind else list(EntryKind)
    overrides = source.list_overrides()

    found = False
    for entry_kind in kinds:
        rules = source.list_rules(entry_kind)
        if not rules:
            continue
        found = True
        click.echo(f"\nRecurring {entry_kind.value}:")
        click.echo("-" * 80)
        for rule in rules:
            end = f" until {rule.end_date}" if rule.end_date else ""
            marker = " *" if rule.speculative else ""
            click.echo(
                f"{rule.id:<34} {rule.amount:>10}  {rule.description} "
                f"({describe_schedule(rule)} from {rule.start_date}{end}){marker}"
            )
            for override in overrides:
                if override.recurring_id == rule.id:
                    click.echo(f"{'':<34} {override.amount:>10}  override for {override.year_month}")

    if not found:
        click.echo("No recurring rules found.")


@recurring_group.command("update")
@click.argument("kind", type=KIND_CHOICE)
@click.argument("rule_id", metavar="RULE_ID")
@click.option("--amount", help="New base amount")
@click.option("--description", help="New description")
@click.option("--frequency", type=FREQUENCY_CHOICE, help="New frequency")
@click.option("--start-date", help="New start date")
@click.option("--end-date", help="New end date")
@click.option("--clear-end-date", is_flag=True, help="Remove the end date")
@click.option("--day-of-month", type=click.IntRange(1, 31), help="New day for monthly rules")
@click.option("--day-of-week", type=click.IntRange(0, 6), help="New day for weekly rules")
@click.pass_context
def update_rule(
    ctx,
    kind: str,
    rule_id: str,
    amount: str | None,
    description: str | None,
    frequency: str | None,
    start_date: str | None,
    end_date: str | None,
    clear_end_date: bool,
    day_of_month: int | None,
    day_of_week: int | None,
):
    """Update a rule's base fields. Overrides are kept."""
    if clear_end_date and end_date:
        click.echo("Error: Cannot use --end-date with --clear-end-date", err=True)
        ctx.exit(1)

    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    try:
        rule = LedgerService(ctx.obj["context"]).update_rule(
            EntryKind(kind),
            rule_id,
            amount=amount,
            description=description,
            frequency=Frequency(frequency) if frequency else None,
            start_date=start,
            end_date=end,
            day_of_month=day_of_month,
            day_of_week=day_of_week,
            clear_end_date=clear_end_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated recurring {kind} '{rule.description}' (ID: {rule.id})")


@recurring_group.command("delete")
@click.argument("kind", type=KIND_CHOICE)
@click.argument("rule_id", metavar="RULE_ID")
@click.pass_context
def delete_rule(ctx, kind: str, rule_id: str):
    """Delete a rule. Deleting an income rule also deletes its overrides."""
    try:
        LedgerService(ctx.obj["context"]).delete_rule(EntryKind(kind), rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted recurring {kind} {rule_id}")


@recurring_group.group("override")
def override_group():
    """Manage per-month overrides of recurring income."""
    pass


@override_group.command("set")
@click.argument("rule_id", metavar="RULE_ID")
@click.argument("year_month", metavar="YYYY-MM")
@click.argument("amount")
@click.pass_context
def set_override(ctx, rule_id: str, year_month: str, amount: str):
    """Set the amount of a recurring income for one month."""
    try:
        override = LedgerService(ctx.obj["context"]).set_override(rule_id, year_month, amount)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Override for {override.year_month} set to {override.amount}")


@override_group.command("delete")
@click.argument("rule_id", metavar="RULE_ID")
@click.argument("year_month", metavar="YYYY-MM")
@click.pass_context
def delete_override(ctx, rule_id: str, year_month: str):
    """Remove the override of a recurring income for one month."""
    try:
        removed = LedgerService(ctx.obj["context"]).delete_override(rule_id, year_month)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if not removed:
        click.echo(f"No override for {year_month}.")
        return
    click.echo(f"Override for {year_month} removed")


def register_commands(cli):
    """Register recurring commands with main CLI."""
    cli.add_command(recurring_group, name="recurring")
