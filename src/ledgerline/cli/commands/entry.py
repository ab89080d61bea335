"""One-off expense and income commands."""

import click

from ledgerline.cli.date_filters import parse_date_or_exit, parse_year_month_or_exit
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.engine import LedgerEngine
from ledgerline.domain.entities import Entry, EntryKind
from ledgerline.domain.errors import DomainError
from ledgerline.domain.ledger import LedgerService
from ledgerline.utils.amount_parser import normalize_amount


def _stored_amount(amount: str) -> str:
    """Normalize a typed amount the way the write path stores it."""
    try:
        return normalize_amount(amount)
    except ValueError:
        return amount


def _print_entries(entries: list[Entry]) -> None:
    click.echo("-" * 72)
    click.echo(f"{'Date':<12} {'Amount':>12}  {'Description'}")
    click.echo("-" * 72)
    for item in entries:
        marker = " *" if item.speculative else ""
        click.echo(f"{item.date.isoformat():<12} {item.amount:>12}  {item.description}{marker}")


def make_entry_group(kind: EntryKind) -> click.Group:
    """Build the command group for one entry kind."""
    noun = kind.value

    @click.group(name=noun, help=f"Manage one-off {noun} entries.")
    def group():
        pass

    @group.command("add")
    @click.option("--amount", required=True, help="Amount (e.g., 123.45)")
    @click.option("--description", default="", help="Description")
    @click.option(
        "--date",
        "date_str",
        default="today",
        help="Date (YYYY-MM-DD or relative like 'today', 'yesterday')",
    )
    @click.pass_context
    def add_entry(ctx, amount: str, description: str, date_str: str):
        """Record an entry."""
        entry_date = parse_date_or_exit(ctx, date_str)
        try:
            service = LedgerService(ctx.obj["context"])
            created = service.add_entry(kind, amount, description, entry_date)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        suffix = " (simulated)" if created.speculative else ""
        click.echo(f"Added {noun} {created.amount} on {created.date}{suffix}")

    @group.command("list")
    @click.option("--month", help="Only show entries in this month (YYYY-MM)")
    @click.option(
        "--with-recurring",
        is_flag=True,
        help="Include recurring occurrences (requires --month)",
    )
    @click.pass_context
    def list_entries(ctx, month: str | None, with_recurring: bool):
        """List entries, oldest first. Simulated entries are marked with '*'."""
        context = ctx.obj["context"]
        if with_recurring and not month:
            click.echo("Error: --with-recurring requires --month", err=True)
            ctx.exit(1)

        if month:
            year_month = parse_year_month_or_exit(ctx, month)
            if with_recurring:
                entries = LedgerEngine(context).month_entries(kind, year_month)
            else:
                entries = [
                    e for e in context.source.list_entries(kind) if year_month.contains(e.date)
                ]
        else:
            entries = context.source.list_entries(kind)

        if not entries:
            click.echo(f"No {noun} entries found.")
            return
        _print_entries(entries)

    @group.command("delete")
    @click.option("--amount", required=True, help="Amount exactly as stored")
    @click.option("--description", default="", help="Description exactly as stored")
    @click.option("--date", "date_str", required=True, help="Date of the entry")
    @click.pass_context
    def delete_entry(ctx, amount: str, description: str, date_str: str):
        """Delete the first entry matching date, description and amount."""
        target = Entry(
            amount=_stored_amount(amount),
            description=description.strip(),
            date=parse_date_or_exit(ctx, date_str),
        )
        try:
            removed = LedgerService(ctx.obj["context"]).delete_entry(kind, target)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        if not removed:
            click.echo(f"Error: No matching {noun} entry found", err=True)
            ctx.exit(1)
        click.echo(f"Deleted {noun} {amount} on {target.date}")

    @group.command("update")
    @click.option("--amount", required=True, help="Current amount")
    @click.option("--description", default="", help="Current description")
    @click.option("--date", "date_str", required=True, help="Current date")
    @click.option("--new-amount", help="New amount")
    @click.option("--new-description", help="New description")
    @click.option("--new-date", help="New date")
    @click.pass_context
    def update_entry(
        ctx,
        amount: str,
        description: str,
        date_str: str,
        new_amount: str | None,
        new_description: str | None,
        new_date: str | None,
    ):
        """Update the first entry matching date, description and amount."""
        match = Entry(
            amount=_stored_amount(amount),
            description=description.strip(),
            date=parse_date_or_exit(ctx, date_str),
        )
        updated = Entry(
            amount=new_amount if new_amount is not None else amount,
            description=new_description if new_description is not None else description,
            date=parse_date_or_exit(ctx, new_date, "new date") if new_date else match.date,
        )
        try:
            changed = LedgerService(ctx.obj["context"]).update_entry(kind, match, updated)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        if not changed:
            click.echo(f"Error: No matching {noun} entry found", err=True)
            ctx.exit(1)
        click.echo(f"Updated {noun} on {updated.date}")

    return group


expense_group = make_entry_group(EntryKind.EXPENSE)
income_group = make_entry_group(EntryKind.INCOME)


def register_commands(cli):
    """Register expense and income commands with main CLI."""
    cli.add_command(expense_group)
    cli.add_command(income_group)
