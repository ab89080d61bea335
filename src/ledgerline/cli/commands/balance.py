"""Balance anchor commands."""

import click

from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.errors import DomainError
from ledgerline.domain.ledger import LedgerService


@click.group()
def balance_group():
    """Manage the starting balance."""
    pass


@balance_group.command("set")
@click.argument("amount")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def set_balance(ctx, amount: str, yes: bool):
    """Set the starting balance.

    This deletes every one-off expense and income entry. Recurring rules
    and overrides are kept.
    """
    if not yes:
        click.confirm(
            "Setting the starting balance deletes all one-off entries. Continue?",
            abort=True,
        )
    try:
        balance = LedgerService(ctx.obj["context"]).set_initial_balance(amount)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Starting balance set to {balance:,.2f}")


@balance_group.command("show")
@click.pass_context
def show_balance(ctx):
    """Show the starting balance."""
    balance = ctx.obj["context"].source.get_initial_balance()
    if balance is None:
        click.echo("No starting balance set.")
        return
    click.echo(f"Starting balance: {balance:,.2f}")


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(balance_group, name="balance")
