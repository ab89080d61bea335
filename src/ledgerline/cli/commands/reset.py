"""Reset commands."""

import click

from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.errors import DomainError
from ledgerline.domain.ledger import LedgerService

RESETS = {
    "transactions": (
        "reset_transactions",
        "Delete all one-off expenses and income?",
        "All one-off entries deleted.",
    ),
    "recurring": (
        "reset_recurring",
        "Delete all recurring rules and overrides?",
        "All recurring rules and overrides deleted.",
    ),
    "all": (
        "reset_all",
        "Delete all entries, recurring rules, overrides and the starting balance?",
        "All data deleted. Settings were kept.",
    ),
}


def _make_reset_command(name: str, method: str, prompt: str, done: str) -> click.Command:
    @click.command(name, help=f"{prompt.rstrip('?')}.")
    @click.option("--yes", is_flag=True, help="Do not ask for confirmation")
    @click.pass_context
    def command(ctx, yes: bool):
        if not yes:
            click.confirm(prompt, abort=True)
        try:
            getattr(LedgerService(ctx.obj["context"]), method)()
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        click.echo(done)

    return command


@click.group()
def reset_group():
    """Delete stored data."""
    pass


for _name, (_method, _prompt, _done) in RESETS.items():
    reset_group.add_command(_make_reset_command(_name, _method, _prompt, _done))


def register_commands(cli):
    """Register reset commands with main CLI."""
    cli.add_command(reset_group, name="reset")
