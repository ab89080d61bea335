"""Application settings commands."""

import click

from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.entities import Theme
from ledgerline.domain.errors import DomainError
from ledgerline.domain.ledger import LedgerService


@click.group()
def settings_group():
    """Show or change application settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show(ctx):
    """Show the current settings."""
    current = ctx.obj["context"].source.get_settings()
    click.echo(f"Currency: {current.currency}")
    click.echo(f"Theme:    {current.theme.value}")


@settings_group.command("set")
@click.option("--currency", help="Currency code (e.g., EUR)")
@click.option("--theme", type=click.Choice([t.value for t in Theme]), help="Display theme")
@click.pass_context
def set_settings(ctx, currency: str | None, theme: str | None):
    """Change one or more settings."""
    if currency is None and theme is None:
        click.echo("Error: Nothing to change; pass --currency or --theme", err=True)
        ctx.exit(1)
    try:
        updated = LedgerService(ctx.obj["context"]).update_settings(currency=currency, theme=theme)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Settings updated: currency={updated.currency}, theme={updated.theme.value}")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
