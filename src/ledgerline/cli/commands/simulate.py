"""Simulation commands."""

import click

from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.engine import LedgerEngine
from ledgerline.domain.errors import DomainError


@click.group()
def simulate_group():
    """Try changes out without committing them.

    While a simulation is active every write is marked as simulated and
    nothing is pushed to the sync directory. 'accept' commits the changes,
    'discard' restores the data exactly as it was at 'start'.
    """
    pass


@simulate_group.command("start")
@click.pass_context
def start(ctx):
    """Start a simulation."""
    try:
        started = LedgerEngine(ctx.obj["context"]).start_simulation()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if started:
        click.echo("Simulation started. Changes are marked as simulated until accepted.")
    else:
        click.echo("A simulation is already active.")


@simulate_group.command("accept")
@click.pass_context
def accept(ctx):
    """Commit all simulated changes."""
    try:
        accepted = LedgerEngine(ctx.obj["context"]).accept_simulation()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if accepted:
        click.echo("Simulation accepted.")
    else:
        click.echo("No simulation active.")


@simulate_group.command("discard")
@click.pass_context
def discard(ctx):
    """Throw away all simulated changes."""
    try:
        discarded = LedgerEngine(ctx.obj["context"]).discard_simulation()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if discarded:
        click.echo("Simulation discarded.")
    else:
        click.echo("No simulation active.")


@simulate_group.command("status")
@click.pass_context
def status(ctx):
    """Show whether a simulation is active and what it changed."""
    engine = LedgerEngine(ctx.obj["context"])
    if not engine.is_simulating:
        click.echo("No simulation active.")
        return

    click.echo("Simulation active.")
    changes = {key: change for key, change in engine.pending_changes().items() if not change.is_empty}
    if not changes:
        click.echo("No pending changes.")
        return

    click.echo("-" * 60)
    click.echo(f"{'Collection':<30} {'Added':>8} {'Removed':>8} {'Modified':>8}")
    click.echo("-" * 60)
    for key, change in changes.items():
        click.echo(
            f"{key:<30} {len(change.added):>8} {len(change.removed):>8} {len(change.modified):>8}"
        )


def register_commands(cli):
    """Register simulation commands with main CLI."""
    cli.add_command(simulate_group, name="simulate")
