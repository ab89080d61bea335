"""Main CLI entry point."""

import logging

import click

from ledgerline.context import init_context

# Import and register all commands at module level
from ledgerline.cli.commands import (
    entry,
    recurring,
    balance,
    report,
    simulate,
    reset,
    settings,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERLINE_DB_PATH environment variable)",
    envvar="LEDGERLINE_DB_PATH",
)
@click.option(
    "--sample-data",
    is_flag=True,
    help="Read generated sample data instead of the database (read-only)",
    envvar="LEDGERLINE_SAMPLE_DATA",
)
@click.option(
    "--sync-dir",
    type=click.Path(),
    help="Directory to mirror committed data to",
    envvar="LEDGERLINE_SYNC_DIR",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="LEDGERLINE_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, sample_data: bool, sync_dir: str | None, log_level: str):
    """Ledgerline - recurring budget and balance projection.

    Record one-off and recurring expenses and income, then project the
    running balance for any month, range or year. Use 'simulate' to try
    changes out before committing them.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Open the data source only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        context = init_context(
            database_path=db_path, sample_data=sample_data, sync_dir=sync_dir
        )
        ctx.obj["context"] = context
        ctx.call_on_close(context.reset)


# Register all commands
entry.register_commands(cli)
recurring.register_commands(cli)
balance.register_commands(cli)
report.register_commands(cli)
simulate.register_commands(cli)
reset.register_commands(cli)
settings.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
