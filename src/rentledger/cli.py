"""Root CLI group for rentledger with global flags and command registration."""

from __future__ import annotations

from datetime import datetime

import click

from rentledger import __version__
from rentledger.commands import register_commands
from rentledger.commands._context import AppContext
from rentledger.config.settings import LedgerSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rentledger")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (ids only).")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Pin the reference day (YYYY-MM-DD).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    today: datetime | None,
) -> None:
    """rentledger — rent accrual and payroll ledger for rented machinery."""
    settings = LedgerSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        clock={"today": today.date()} if today is not None else None,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
