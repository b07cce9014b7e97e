"""Command: ledger-wide totals for one payroll month."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rentledger.commands._base import LedgerCommand

if TYPE_CHECKING:
    from rentledger.commands._context import AppContext


@click.command(
    cls=LedgerCommand,
    examples="""\
  rentledger dashboard
  rentledger --today 2024-01-31 dashboard --month 2024-01""",
)
@click.option("--month", default=None, help="Payroll month (YYYY-MM, default: current).")
@click.pass_obj
def dashboard(app: AppContext, month: str | None) -> None:
    """Show rent and payroll totals."""
    from rentledger.services.reports import ReportService

    app.emit(ReportService(app.ledger, app.credential).dashboard(month=month))
