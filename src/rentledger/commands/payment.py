"""Command group: salary payments to workers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rentledger.commands._base import LedgerGroup
from rentledger.services.payments import PaymentService

if TYPE_CHECKING:
    from rentledger.commands._context import AppContext


@click.group(
    cls=LedgerGroup,
    examples="""\
  rentledger payment add WRK-0001 1500 --date 2024-01-15 --note "Advance"
  rentledger payment recent --limit 10
  rentledger payment delete PAY-0001""",
)
def payment() -> None:
    """Record and review salary payments."""


@payment.command()
@click.argument("worker_id")
@click.argument("amount")
@click.option("--date", "paid_on", default=None, help="Payment day (default: today).")
@click.option("--note", default=None, help="Optional note.")
@click.pass_obj
def add(
    app: AppContext,
    worker_id: str,
    amount: str,
    paid_on: str | None,
    note: str | None,
) -> None:
    """Record a payment of AMOUNT to a worker."""
    app.emit(
        PaymentService(app.ledger, app.credential).add(
            worker_id, amount=amount, date=paid_on, note=note
        )
    )


@payment.command()
@click.argument("payment_id")
@click.pass_obj
def delete(app: AppContext, payment_id: str) -> None:
    """Delete a payment."""
    app.emit(PaymentService(app.ledger, app.credential).delete(payment_id))


@payment.command()
@click.option("--limit", type=click.IntRange(min=0), default=None, help="How many to show.")
@click.pass_obj
def recent(app: AppContext, limit: int | None) -> None:
    """Show the newest payments first."""
    app.emit(PaymentService(app.ledger, app.credential).recent(limit=limit))
