"""Command group: workers and their monthly payment status."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from rentledger.commands._base import LedgerGroup
from rentledger.services.workers import WorkerService

if TYPE_CHECKING:
    from rentledger.commands._context import AppContext

_WORKER_EXAMPLES = """\
  rentledger worker add "Ivan Petrov" --position Operator --salary 3000
  rentledger worker list --month 2024-01 --filter unpaid
  rentledger worker show WRK-0001 --month 2024-01
  rentledger worker update WRK-0001 --clear-salary"""


def _service(app: AppContext) -> WorkerService:
    return WorkerService(app.ledger, app.credential)


@click.group(cls=LedgerGroup, examples=_WORKER_EXAMPLES)
def worker() -> None:
    """Workers, salaries and payment status."""


@worker.command()
@click.argument("full_name")
@click.option("--position", required=True, help="Job position.")
@click.option("--salary", "monthly_salary", default=None, help="Monthly salary target.")
@click.option("--description", default=None, help="Free-text description.")
@click.option("--photo", default=None, help="Photo URL (http or https).")
@click.pass_obj
def add(
    app: AppContext,
    full_name: str,
    position: str,
    monthly_salary: str | None,
    description: str | None,
    photo: str | None,
) -> None:
    """Add a worker."""
    app.emit(
        _service(app).add(
            full_name=full_name,
            position=position,
            monthly_salary=monthly_salary,
            description=description,
            photo=photo,
        )
    )


@worker.command("list")
@click.option("--month", default=None, help="Payroll month (YYYY-MM, default: current).")
@click.option(
    "--filter",
    "payment_filter",
    type=click.Choice(["all", "paid", "unpaid"]),
    default="all",
    show_default=True,
    help="Keep all workers, only fully paid, or the rest.",
)
@click.pass_obj
def list_cmd(app: AppContext, month: str | None, payment_filter: str) -> None:
    """List workers with what they were paid in a month."""
    app.emit(_service(app).list_workers(month=month, payment_filter=payment_filter))


@worker.command()
@click.argument("worker_id")
@click.option("--month", default=None, help="Payroll month (YYYY-MM, default: current).")
@click.pass_obj
def show(app: AppContext, worker_id: str, month: str | None) -> None:
    """Show a worker with notes and the month's payments."""
    app.emit(_service(app).get(worker_id, month=month))


@worker.command()
@click.argument("worker_id")
@click.option("--name", "full_name", default=None, help="New full name.")
@click.option("--position", default=None, help="New position.")
@click.option("--salary", "monthly_salary", default=None, help="New monthly salary.")
@click.option("--clear-salary", is_flag=True, help="Remove the salary target.")
@click.option("--description", default=None, help="New description.")
@click.option("--photo", default=None, help="New photo URL.")
@click.option("--expected-version", type=int, default=None, help="Reject if changed since.")
@click.pass_obj
def update(
    app: AppContext,
    worker_id: str,
    full_name: str | None,
    position: str | None,
    monthly_salary: str | None,
    clear_salary: bool,
    description: str | None,
    photo: str | None,
    expected_version: int | None,
) -> None:
    """Update a worker's fields."""
    if clear_salary and monthly_salary is not None:
        raise click.UsageError("--salary and --clear-salary are mutually exclusive")

    changes: dict[str, Any] = {}
    for key, value in (
        ("full_name", full_name),
        ("position", position),
        ("monthly_salary", monthly_salary),
        ("description", description),
        ("photo", photo),
    ):
        if value is not None:
            changes[key] = value
    if clear_salary:
        changes["monthly_salary"] = None

    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    app.emit(_service(app).update(worker_id, changes=changes, expected_version=expected_version))


@worker.command()
@click.argument("worker_id")
@click.pass_obj
def delete(app: AppContext, worker_id: str) -> None:
    """Delete a worker with their notes and payments."""
    app.emit(_service(app).delete(worker_id))
