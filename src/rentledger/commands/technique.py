"""Command group: rented techniques, their day-offs and accrued rent."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from rentledger.commands._base import LedgerGroup
from rentledger.services.techniques import TechniqueService

if TYPE_CHECKING:
    from rentledger.commands._context import AppContext

_TECHNIQUE_EXAMPLES = """\
  rentledger technique add "Excavator JCB" --rent 15000 --days 26 --start 2024-01-01
  rentledger technique list --status active
  rentledger technique day-off TECH-0001 2024-01-07
  rentledger technique calendar TECH-0001 --month 2024-01
  rentledger technique end TECH-0001 --date 2024-01-31"""


def _service(app: AppContext) -> TechniqueService:
    return TechniqueService(app.ledger, app.credential)


@click.group(cls=LedgerGroup, examples=_TECHNIQUE_EXAMPLES)
def technique() -> None:
    """Rented techniques: rates, rental windows and day-offs."""


@technique.command(
    examples="""\
  rentledger technique add "Crane" --rent 15000 --days 26 --start 2024-01-01
  rentledger --json technique add "Loader" --rent 9000.50 --days 22 --start 2024-02-05"""
)
@click.argument("name")
@click.option("--rent", "monthly_rent", required=True, help="Monthly rent amount.")
@click.option("--days", "planned_working_days", required=True, help="Planned working days.")
@click.option("--start", "start_date", required=True, help="Rental start day (YYYY-MM-DD).")
@click.option("--description", default=None, help="Free-text description.")
@click.pass_obj
def add(
    app: AppContext,
    name: str,
    monthly_rent: str,
    planned_working_days: str,
    start_date: str,
    description: str | None,
) -> None:
    """Add a technique. It starts active with no day-offs."""
    app.emit(
        _service(app).add(
            name=name,
            monthly_rent=monthly_rent,
            planned_working_days=planned_working_days,
            start_date=start_date,
            description=description,
        )
    )


@technique.command("list")
@click.option(
    "--status",
    type=click.Choice(["active", "ended"]),
    default=None,
    help="Only techniques with this status.",
)
@click.pass_obj
def list_cmd(app: AppContext, status: str | None) -> None:
    """List techniques with their accrued rent."""
    app.emit(_service(app).list_techniques(status=status))


@technique.command()
@click.argument("technique_id")
@click.pass_obj
def show(app: AppContext, technique_id: str) -> None:
    """Show one technique with its accrual breakdown."""
    app.emit(_service(app).get(technique_id))


@technique.command(
    examples="""\
  rentledger technique update TECH-0001 --rent 16000
  rentledger technique update TECH-0001 --end 2024-01-31
  rentledger technique update TECH-0001 --clear-end --expected-version 3"""
)
@click.argument("technique_id")
@click.option("--name", default=None, help="New name.")
@click.option("--rent", "monthly_rent", default=None, help="New monthly rent.")
@click.option("--days", "planned_working_days", default=None, help="New planned working days.")
@click.option("--start", "start_date", default=None, help="New start day.")
@click.option("--end", "end_date", default=None, help="End day; ends the rental.")
@click.option("--clear-end", is_flag=True, help="Remove the end day; reopens the rental.")
@click.option("--description", default=None, help="New description.")
@click.option("--expected-version", type=int, default=None, help="Reject if changed since.")
@click.pass_obj
def update(
    app: AppContext,
    technique_id: str,
    name: str | None,
    monthly_rent: str | None,
    planned_working_days: str | None,
    start_date: str | None,
    end_date: str | None,
    clear_end: bool,
    description: str | None,
    expected_version: int | None,
) -> None:
    """Update a technique's fields, all or nothing."""
    if clear_end and end_date is not None:
        raise click.UsageError("--end and --clear-end are mutually exclusive")

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if monthly_rent is not None:
        changes["monthly_rent"] = monthly_rent
    if planned_working_days is not None:
        changes["planned_working_days"] = planned_working_days
    if start_date is not None:
        changes["start_date"] = start_date
    if end_date is not None:
        changes["end_date"] = end_date
    if clear_end:
        changes["end_date"] = None
    if description is not None:
        changes["description"] = description

    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    app.emit(
        _service(app).update(technique_id, changes=changes, expected_version=expected_version)
    )


@technique.command()
@click.argument("technique_id")
@click.option("--date", "end_date", default=None, help="End day (default: today).")
@click.option("--expected-version", type=int, default=None, help="Reject if changed since.")
@click.pass_obj
def end(
    app: AppContext,
    technique_id: str,
    end_date: str | None,
    expected_version: int | None,
) -> None:
    """End a rental. Accrual stops at the end day."""
    app.emit(
        _service(app).end(technique_id, end_date=end_date, expected_version=expected_version)
    )


@technique.command()
@click.argument("technique_id")
@click.pass_obj
def delete(app: AppContext, technique_id: str) -> None:
    """Delete a technique and its day-offs."""
    app.emit(_service(app).delete(technique_id))


@technique.command(
    "day-off",
    examples="""\
  rentledger technique day-off TECH-0001 2024-01-07
  rentledger technique day-off TECH-0001 2024-01-07 --mode remove""",
)
@click.argument("technique_id")
@click.argument("day")
@click.option(
    "--mode",
    type=click.Choice(["toggle", "add", "remove"]),
    default="toggle",
    show_default=True,
    help="Flip the day, or force it marked or unmarked.",
)
@click.option("--expected-version", type=int, default=None, help="Reject if changed since.")
@click.pass_obj
def day_off(
    app: AppContext,
    technique_id: str,
    day: str,
    mode: str,
    expected_version: int | None,
) -> None:
    """Mark or unmark DAY as a day-off (not billed)."""
    service = _service(app)
    writers = {
        "toggle": service.toggle_day_off,
        "add": service.add_day_off,
        "remove": service.remove_day_off,
    }
    app.emit(writers[mode](technique_id, day, expected_version=expected_version))


@technique.command()
@click.argument("technique_id")
@click.option("--month", default=None, help="Month to show (YYYY-MM, default: current).")
@click.pass_obj
def calendar(app: AppContext, technique_id: str, month: str | None) -> None:
    """Show a month grid with working days and day-offs."""
    app.emit(_service(app).calendar(technique_id, month=month))
