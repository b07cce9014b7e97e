"""Command group: free-text notes attached to workers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rentledger.commands._base import LedgerGroup
from rentledger.services.workers import WorkerService

if TYPE_CHECKING:
    from rentledger.commands._context import AppContext


@click.group(
    cls=LedgerGroup,
    examples="""\
  rentledger note add WRK-0001 "Prefers morning shifts" --title Schedule
  rentledger note update NOTE-0001 --content "Now on night shifts"
  rentledger note delete NOTE-0001""",
)
def note() -> None:
    """Notes on workers."""


@note.command()
@click.argument("worker_id")
@click.argument("content")
@click.option("--title", default=None, help="Optional title.")
@click.pass_obj
def add(app: AppContext, worker_id: str, content: str, title: str | None) -> None:
    """Attach a note to a worker."""
    app.emit(
        WorkerService(app.ledger, app.credential).add_note(
            worker_id, content=content, title=title
        )
    )


@note.command()
@click.argument("note_id")
@click.option("--title", default=None, help="New title.")
@click.option("--content", default=None, help="New content.")
@click.pass_obj
def update(app: AppContext, note_id: str, title: str | None, content: str | None) -> None:
    """Replace a note's title or content."""
    app.emit(
        WorkerService(app.ledger, app.credential).update_note(
            note_id, title=title, content=content
        )
    )


@note.command()
@click.argument("note_id")
@click.pass_obj
def delete(app: AppContext, note_id: str) -> None:
    """Delete a note."""
    app.emit(WorkerService(app.ledger, app.credential).delete_note(note_id))
