"""Worker rows and the notes attached to them."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select, update

from rentledger.domain.models import Worker, WorkerNote
from rentledger.infrastructure.database.schema import worker_notes, workers

if TYPE_CHECKING:
    from sqlalchemy import Connection


class WorkerRepository:
    """Owner-scoped SQL for workers and worker notes."""

    def __init__(self, conn: Connection, owner: str) -> None:
        self._conn = conn
        self._owner = owner

    def list_all(self) -> list[Worker]:
        rows = self._conn.execute(
            select(workers)
            .where(workers.c.owner == self._owner)
            .order_by(workers.c.created_at, workers.c.id)
        ).mappings().all()
        notes = self._notes([str(r["id"]) for r in rows])
        return [_to_worker(row, notes.get(str(row["id"]), [])) for row in rows]

    def get(self, worker_id: str) -> Worker | None:
        row = self._conn.execute(
            select(workers).where(workers.c.id == worker_id, workers.c.owner == self._owner)
        ).mappings().first()
        if row is None:
            return None
        return _to_worker(row, self._notes([worker_id]).get(worker_id, []))

    def insert(self, worker: Worker) -> None:
        self._conn.execute(
            insert(workers).values(
                id=worker.id,
                owner=self._owner,
                created_at=worker.created_at.isoformat(),
                version=worker.version,
                **_columns(worker),
            )
        )

    def save(self, worker: Worker, *, expected_version: int | None = None) -> Worker | None:
        """Overwrite the stored worker; ``None`` on a version mismatch."""
        stmt = (
            update(workers)
            .where(workers.c.id == worker.id, workers.c.owner == self._owner)
            .values(version=workers.c.version + 1, **_columns(worker))
        )
        if expected_version is not None:
            stmt = stmt.where(workers.c.version == expected_version)
        if self._conn.execute(stmt).rowcount == 0:
            return None
        return self.get(worker.id)

    def delete(self, worker_id: str) -> bool:
        """Delete a worker; notes and payments cascade."""
        result = self._conn.execute(
            delete(workers).where(workers.c.id == worker_id, workers.c.owner == self._owner)
        )
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def _notes(self, worker_ids: list[str]) -> dict[str, list[WorkerNote]]:
        if not worker_ids:
            return {}
        rows = self._conn.execute(
            select(worker_notes)
            .where(worker_notes.c.worker_id.in_(worker_ids))
            .order_by(worker_notes.c.created_at.desc(), worker_notes.c.id.desc())
        ).mappings().all()
        grouped: dict[str, list[WorkerNote]] = defaultdict(list)
        for row in rows:
            grouped[str(row["worker_id"])].append(_to_note(row))
        return grouped

    def get_note(self, note_id: str) -> WorkerNote | None:
        row = self._conn.execute(
            select(worker_notes)
            .join(workers, workers.c.id == worker_notes.c.worker_id)
            .where(worker_notes.c.id == note_id, workers.c.owner == self._owner)
        ).mappings().first()
        return _to_note(row) if row is not None else None

    def insert_note(self, note: WorkerNote) -> None:
        self._conn.execute(
            insert(worker_notes).values(
                id=note.id,
                worker_id=note.worker_id,
                title=note.title,
                content=note.content,
                created_at=note.created_at.isoformat(),
            )
        )

    def update_note(self, note: WorkerNote) -> None:
        self._conn.execute(
            update(worker_notes)
            .where(worker_notes.c.id == note.id)
            .values(title=note.title, content=note.content)
        )

    def delete_note(self, note_id: str) -> bool:
        if self.get_note(note_id) is None:
            return False
        self._conn.execute(delete(worker_notes).where(worker_notes.c.id == note_id))
        return True


def _columns(worker: Worker) -> dict[str, Any]:
    salary = worker.monthly_salary
    return {
        "full_name": worker.full_name,
        "position": worker.position,
        "monthly_salary": str(salary) if salary is not None else None,
        "description": worker.description,
        "photo": worker.photo,
    }


def _to_note(row: Any) -> WorkerNote:
    return WorkerNote(
        id=row["id"],
        worker_id=row["worker_id"],
        title=row["title"],
        content=row["content"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _to_worker(row: Any, notes: list[WorkerNote]) -> Worker:
    salary = row["monthly_salary"]
    return Worker(
        id=row["id"],
        full_name=row["full_name"],
        position=row["position"],
        monthly_salary=Decimal(salary) if salary is not None else None,
        description=row["description"],
        photo=row["photo"],
        created_at=datetime.fromisoformat(row["created_at"]),
        notes=tuple(notes),
        version=row["version"],
    )
