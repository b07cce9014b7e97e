"""Technique rows and their day-off register."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select, update

from rentledger.domain.models import Technique, rental_state
from rentledger.infrastructure.database.schema import technique_day_offs, techniques

if TYPE_CHECKING:
    from sqlalchemy import Connection


class TechniqueRepository:
    """Owner-scoped SQL for techniques, on the caller's connection."""

    def __init__(self, conn: Connection, owner: str) -> None:
        self._conn = conn
        self._owner = owner

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all(self) -> list[Technique]:
        rows = self._conn.execute(
            select(techniques)
            .where(techniques.c.owner == self._owner)
            .order_by(techniques.c.created_at, techniques.c.id)
        ).mappings().all()
        day_offs = self._day_offs([str(r["id"]) for r in rows])
        return [_to_technique(row, day_offs.get(str(row["id"]), [])) for row in rows]

    def get(self, technique_id: str) -> Technique | None:
        row = self._conn.execute(
            select(techniques).where(
                techniques.c.id == technique_id,
                techniques.c.owner == self._owner,
            )
        ).mappings().first()
        if row is None:
            return None
        return _to_technique(row, self._day_offs([technique_id]).get(technique_id, []))

    def _day_offs(self, technique_ids: list[str]) -> dict[str, list[str]]:
        if not technique_ids:
            return {}
        rows = self._conn.execute(
            select(technique_day_offs.c.technique_id, technique_day_offs.c.day).where(
                technique_day_offs.c.technique_id.in_(technique_ids)
            )
        ).all()
        grouped: dict[str, list[str]] = defaultdict(list)
        for technique_id, day in rows:
            grouped[str(technique_id)].append(str(day))
        return grouped

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, technique: Technique) -> None:
        self._conn.execute(
            insert(techniques).values(
                id=technique.id,
                owner=self._owner,
                created_at=technique.created_at.isoformat(),
                version=technique.version,
                **_columns(technique),
            )
        )
        self._write_day_offs(technique)

    def save(
        self,
        technique: Technique,
        *,
        expected_version: int | None = None,
    ) -> Technique | None:
        """Overwrite the stored row with *technique* and bump its version.

        With *expected_version*, the write only lands if the stored version
        still matches; ``None`` is returned when it does not.
        """
        stmt = (
            update(techniques)
            .where(techniques.c.id == technique.id, techniques.c.owner == self._owner)
            .values(version=techniques.c.version + 1, **_columns(technique))
        )
        if expected_version is not None:
            stmt = stmt.where(techniques.c.version == expected_version)
        if self._conn.execute(stmt).rowcount == 0:
            return None
        self._conn.execute(
            delete(technique_day_offs).where(technique_day_offs.c.technique_id == technique.id)
        )
        self._write_day_offs(technique)
        return self.get(technique.id)

    def delete(self, technique_id: str) -> bool:
        """Delete a technique; its day-offs go with it (ON DELETE CASCADE)."""
        result = self._conn.execute(
            delete(techniques).where(
                techniques.c.id == technique_id,
                techniques.c.owner == self._owner,
            )
        )
        return result.rowcount > 0

    def _write_day_offs(self, technique: Technique) -> None:
        if technique.day_offs:
            self._conn.execute(
                insert(technique_day_offs),
                [{"technique_id": technique.id, "day": day} for day in technique.day_offs],
            )


def _columns(technique: Technique) -> dict[str, Any]:
    end = technique.end_date
    return {
        "name": technique.name,
        "description": technique.description,
        "monthly_rent": str(technique.monthly_rent),
        "planned_working_days": technique.planned_working_days,
        "start_date": technique.start_date.isoformat(),
        "status": str(technique.status),
        "end_date": end.isoformat() if end is not None else None,
    }


def _to_technique(row: Any, day_offs: list[str]) -> Technique:
    end_raw = row["end_date"]
    return Technique(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        monthly_rent=Decimal(row["monthly_rent"]),
        planned_working_days=row["planned_working_days"],
        start_date=date.fromisoformat(row["start_date"]),
        rental=rental_state(date.fromisoformat(end_raw) if end_raw else None),
        day_offs=day_offs,
        created_at=datetime.fromisoformat(row["created_at"]),
        version=row["version"],
    )
