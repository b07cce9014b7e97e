"""TechniqueService — rental lifecycle, day-offs, and accrual views.

Pipeline for every mutation: VALIDATE → LOAD → APPLY → WRITE → RESPOND.
Field validation and the lifecycle rules both run before anything is
written; the response is built from a fresh read of the stored row.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

from rentledger.domain.accrual import accrual_summary, total_active_rent
from rentledger.domain.calendar import month_calendar
from rentledger.domain.dates import Month, canonical_day, is_within
from rentledger.domain.dayoffs import (
    active_day_offs,
    add_day_off,
    has_day_off,
    inert_day_offs,
    remove_day_off,
    toggle_day_off,
)
from rentledger.domain.errors import InvalidDateRangeError, MalformedDayError
from rentledger.domain.lifecycle import apply_update, end_technique, new_technique
from rentledger.domain.models import Technique
from rentledger.domain.money import format_amount
from rentledger.domain.types import TechniqueStatus
from rentledger.domain.validation import (
    DayInput,
    TechniqueChanges,
    TechniqueInput,
    validate_fields,
)
from rentledger.infrastructure.database.counters import TECHNIQUE_PREFIX
from rentledger.services.base import (
    BaseService,
    authenticated,
    failure,
    not_found,
    stale_write,
    validation_failure,
)
from rentledger.services.result import INVALID_DATE_RANGE, VALIDATION_FAILED, ServiceResult

logger = logging.getLogger(__name__)

DayOffWriter = Callable[[Technique, date], tuple[str, ...]]


def technique_data(technique: Technique, *, today: date, places: int) -> dict[str, Any]:
    """Stored fields plus every accrual figure as of *today*."""
    end = technique.end_date
    data: dict[str, Any] = {
        "id": technique.id,
        "name": technique.name,
        "description": technique.description,
        "monthly_rent": format_amount(technique.monthly_rent, places),
        "planned_working_days": technique.planned_working_days,
        "start_date": technique.start_date.isoformat(),
        "end_date": end.isoformat() if end is not None else None,
        "status": str(technique.status),
        "day_offs": list(technique.day_offs),
        "created_at": technique.created_at.isoformat(),
        "version": technique.version,
    }
    data.update(accrual_summary(technique, today=today).to_data(places))
    return data


class TechniqueService(BaseService):
    """Handles technique creation, updates, ending, deletion and day-offs."""

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @authenticated("list_techniques")
    def list_techniques(self, *, status: str | None = None) -> ServiceResult:
        """List techniques, optionally only ``active`` or ``ended`` ones."""
        op = "list_techniques"
        if status is not None and status not in {s.value for s in TechniqueStatus}:
            return validation_failure(op, {"status": f"Unknown status: {status}"})

        today = self._today()
        snapshot = self._ledger.snapshot(self._credential)
        selected = [
            t for t in snapshot.techniques if status is None or str(t.status) == status
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "items": [technique_data(t, today=today, places=self._places) for t in selected],
                "count": len(selected),
                "total_active_rent": format_amount(
                    total_active_rent(snapshot.techniques, today=today), self._places
                ),
            },
            meta=self._meta(),
        )

    @authenticated("get_technique")
    def get(self, technique_id: str) -> ServiceResult:
        op = "get_technique"
        today = self._today()
        with self._ledger.read(self._credential) as txn:
            technique = txn.techniques.get(technique_id)
        if technique is None:
            return not_found(op, "technique", technique_id)

        data = technique_data(technique, today=today, places=self._places)
        data["active_day_offs"] = active_day_offs(technique, today=today)
        data["inert_day_offs"] = inert_day_offs(technique, today=today)
        return ServiceResult(ok=True, op=op, data=data, meta=self._meta())

    @authenticated("technique_calendar")
    def calendar(self, technique_id: str, *, month: str | None = None) -> ServiceResult:
        """Classify every day of *month* (default: the current month)."""
        op = "technique_calendar"
        today = self._today()
        try:
            target = Month.parse(month) if month else Month.of(today)
        except (MalformedDayError, ValueError):
            return validation_failure(op, {"month": f"Not a month (expected YYYY-MM): {month}"})

        with self._ledger.read(self._credential) as txn:
            technique = txn.techniques.get(technique_id)
        if technique is None:
            return not_found(op, "technique", technique_id)

        grid = month_calendar(technique, target, today=today)
        data = {"id": technique.id, "name": technique.name, **grid.to_data(self._places)}
        return ServiceResult(ok=True, op=op, data=data, meta=self._meta())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @authenticated("add_technique")
    def add(
        self,
        *,
        name: str,
        monthly_rent: Any,
        planned_working_days: Any,
        start_date: Any,
        description: str | None = None,
    ) -> ServiceResult:
        """Add a technique. It always starts active with no day-offs."""
        op = "add_technique"
        vr = validate_fields(
            TechniqueInput,
            {
                "name": name,
                "monthly_rent": monthly_rent,
                "planned_working_days": planned_working_days,
                "start_date": start_date,
                "description": description,
            },
        )
        if not vr.valid:
            return validation_failure(op, vr.errors)

        with self._ledger.transaction(self._credential) as txn:
            technique = new_technique(
                technique_id=txn.next_id(TECHNIQUE_PREFIX),
                name=vr.data["name"],
                monthly_rent=vr.data["monthly_rent"],
                planned_working_days=vr.data["planned_working_days"],
                start_date=vr.data["start_date"],
                description=vr.data.get("description"),
                created_at=self._ledger.clock.now(),
            )
            txn.techniques.insert(technique)

        logger.info("Added technique %s", technique.id)
        return self._respond(op, technique.id)

    @authenticated("update_technique")
    def update(
        self,
        technique_id: str,
        *,
        changes: dict[str, Any],
        expected_version: int | None = None,
    ) -> ServiceResult:
        """Apply a general field update, all or nothing.

        ``end_date`` set to a day ends the rental; set to ``None`` it
        reopens it. Immutable or unknown keys are ignored with a warning.
        """
        op = "update_technique"
        if not changes:
            return failure(op, VALIDATION_FAILED, "No changes specified")
        vr = validate_fields(TechniqueChanges, changes)
        if not vr.valid:
            return validation_failure(op, vr.errors)

        with self._ledger.transaction(self._credential) as txn:
            current = txn.techniques.get(technique_id)
            if current is None:
                return not_found(op, "technique", technique_id)
            if expected_version is not None and current.version != expected_version:
                return stale_write(op, technique_id, expected_version, current.version)
            try:
                outcome = apply_update(current, vr.data, today=self._today())
            except InvalidDateRangeError as exc:
                return _date_range_failure(op, exc)
            if outcome.fields_changed:
                saved = txn.techniques.save(outcome.technique, expected_version=expected_version)
                if saved is None:
                    return stale_write(op, technique_id, expected_version, None)

        if outcome.fields_changed:
            logger.info("Updated technique %s: %s", technique_id, outcome.fields_changed)
        extra: dict[str, Any] = {"fields_changed": outcome.fields_changed}
        if outcome.transition is not None:
            extra["transition"] = list(outcome.transition)
        return self._respond(op, technique_id, warnings=outcome.warnings, extra=extra)

    @authenticated("end_technique")
    def end(
        self,
        technique_id: str,
        *,
        end_date: Any = None,
        expected_version: int | None = None,
    ) -> ServiceResult:
        """End the rental on *end_date* (default: today)."""
        op = "end_technique"
        day: date | None = None
        if end_date is not None:
            vr = validate_fields(DayInput, {"day": end_date})
            if not vr.valid:
                return validation_failure(op, {"end_date": vr.errors["day"]})
            day = vr.data["day"]

        with self._ledger.transaction(self._credential) as txn:
            current = txn.techniques.get(technique_id)
            if current is None:
                return not_found(op, "technique", technique_id)
            if expected_version is not None and current.version != expected_version:
                return stale_write(op, technique_id, expected_version, current.version)
            try:
                ended = end_technique(current, day, today=self._today())
            except InvalidDateRangeError as exc:
                return _date_range_failure(op, exc)
            if txn.techniques.save(ended, expected_version=expected_version) is None:
                return stale_write(op, technique_id, expected_version, None)

        logger.info("Ended technique %s on %s", technique_id, ended.end_date)
        return self._respond(op, technique_id)

    @authenticated("delete_technique")
    def delete(self, technique_id: str) -> ServiceResult:
        """Delete a technique and its day-offs. Payments are unaffected."""
        op = "delete_technique"
        with self._ledger.transaction(self._credential) as txn:
            deleted = txn.techniques.delete(technique_id)
        if not deleted:
            return not_found(op, "technique", technique_id)
        logger.info("Deleted technique %s", technique_id)
        return ServiceResult(ok=True, op=op, data={"id": technique_id, "deleted": True})

    # ------------------------------------------------------------------
    # Day-offs
    # ------------------------------------------------------------------

    @authenticated("toggle_day_off")
    def toggle_day_off(
        self, technique_id: str, day: Any, *, expected_version: int | None = None
    ) -> ServiceResult:
        return self._write_day_offs(
            "toggle_day_off", technique_id, day, toggle_day_off, expected_version
        )

    @authenticated("add_day_off")
    def add_day_off(
        self, technique_id: str, day: Any, *, expected_version: int | None = None
    ) -> ServiceResult:
        return self._write_day_offs("add_day_off", technique_id, day, add_day_off, expected_version)

    @authenticated("remove_day_off")
    def remove_day_off(
        self, technique_id: str, day: Any, *, expected_version: int | None = None
    ) -> ServiceResult:
        return self._write_day_offs(
            "remove_day_off", technique_id, day, remove_day_off, expected_version
        )

    def _write_day_offs(
        self,
        op: str,
        technique_id: str,
        day: Any,
        writer: DayOffWriter,
        expected_version: int | None,
    ) -> ServiceResult:
        vr = validate_fields(DayInput, {"day": day})
        if not vr.valid:
            return validation_failure(op, vr.errors)
        parsed: date = vr.data["day"]
        warnings: list[str] = []

        with self._ledger.transaction(self._credential) as txn:
            current = txn.techniques.get(technique_id)
            if current is None:
                return not_found(op, "technique", technique_id)
            if expected_version is not None and current.version != expected_version:
                return stale_write(op, technique_id, expected_version, current.version)
            days = writer(current, parsed)
            updated = current.model_copy(update={"day_offs": days})
            if days != current.day_offs:
                saved = txn.techniques.save(updated, expected_version=expected_version)
                if saved is None:
                    return stale_write(op, technique_id, expected_version, None)

        today = self._today()
        if not is_within(parsed, updated.start_date, updated.end_date, today=today):
            warnings.append(
                f"{canonical_day(parsed)} is outside the rental window; "
                "it is kept but not billed"
            )
        logger.info("%s %s on %s", op, canonical_day(parsed), technique_id)
        return self._respond(
            op,
            technique_id,
            warnings=warnings,
            extra={"day": canonical_day(parsed), "marked": has_day_off(updated, parsed)},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _respond(
        self,
        op: str,
        technique_id: str,
        *,
        warnings: list[str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Build the success payload from a fresh read of the stored row."""
        with self._ledger.read(self._credential) as txn:
            technique = txn.techniques.get(technique_id)
        if technique is None:
            return not_found(op, "technique", technique_id)
        data = technique_data(technique, today=self._today(), places=self._places)
        data.update(extra or {})
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=warnings or [],
            meta=self._meta(),
        )


def _date_range_failure(op: str, exc: InvalidDateRangeError) -> ServiceResult:
    return failure(
        op,
        INVALID_DATE_RANGE,
        str(exc),
        {"start_date": exc.start.isoformat(), "end_date": exc.end.isoformat()},
    )
