"""WorkerService — workers, their notes, and monthly payment status."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from rentledger.domain.dates import Month
from rentledger.domain.errors import MalformedDayError
from rentledger.domain.models import Worker, WorkerNote
from rentledger.domain.money import format_amount
from rentledger.domain.payments import (
    filter_workers_by_payment,
    worker_month_summary,
    worker_payments,
)
from rentledger.domain.types import PaymentFilter
from rentledger.domain.validation import (
    WorkerChanges,
    WorkerInput,
    WorkerNoteInput,
    validate_fields,
)
from rentledger.infrastructure.database.counters import NOTE_PREFIX, WORKER_PREFIX
from rentledger.services.base import (
    BaseService,
    authenticated,
    failure,
    not_found,
    stale_write,
    validation_failure,
)
from rentledger.services.result import VALIDATION_FAILED, ServiceResult

logger = logging.getLogger(__name__)

_WORKER_FIELDS = ("full_name", "position", "monthly_salary", "description", "photo")
_IMMUTABLE_WORKER_FIELDS = frozenset({"id", "created_at", "notes", "version"})


def note_data(note: WorkerNote) -> dict[str, Any]:
    return {
        "id": note.id,
        "worker_id": note.worker_id,
        "title": note.title,
        "content": note.content,
        "created_at": note.created_at.isoformat(),
    }


def worker_data(worker: Worker, *, places: int) -> dict[str, Any]:
    salary = worker.monthly_salary
    return {
        "id": worker.id,
        "full_name": worker.full_name,
        "position": worker.position,
        "monthly_salary": format_amount(salary, places) if salary is not None else None,
        "description": worker.description,
        "photo": worker.photo,
        "created_at": worker.created_at.isoformat(),
        "version": worker.version,
        "notes": [note_data(n) for n in worker.notes],
    }


def parse_month(raw: str | None, today: date) -> Month:
    """``YYYY-MM`` (or a full day), defaulting to the month of *today*."""
    return Month.parse(raw) if raw else Month.of(today)


class WorkerService(BaseService):
    """Handles worker records, notes, and per-month payment summaries."""

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @authenticated("list_workers")
    def list_workers(
        self,
        *,
        month: str | None = None,
        payment_filter: str = PaymentFilter.ALL,
    ) -> ServiceResult:
        """List workers with their payment status for *month*.

        *payment_filter* keeps ``all`` workers, only fully ``paid`` ones,
        or the ``unpaid`` rest (partial and none).
        """
        op = "list_workers"
        try:
            target = parse_month(month, self._today())
        except (MalformedDayError, ValueError):
            return validation_failure(op, {"month": f"Not a month (expected YYYY-MM): {month}"})
        try:
            status_filter = PaymentFilter(payment_filter)
        except ValueError:
            return validation_failure(op, {"filter": f"Unknown filter: {payment_filter}"})

        snapshot = self._ledger.snapshot(self._credential)
        kept = filter_workers_by_payment(
            snapshot.workers, snapshot.payments, target, status_filter
        )
        items: list[dict[str, Any]] = []
        for worker in kept:
            summary = worker_month_summary(worker, snapshot.payments, target)
            item = summary.to_data(self._places)
            item["id"] = worker.id
            item["position"] = worker.position
            items.append(item)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "month": str(target),
                "filter": str(status_filter),
                "items": items,
                "count": len(items),
            },
            meta=self._meta(),
        )

    @authenticated("get_worker")
    def get(self, worker_id: str, *, month: str | None = None) -> ServiceResult:
        """One worker with notes, the month's payments, and its status."""
        op = "get_worker"
        try:
            target = parse_month(month, self._today())
        except (MalformedDayError, ValueError):
            return validation_failure(op, {"month": f"Not a month (expected YYYY-MM): {month}"})

        with self._ledger.read(self._credential) as txn:
            worker = txn.workers.get(worker_id)
            payments = txn.payments.list_all()
        if worker is None:
            return not_found(op, "worker", worker_id)

        summary = worker_month_summary(worker, payments, target)
        data = worker_data(worker, places=self._places)
        data["month_summary"] = summary.to_data(self._places)
        data["payments"] = [
            {
                "id": p.id,
                "amount": format_amount(p.amount, self._places),
                "date": p.date.isoformat(),
                "note": p.note,
            }
            for p in summary.payments
        ]
        data["payment_count_all_time"] = len(worker_payments(payments, worker.id))
        return ServiceResult(ok=True, op=op, data=data, meta=self._meta())

    # ------------------------------------------------------------------
    # Worker mutations
    # ------------------------------------------------------------------

    @authenticated("add_worker")
    def add(
        self,
        *,
        full_name: str,
        position: str,
        monthly_salary: Any = None,
        description: str | None = None,
        photo: str | None = None,
    ) -> ServiceResult:
        op = "add_worker"
        vr = validate_fields(
            WorkerInput,
            {
                "full_name": full_name,
                "position": position,
                "monthly_salary": monthly_salary,
                "description": description,
                "photo": photo,
            },
        )
        if not vr.valid:
            return validation_failure(op, vr.errors)

        with self._ledger.transaction(self._credential) as txn:
            worker = Worker(
                id=txn.next_id(WORKER_PREFIX),
                full_name=vr.data["full_name"],
                position=vr.data["position"],
                monthly_salary=vr.data.get("monthly_salary"),
                description=vr.data.get("description"),
                photo=vr.data.get("photo"),
                created_at=self._ledger.clock.now(),
            )
            txn.workers.insert(worker)

        logger.info("Added worker %s", worker.id)
        return self._respond(op, worker.id)

    @authenticated("update_worker")
    def update(
        self,
        worker_id: str,
        *,
        changes: dict[str, Any],
        expected_version: int | None = None,
    ) -> ServiceResult:
        """Update worker fields; ``monthly_salary=None`` clears the target."""
        op = "update_worker"
        if not changes:
            return failure(op, VALIDATION_FAILED, "No changes specified")
        vr = validate_fields(WorkerChanges, changes)
        if not vr.valid:
            return validation_failure(op, vr.errors)

        warnings: list[str] = []
        update: dict[str, Any] = {}
        for key, value in vr.data.items():
            if key in _IMMUTABLE_WORKER_FIELDS:
                warnings.append(f"Cannot change immutable field: {key}")
            elif key not in _WORKER_FIELDS:
                warnings.append(f"Unknown field ignored: {key}")
            else:
                update[key] = value

        with self._ledger.transaction(self._credential) as txn:
            current = txn.workers.get(worker_id)
            if current is None:
                return not_found(op, "worker", worker_id)
            if expected_version is not None and current.version != expected_version:
                return stale_write(op, worker_id, expected_version, current.version)
            fields_changed = [k for k, v in update.items() if getattr(current, k) != v]
            if fields_changed:
                updated = current.model_copy(update={k: update[k] for k in fields_changed})
                if txn.workers.save(updated, expected_version=expected_version) is None:
                    return stale_write(op, worker_id, expected_version, None)

        if fields_changed:
            logger.info("Updated worker %s: %s", worker_id, fields_changed)
        return self._respond(
            op, worker_id, warnings=warnings, extra={"fields_changed": fields_changed}
        )

    @authenticated("delete_worker")
    def delete(self, worker_id: str) -> ServiceResult:
        """Delete a worker; its notes and payments go with it."""
        op = "delete_worker"
        with self._ledger.transaction(self._credential) as txn:
            deleted = txn.workers.delete(worker_id)
        if not deleted:
            return not_found(op, "worker", worker_id)
        logger.info("Deleted worker %s", worker_id)
        return ServiceResult(ok=True, op=op, data={"id": worker_id, "deleted": True})

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    @authenticated("add_note")
    def add_note(
        self,
        worker_id: str,
        *,
        content: str,
        title: str | None = None,
    ) -> ServiceResult:
        op = "add_note"
        vr = validate_fields(WorkerNoteInput, {"title": title, "content": content})
        if not vr.valid:
            return validation_failure(op, vr.errors)

        with self._ledger.transaction(self._credential) as txn:
            if txn.workers.get(worker_id) is None:
                return not_found(op, "worker", worker_id)
            note = WorkerNote(
                id=txn.next_id(NOTE_PREFIX),
                worker_id=worker_id,
                title=vr.data.get("title"),
                content=vr.data["content"],
                created_at=self._ledger.clock.now(),
            )
            txn.workers.insert_note(note)

        logger.info("Added note %s to worker %s", note.id, worker_id)
        return ServiceResult(ok=True, op=op, data=note_data(note))

    @authenticated("update_note")
    def update_note(
        self,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> ServiceResult:
        """Replace a note's title and/or content; ``None`` leaves a field as is."""
        op = "update_note"
        if title is None and content is None:
            return failure(op, VALIDATION_FAILED, "No changes specified")

        with self._ledger.transaction(self._credential) as txn:
            current = txn.workers.get_note(note_id)
            if current is None:
                return not_found(op, "note", note_id)
            vr = validate_fields(
                WorkerNoteInput,
                {
                    "title": title if title is not None else current.title,
                    "content": content if content is not None else current.content,
                },
            )
            if not vr.valid:
                return validation_failure(op, vr.errors)
            updated = current.model_copy(
                update={"title": vr.data.get("title"), "content": vr.data["content"]}
            )
            txn.workers.update_note(updated)

        logger.info("Updated note %s", note_id)
        return ServiceResult(ok=True, op=op, data=note_data(updated))

    @authenticated("delete_note")
    def delete_note(self, note_id: str) -> ServiceResult:
        op = "delete_note"
        with self._ledger.transaction(self._credential) as txn:
            deleted = txn.workers.delete_note(note_id)
        if not deleted:
            return not_found(op, "note", note_id)
        logger.info("Deleted note %s", note_id)
        return ServiceResult(ok=True, op=op, data={"id": note_id, "deleted": True})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _respond(
        self,
        op: str,
        worker_id: str,
        *,
        warnings: list[str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> ServiceResult:
        with self._ledger.read(self._credential) as txn:
            worker = txn.workers.get(worker_id)
        if worker is None:
            return not_found(op, "worker", worker_id)
        data = worker_data(worker, places=self._places)
        data.update(extra or {})
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings or [])
