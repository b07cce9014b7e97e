"""PaymentService — record, delete, and list recent payments."""

from __future__ import annotations

import logging
from typing import Any

from rentledger.domain.models import Payment
from rentledger.domain.money import format_amount
from rentledger.domain.payments import recent_payments
from rentledger.domain.validation import PaymentInput, validate_fields
from rentledger.infrastructure.database.counters import PAYMENT_PREFIX
from rentledger.services.base import BaseService, authenticated, not_found, validation_failure
from rentledger.services.result import ServiceResult

logger = logging.getLogger(__name__)


def payment_data(payment: Payment, *, places: int) -> dict[str, Any]:
    return {
        "id": payment.id,
        "worker_id": payment.worker_id,
        "amount": format_amount(payment.amount, places),
        "date": payment.date.isoformat(),
        "note": payment.note,
    }


class PaymentService(BaseService):
    """Payments are append-only events: add or delete, never edit."""

    @authenticated("add_payment")
    def add(
        self,
        worker_id: str,
        *,
        amount: Any,
        date: Any = None,
        note: str | None = None,
    ) -> ServiceResult:
        """Record a payment to *worker_id* dated *date* (default: today)."""
        op = "add_payment"
        vr = validate_fields(
            PaymentInput,
            {
                "worker_id": worker_id,
                "amount": amount,
                "date": date if date is not None else self._today(),
                "note": note,
            },
        )
        if not vr.valid:
            return validation_failure(op, vr.errors)

        with self._ledger.transaction(self._credential) as txn:
            if txn.workers.get(vr.data["worker_id"]) is None:
                return not_found(op, "worker", vr.data["worker_id"])
            payment = Payment(
                id=txn.next_id(PAYMENT_PREFIX),
                worker_id=vr.data["worker_id"],
                amount=vr.data["amount"],
                date=vr.data["date"],
                note=vr.data.get("note"),
            )
            txn.payments.insert(payment, created_at=self._ledger.clock.now())

        logger.info("Recorded payment %s to %s", payment.id, payment.worker_id)
        return ServiceResult(
            ok=True,
            op=op,
            data=payment_data(payment, places=self._places),
            meta=self._meta(),
        )

    @authenticated("delete_payment")
    def delete(self, payment_id: str) -> ServiceResult:
        op = "delete_payment"
        with self._ledger.transaction(self._credential) as txn:
            deleted = txn.payments.delete(payment_id)
        if not deleted:
            return not_found(op, "payment", payment_id)
        logger.info("Deleted payment %s", payment_id)
        return ServiceResult(ok=True, op=op, data={"id": payment_id, "deleted": True})

    @authenticated("recent_payments")
    def recent(self, *, limit: int | None = None) -> ServiceResult:
        """Newest payments first, each with its worker's name."""
        op = "recent_payments"
        size = limit if limit is not None else self._ledger.settings.payments.recent_limit
        if size < 0:
            return validation_failure(op, {"limit": "Limit must not be negative"})
        snapshot = self._ledger.snapshot(self._credential)
        items = [
            r.to_data(self._places)
            for r in recent_payments(snapshot.payments, snapshot.workers, size)
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": items, "count": len(items), "limit": size},
            meta=self._meta(),
        )
