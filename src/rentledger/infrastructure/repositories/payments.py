"""Payment rows. Payments are immutable once written: insert or delete."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select

from rentledger.domain.models import Payment
from rentledger.infrastructure.database.schema import payments

if TYPE_CHECKING:
    from sqlalchemy import Connection


class PaymentRepository:
    def __init__(self, conn: Connection, owner: str) -> None:
        self._conn = conn
        self._owner = owner

    def list_all(self) -> list[Payment]:
        rows = self._conn.execute(
            select(payments)
            .where(payments.c.owner == self._owner)
            .order_by(payments.c.date.desc(), payments.c.id.desc())
        ).mappings().all()
        return [_to_payment(row) for row in rows]

    def get(self, payment_id: str) -> Payment | None:
        row = self._conn.execute(
            select(payments).where(payments.c.id == payment_id, payments.c.owner == self._owner)
        ).mappings().first()
        return _to_payment(row) if row is not None else None

    def insert(self, payment: Payment, *, created_at: datetime) -> None:
        self._conn.execute(
            insert(payments).values(
                id=payment.id,
                owner=self._owner,
                worker_id=payment.worker_id,
                amount=str(payment.amount),
                date=payment.date.isoformat(),
                note=payment.note,
                created_at=created_at.isoformat(),
            )
        )

    def delete(self, payment_id: str) -> bool:
        result = self._conn.execute(
            delete(payments).where(payments.c.id == payment_id, payments.c.owner == self._owner)
        )
        return result.rowcount > 0


def _to_payment(row: Any) -> Payment:
    return Payment(
        id=row["id"],
        worker_id=row["worker_id"],
        amount=Decimal(row["amount"]),
        date=date.fromisoformat(row["date"]),
        note=row["note"],
    )
