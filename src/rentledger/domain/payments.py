"""Payment status aggregation over an unordered set of payment events.

A month query matches payments by calendar month *and* year. There is no
rolling window: the last day of one month and the first day of the next
never land in the same query.

Fulfillment against the monthly salary is one of ``full``, ``partial`` or
``none``. Overpayment is ``full``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from rentledger.domain.dates import Month
from rentledger.domain.models import Payment, Worker
from rentledger.domain.money import ZERO, format_amount
from rentledger.domain.types import PaymentFilter, PaymentStatus

DEFAULT_RECENT_LIMIT = 5


def worker_payments(payments: Iterable[Payment], worker_id: str) -> list[Payment]:
    """Every payment owned by *worker_id*, in input order."""
    return [p for p in payments if p.worker_id == worker_id]


def monthly_payments(
    payments: Iterable[Payment],
    worker_id: str,
    month: Month,
) -> list[Payment]:
    """Payments of *worker_id* dated inside *month*."""
    return [p for p in payments if p.worker_id == worker_id and month.contains(p.date)]


def total_paid(payments: Iterable[Payment], worker_id: str, month: Month) -> Decimal:
    """Sum paid to *worker_id* in *month* (0 when nothing was paid)."""
    return sum((p.amount for p in monthly_payments(payments, worker_id, month)), ZERO)


def total_payments_for_month(payments: Iterable[Payment], month: Month) -> Decimal:
    """Sum of all payments, any worker, dated inside *month*."""
    return sum((p.amount for p in payments if month.contains(p.date)), ZERO)


def payment_status(paid: Decimal, monthly_salary: Decimal | None) -> PaymentStatus:
    """Classify *paid* against *monthly_salary*.

    A missing (or non-positive) salary gives ``none``: there is no target
    to fulfil.
    """
    if monthly_salary is None or monthly_salary <= 0 or paid == 0:
        return PaymentStatus.NONE
    if paid >= monthly_salary:
        return PaymentStatus.FULL
    return PaymentStatus.PARTIAL


@dataclass(frozen=True)
class WorkerMonthSummary:
    """One worker's payments and fulfillment for one month."""

    worker: Worker
    month: Month
    payments: list[Payment]
    total_paid: Decimal
    status: PaymentStatus

    @property
    def remaining(self) -> Decimal | None:
        salary = self.worker.monthly_salary
        if salary is None:
            return None
        return max(ZERO, salary - self.total_paid)

    def to_data(self, places: int = 2) -> dict[str, Any]:
        salary = self.worker.monthly_salary
        remaining = self.remaining
        return {
            "worker_id": self.worker.id,
            "full_name": self.worker.full_name,
            "month": str(self.month),
            "monthly_salary": format_amount(salary, places) if salary is not None else None,
            "total_paid": format_amount(self.total_paid, places),
            "remaining": format_amount(remaining, places) if remaining is not None else None,
            "status": str(self.status),
            "payment_count": len(self.payments),
        }


def worker_month_summary(
    worker: Worker,
    payments: Iterable[Payment],
    month: Month,
) -> WorkerMonthSummary:
    matched = monthly_payments(payments, worker.id, month)
    paid = sum((p.amount for p in matched), ZERO)
    return WorkerMonthSummary(
        worker=worker,
        month=month,
        payments=sorted(matched, key=lambda p: p.date, reverse=True),
        total_paid=paid,
        status=payment_status(paid, worker.monthly_salary),
    )


def fully_paid_count(
    workers: Iterable[Worker],
    payments: Sequence[Payment],
    month: Month,
) -> int:
    """Number of workers whose status for *month* is ``full``."""
    return sum(
        1
        for w in workers
        if payment_status(total_paid(payments, w.id, month), w.monthly_salary)
        is PaymentStatus.FULL
    )


def filter_workers_by_payment(
    workers: Iterable[Worker],
    payments: Sequence[Payment],
    month: Month,
    status_filter: PaymentFilter = PaymentFilter.ALL,
) -> list[Worker]:
    """Keep all workers, only fully paid ones, or everyone not fully paid."""
    if status_filter is PaymentFilter.ALL:
        return list(workers)
    kept: list[Worker] = []
    for w in workers:
        is_full = (
            payment_status(total_paid(payments, w.id, month), w.monthly_salary)
            is PaymentStatus.FULL
        )
        if is_full == (status_filter is PaymentFilter.PAID):
            kept.append(w)
    return kept


def average_salary(workers: Sequence[Worker]) -> Decimal:
    """Mean salary over all workers, counting a missing salary as 0."""
    if not workers:
        return ZERO
    total = sum((w.monthly_salary or ZERO for w in workers), ZERO)
    return total / Decimal(len(workers))


@dataclass(frozen=True)
class RecentPayment:
    payment: Payment
    worker: Worker

    def to_data(self, places: int = 2) -> dict[str, Any]:
        return {
            "id": self.payment.id,
            "worker_id": self.worker.id,
            "full_name": self.worker.full_name,
            "amount": format_amount(self.payment.amount, places),
            "date": self.payment.date.isoformat(),
            "note": self.payment.note,
        }


def recent_payments(
    payments: Iterable[Payment],
    workers: Iterable[Worker],
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[RecentPayment]:
    """Newest payments first, each paired with its worker.

    Payments whose worker is unknown are dropped, not returned with an
    empty worker.
    """
    by_id = {w.id: w for w in workers}
    ordered = sorted(payments, key=lambda p: p.date, reverse=True)
    return [
        RecentPayment(payment=p, worker=by_id[p.worker_id])
        for p in ordered[: max(limit, 0)]
        if p.worker_id in by_id
    ]
