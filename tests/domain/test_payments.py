"""Tests for monthly payment aggregation and fulfillment status."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from rentledger.domain.dates import Month
from rentledger.domain.payments import (
    average_salary,
    filter_workers_by_payment,
    fully_paid_count,
    monthly_payments,
    payment_status,
    recent_payments,
    total_paid,
    total_payments_for_month,
    worker_month_summary,
)
from rentledger.domain.types import PaymentFilter, PaymentStatus

JAN = Month(2024, 1)


class TestPaymentStatus:
    @pytest.mark.parametrize(
        ("paid", "salary", "expected"),
        [
            ("0", "5000", PaymentStatus.NONE),
            ("3500", "5000", PaymentStatus.PARTIAL),
            ("5000", "5000", PaymentStatus.FULL),
            ("5500", "5000", PaymentStatus.FULL),
            ("100", None, PaymentStatus.NONE),
            ("100", "0", PaymentStatus.NONE),
        ],
    )
    def test_classification(self, paid: str, salary: str | None, expected) -> None:
        target = Decimal(salary) if salary is not None else None
        assert payment_status(Decimal(paid), target) is expected

    def test_progression(self, make_worker, make_payment) -> None:
        worker = make_worker(salary="5000")
        payments = [
            make_payment(worker.id, "2000", date(2024, 1, 3)),
            make_payment(worker.id, "1500", date(2024, 1, 9)),
        ]
        assert worker_month_summary(worker, payments, JAN).status is PaymentStatus.PARTIAL
        payments.append(make_payment(worker.id, "1500", date(2024, 1, 15)))
        summary = worker_month_summary(worker, payments, JAN)
        assert summary.total_paid == Decimal("5000")
        assert summary.status is PaymentStatus.FULL
        payments.append(make_payment(worker.id, "500", date(2024, 1, 20)))
        assert worker_month_summary(worker, payments, JAN).status is PaymentStatus.FULL


class TestMonthBoundaries:
    def test_last_and_first_day_do_not_mix(self, make_payment) -> None:
        last = make_payment("WRK-0001", "100", date(2024, 1, 31))
        first = make_payment("WRK-0001", "200", date(2024, 2, 1))
        assert monthly_payments([last, first], "WRK-0001", JAN) == [last]

    def test_same_month_other_year(self, make_payment) -> None:
        old = make_payment("WRK-0001", "100", date(2023, 1, 15))
        assert total_paid([old], "WRK-0001", JAN) == 0

    def test_other_workers_excluded(self, make_payment) -> None:
        mine = make_payment("WRK-0001", "100", date(2024, 1, 2))
        theirs = make_payment("WRK-0002", "300", date(2024, 1, 2))
        assert total_paid([mine, theirs], "WRK-0001", JAN) == Decimal("100")
        assert total_payments_for_month([mine, theirs], JAN) == Decimal("400")


class TestSummary:
    def test_remaining_floors_at_zero(self, make_worker, make_payment) -> None:
        worker = make_worker(salary="1000")
        summary = worker_month_summary(
            worker, [make_payment(worker.id, "1200", date(2024, 1, 2))], JAN
        )
        assert summary.remaining == 0

    def test_no_salary(self, make_worker) -> None:
        summary = worker_month_summary(make_worker(salary=None), [], JAN)
        data = summary.to_data()
        assert data["monthly_salary"] is None
        assert data["remaining"] is None
        assert data["status"] == "none"
        assert data["total_paid"] == "0.00"

    def test_payments_newest_first(self, make_worker, make_payment) -> None:
        worker = make_worker()
        early = make_payment(worker.id, "10", date(2024, 1, 2))
        late = make_payment(worker.id, "10", date(2024, 1, 20))
        assert worker_month_summary(worker, [early, late], JAN).payments == [late, early]


class TestFilters:
    def test_paid_and_unpaid_partition(self, make_worker, make_payment) -> None:
        full = make_worker("WRK-0001", salary="1000")
        partial = make_worker("WRK-0002", salary="1000")
        unset = make_worker("WRK-0003", salary=None)
        workers = [full, partial, unset]
        payments = [
            make_payment(full.id, "1000", date(2024, 1, 5)),
            make_payment(partial.id, "400", date(2024, 1, 5)),
        ]
        paid = filter_workers_by_payment(workers, payments, JAN, PaymentFilter.PAID)
        unpaid = filter_workers_by_payment(workers, payments, JAN, PaymentFilter.UNPAID)
        assert [w.id for w in paid] == ["WRK-0001"]
        assert [w.id for w in unpaid] == ["WRK-0002", "WRK-0003"]
        assert len(filter_workers_by_payment(workers, payments, JAN)) == 3
        assert fully_paid_count(workers, payments, JAN) == 1


class TestAggregates:
    def test_average_counts_missing_salary_as_zero(self, make_worker) -> None:
        workers = [make_worker("WRK-0001", salary="3000"), make_worker("WRK-0002", salary=None)]
        assert average_salary(workers) == Decimal("1500")

    def test_average_of_nobody(self) -> None:
        assert average_salary([]) == 0

    def test_recent_limit_and_order(self, make_worker, make_payment) -> None:
        worker = make_worker()
        payments = [make_payment(worker.id, "1", date(2024, 1, d)) for d in range(1, 9)]
        recent = recent_payments(payments, [worker], limit=5)
        assert [r.payment.date.day for r in recent] == [8, 7, 6, 5, 4]
        assert recent[0].to_data()["full_name"] == "Ivan Petrov"

    def test_recent_drops_unknown_workers(self, make_worker, make_payment) -> None:
        worker = make_worker()
        orphan = make_payment("WRK-0404", "1", date(2024, 1, 9))
        mine = make_payment(worker.id, "1", date(2024, 1, 1))
        recent = recent_payments([orphan, mine], [worker])
        assert [r.payment.id for r in recent] == [mine.id]
