"""ReportService — the dashboard: fleet rent and payroll at a glance."""

from __future__ import annotations

from rentledger.domain.accrual import total_accrued_rent, total_active_rent
from rentledger.domain.errors import MalformedDayError
from rentledger.domain.money import ZERO, format_amount
from rentledger.domain.payments import (
    average_salary,
    fully_paid_count,
    recent_payments,
    total_payments_for_month,
)
from rentledger.services.base import BaseService, authenticated, validation_failure
from rentledger.services.result import ServiceResult
from rentledger.services.workers import parse_month


class ReportService(BaseService):
    @authenticated("dashboard")
    def dashboard(self, *, month: str | None = None) -> ServiceResult:
        """Totals for techniques and workers plus the latest payments.

        Rent figures are as of today; payroll figures are for *month*
        (default: the current month).
        """
        op = "dashboard"
        today = self._today()
        try:
            target = parse_month(month, today)
        except (MalformedDayError, ValueError):
            return validation_failure(op, {"month": f"Not a month (expected YYYY-MM): {month}"})

        snap = self._ledger.snapshot(self._credential)
        places = self._places
        active = [t for t in snap.techniques if t.is_active]
        all_rent = sum(
            (total_accrued_rent(t, today=today) for t in snap.techniques),
            ZERO,
        )
        limit = self._ledger.settings.payments.recent_limit

        data = {
            "month": str(target),
            "ledger": self._ledger.settings.ledger.name,
            "currency": self._ledger.settings.ledger.currency,
            "techniques": {
                "total": len(snap.techniques),
                "active": len(active),
                "ended": len(snap.techniques) - len(active),
                "total_active_rent": format_amount(
                    total_active_rent(snap.techniques, today=today), places
                ),
                "total_accrued_rent": format_amount(all_rent, places),
            },
            "workers": {
                "total": len(snap.workers),
                "fully_paid": fully_paid_count(snap.workers, snap.payments, target),
                "average_salary": format_amount(average_salary(snap.workers), places),
                "total_paid": format_amount(
                    total_payments_for_month(snap.payments, target), places
                ),
            },
            "recent_payments": [
                r.to_data(places) for r in recent_payments(snap.payments, snap.workers, limit)
            ],
        }
        return ServiceResult(ok=True, op=op, data=data, meta=self._meta())
