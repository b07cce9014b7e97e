"""Month view of a rental: classify each day as outside, working, or day-off."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from rentledger.domain.accrual import daily_rate, effective_end
from rentledger.domain.dates import Month, canonical_day, is_within
from rentledger.domain.models import Technique
from rentledger.domain.money import format_amount
from rentledger.domain.types import DayKind


@dataclass(frozen=True)
class CalendarDay:
    day: date
    kind: DayKind

    @property
    def selectable(self) -> bool:
        """Only days inside the rental window are offered for toggling."""
        return self.kind is not DayKind.OUTSIDE


@dataclass(frozen=True)
class MonthCalendar:
    """Per-day classification and totals for one technique in one month."""

    technique_id: str
    month: Month
    days: list[CalendarDay] = field(default_factory=list)
    rate: Decimal = Decimal("0")

    @property
    def working_days(self) -> int:
        return sum(1 for d in self.days if d.kind is DayKind.WORKING)

    @property
    def day_offs(self) -> int:
        return sum(1 for d in self.days if d.kind is DayKind.DAY_OFF)

    @property
    def accrued_rent(self) -> Decimal:
        return self.working_days * self.rate

    def to_data(self, places: int = 2) -> dict[str, Any]:
        return {
            "month": str(self.month),
            "working_days": self.working_days,
            "day_offs": self.day_offs,
            "accrued_rent": format_amount(self.accrued_rent, places),
            "days": [{"day": d.day.isoformat(), "kind": str(d.kind)} for d in self.days],
        }


def classify_day(technique: Technique, day: date, *, today: date) -> DayKind:
    end = effective_end(technique, today=today)
    if not is_within(day, technique.start_date, end, today=today):
        return DayKind.OUTSIDE
    if canonical_day(day) in technique.day_offs:
        return DayKind.DAY_OFF
    return DayKind.WORKING


def month_calendar(technique: Technique, month: Month, *, today: date) -> MonthCalendar:
    """Build the month grid used to review and toggle day-offs."""
    days = [CalendarDay(d, classify_day(technique, d, today=today)) for d in month.days()]
    return MonthCalendar(
        technique_id=technique.id,
        month=month,
        days=days,
        rate=daily_rate(technique),
    )
