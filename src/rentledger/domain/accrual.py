"""Rental accrual: prorate a monthly rent over the billable days of a window.

The window of a technique is ``[start_date, effective_end]`` where the
effective end is the end date of an ended rental, or *today* for an ongoing
one. Every calendar day in the window is billable unless it is a day-off.

All functions are pure and never round: the daily rate is an exact
``Decimal`` quotient and the accrued rent is that rate times the net day
count. Rounding belongs to presentation (:mod:`rentledger.domain.money`).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from rentledger.domain.dates import days_between_inclusive, is_within, parse_day
from rentledger.domain.models import Technique
from rentledger.domain.money import ZERO, format_amount


def daily_rate(technique: Technique) -> Decimal:
    """Monthly rent divided by the planned working days (0 if none are planned)."""
    if technique.planned_working_days <= 0:
        return ZERO
    return technique.monthly_rent / Decimal(technique.planned_working_days)


def effective_end(technique: Technique, *, today: date) -> date:
    """The last day of the rental window."""
    end = technique.end_date
    return end if end is not None else today


def total_elapsed_days(technique: Technique, *, today: date) -> int:
    """Days in the rental window; 0 when the start lies after the effective end."""
    end = effective_end(technique, today=today)
    if technique.start_date > end:
        return 0
    return days_between_inclusive(technique.start_date, end)


def excluded_day_offs(technique: Technique, *, today: date) -> int:
    """Count day-offs inside the rental window.

    Entries outside the window stay in the set but are not counted.
    """
    end = effective_end(technique, today=today)
    return sum(
        1
        for raw in technique.day_offs
        if is_within(parse_day(raw), technique.start_date, end, today=today)
    )


def net_working_days(technique: Technique, *, today: date) -> int:
    """Billable days: elapsed days minus in-window day-offs, never negative."""
    elapsed = total_elapsed_days(technique, today=today)
    excluded = excluded_day_offs(technique, today=today)
    return max(0, elapsed - excluded)


def total_accrued_rent(technique: Technique, *, today: date) -> Decimal:
    """Net working days times the daily rate."""
    return net_working_days(technique, today=today) * daily_rate(technique)


def total_active_rent(techniques: Iterable[Technique], *, today: date) -> Decimal:
    """Sum of accrued rent over active techniques only."""
    return sum(
        (total_accrued_rent(t, today=today) for t in techniques if t.is_active),
        ZERO,
    )


@dataclass(frozen=True)
class AccrualSummary:
    """All derived accrual facts for one technique on one day."""

    technique_id: str
    as_of: date
    daily_rate: Decimal
    effective_end: date
    total_elapsed_days: int
    excluded_day_offs: int
    net_working_days: int
    total_accrued_rent: Decimal

    def to_data(self, places: int = 2) -> dict[str, Any]:
        """JSON-friendly payload with amounts rounded for display."""
        return {
            "as_of": self.as_of.isoformat(),
            "daily_rate": format_amount(self.daily_rate, places),
            "effective_end": self.effective_end.isoformat(),
            "total_elapsed_days": self.total_elapsed_days,
            "excluded_day_offs": self.excluded_day_offs,
            "net_working_days": self.net_working_days,
            "total_accrued_rent": format_amount(self.total_accrued_rent, places),
        }


def accrual_summary(technique: Technique, *, today: date) -> AccrualSummary:
    """Compute every accrual figure for *technique* against one *today*."""
    elapsed = total_elapsed_days(technique, today=today)
    excluded = excluded_day_offs(technique, today=today)
    net = max(0, elapsed - excluded)
    rate = daily_rate(technique)
    return AccrualSummary(
        technique_id=technique.id,
        as_of=today,
        daily_rate=rate,
        effective_end=effective_end(technique, today=today),
        total_elapsed_days=elapsed,
        excluded_day_offs=excluded,
        net_working_days=net,
        total_accrued_rent=net * rate,
    )
