"""Day-off register: the set of days excluded from a technique's billing.

Writes do not check the rental window. A day outside the window can be
marked; it stays inert (not counted by accrual) until the window grows to
include it. Shrinking the window never deletes marks.

Each operation returns the updated, sorted day-off tuple; the caller
decides whether to persist it.
"""

from __future__ import annotations

from datetime import date, datetime

from rentledger.domain.accrual import effective_end
from rentledger.domain.dates import canonical_day, is_within, parse_day
from rentledger.domain.models import Technique

DayInput = date | datetime | str


def _normalized(day_offs: tuple[str, ...]) -> set[str]:
    return {canonical_day(d) for d in day_offs}


def has_day_off(technique: Technique, day: DayInput) -> bool:
    return canonical_day(day) in _normalized(technique.day_offs)


def toggle_day_off(technique: Technique, day: DayInput) -> tuple[str, ...]:
    """Remove *day* if present, otherwise add it."""
    key = canonical_day(day)
    days = _normalized(technique.day_offs)
    if key in days:
        days.remove(key)
    else:
        days.add(key)
    return tuple(sorted(days))


def add_day_off(technique: Technique, day: DayInput) -> tuple[str, ...]:
    """Add *day*; a no-op if it is already marked."""
    days = _normalized(technique.day_offs)
    days.add(canonical_day(day))
    return tuple(sorted(days))


def remove_day_off(technique: Technique, day: DayInput) -> tuple[str, ...]:
    """Remove *day*; a no-op if it is not marked."""
    days = _normalized(technique.day_offs)
    days.discard(canonical_day(day))
    return tuple(sorted(days))


def active_day_offs(technique: Technique, *, today: date) -> list[str]:
    """Marked days that currently fall inside the rental window."""
    end = effective_end(technique, today=today)
    return [
        d
        for d in technique.day_offs
        if is_within(parse_day(d), technique.start_date, end, today=today)
    ]


def inert_day_offs(technique: Technique, *, today: date) -> list[str]:
    """Marked days retained outside the rental window."""
    active = set(active_day_offs(technique, today=today))
    return [d for d in technique.day_offs if d not in active]
