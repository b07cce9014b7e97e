"""Injectable "today" for open-ended rental windows.

Accrual for an ongoing rental is a function of wall-clock time. Services
receive a :class:`Clock` instead of calling ``date.today()`` so that every
computation can be pinned to a fixed day (tests, ``--today``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, timedelta


class Clock(ABC):
    """Source of the reference calendar day."""

    @abstractmethod
    def today(self) -> date:
        """The current calendar day in the ledger's reference timezone."""

    def now(self) -> datetime:
        """Current UTC timestamp (for ``created_at`` audit fields)."""
        return datetime.now(UTC)


class SystemClock(Clock):
    """Wall-clock day, evaluated in UTC at call time."""

    def today(self) -> date:
        return datetime.now(UTC).date()


class FixedClock(Clock):
    """A clock pinned to one day until moved with :meth:`advance` or :meth:`set_day`."""

    def __init__(self, day: date) -> None:
        self._day = day

    def today(self) -> date:
        return self._day

    def now(self) -> datetime:
        return datetime(self._day.year, self._day.month, self._day.day, 12, 0, tzinfo=UTC)

    def advance(self, days: int = 1) -> None:
        self._day += timedelta(days=days)

    def set_day(self, day: date) -> None:
        self._day = day
