"""Day-granular interval math and the canonical day representation.

Every day that enters the ledger is normalized to a ``YYYY-MM-DD`` string
(or the equivalent :class:`datetime.date`) before storage or comparison.
Time-of-day components are discarded, never converted: a ``datetime`` is
read as its own calendar day regardless of its timezone offset, so a day
serialized and read back canonicalizes to the same string.

Open-ended ranges end at *today*, which callers pass explicitly from a
:class:`~rentledger.domain.clock.Clock`.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from rentledger.domain.errors import InvalidRangeError, MalformedDayError

DAY_FORMAT = "%Y-%m-%d"

_DAY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:[T ].*)?$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_day(value: date | datetime | str) -> date:
    """Read *value* as a calendar day.

    Accepts ``date``, ``datetime`` (naive or aware) and strings in
    ``YYYY-MM-DD`` form, optionally followed by an ISO time part.

    Raises:
        MalformedDayError: If *value* is not a well-formed calendar day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        match = _DAY_RE.match(value.strip())
        if match is None:
            raise MalformedDayError(value)
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError as exc:
            raise MalformedDayError(value) from exc
    raise MalformedDayError(value)


def canonical_day(value: date | datetime | str) -> str:
    """Normalize *value* to its ``YYYY-MM-DD`` string."""
    return parse_day(value).strftime(DAY_FORMAT)


def days_between_inclusive(start: date, end: date) -> int:
    """Count the days in ``[start, end]``, both ends included.

    Raises:
        InvalidRangeError: If *start* is after *end*.
    """
    if start > end:
        raise InvalidRangeError(start, end)
    return (end - start).days + 1


def is_within(day: date, start: date, end: date | None, *, today: date) -> bool:
    """Check whether *day* lies in ``[start, end]``.

    An absent *end* means the range is ongoing and ends at *today*.
    Both boundaries are members of the range.
    """
    if day < start:
        return False
    if end is None:
        return day <= today
    return day <= end


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from *start* to *end* inclusive (nothing if empty)."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


@dataclass(frozen=True, order=True)
class Month:
    """A calendar month, the unit of payment aggregation."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            msg = f"Month out of range: {self.month}"
            raise ValueError(msg)

    @classmethod
    def of(cls, day: date | datetime | str) -> Month:
        """The month containing *day*."""
        parsed = parse_day(day)
        return cls(parsed.year, parsed.month)

    @classmethod
    def parse(cls, raw: str) -> Month:
        """Parse ``YYYY-MM`` (a full ``YYYY-MM-DD`` day is also accepted)."""
        match = _MONTH_RE.match(raw.strip())
        if match is None:
            return cls.of(raw)
        year, month = (int(part) for part in match.groups())
        try:
            return cls(year, month)
        except ValueError as exc:
            raise MalformedDayError(raw) from exc

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def days(self) -> list[date]:
        return list(iter_days(self.first_day, self.last_day))

    def next(self) -> Month:
        if self.month == 12:
            return Month(self.year + 1, 1)
        return Month(self.year, self.month + 1)

    def previous(self) -> Month:
        if self.month == 1:
            return Month(self.year - 1, 12)
        return Month(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
