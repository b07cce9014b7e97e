"""Domain exceptions.

Raised by the pure core and translated into ``ServiceError`` codes by the
service layer. Nothing here crosses the CLI boundary as an exception.
"""

from __future__ import annotations

from datetime import date


class InvalidRangeError(ValueError):
    """A day interval whose start falls after its end."""

    def __init__(self, start: date, end: date) -> None:
        self.start = start
        self.end = end
        super().__init__(f"Range start {start.isoformat()} is after end {end.isoformat()}")


class InvalidDateRangeError(ValueError):
    """A rental window mutation that would put the end before the start."""

    def __init__(self, start: date, end: date, *, reason: str | None = None) -> None:
        self.start = start
        self.end = end
        message = reason or (
            f"End date {end.isoformat()} is before start date {start.isoformat()}"
        )
        super().__init__(message)


class MalformedDayError(ValueError):
    """A value that cannot be read as a calendar day."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Not a calendar day (expected YYYY-MM-DD): {value!r}")
