"""Status and classification enums.

Kept in their own module so that both the entity models and the rules
that drive them (lifecycle, payments, calendar) can import them.
"""

from __future__ import annotations

from enum import StrEnum


class TechniqueStatus(StrEnum):
    """Rental status of a technique."""

    ACTIVE = "active"
    ENDED = "ended"


class PaymentStatus(StrEnum):
    """A worker's payment fulfillment for one month."""

    FULL = "full"
    PARTIAL = "partial"
    NONE = "none"


class DayKind(StrEnum):
    """Classification of a calendar day against a rental window."""

    OUTSIDE = "outside"
    WORKING = "working"
    DAY_OFF = "day_off"


class PaymentFilter(StrEnum):
    """Worker list filters by payment status."""

    ALL = "all"
    PAID = "paid"
    UNPAID = "unpaid"
