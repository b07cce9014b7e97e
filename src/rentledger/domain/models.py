"""Entity snapshots: techniques, workers, payments, worker notes.

All models are frozen. Engines never mutate a snapshot; they return a new
one (``model_copy(update=...)``) or a derived value.

A technique's rental state is a tagged variant, :class:`Active` or
:class:`Ended`, so a status of ``ended`` without an end date (or the
reverse) cannot be represented. The tag is still persisted for display.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator

from rentledger.domain.dates import canonical_day
from rentledger.domain.types import TechniqueStatus

# ---------------------------------------------------------------------------
# Rental state
# ---------------------------------------------------------------------------


class Active(BaseModel):
    """Ongoing rental; the window ends at today."""

    model_config = {"frozen": True}

    state: Literal["active"] = "active"


class Ended(BaseModel):
    """Closed rental; the window ends at ``end_date`` inclusive."""

    model_config = {"frozen": True}

    state: Literal["ended"] = "ended"
    end_date: date


RentalState = Annotated[Active | Ended, Field(discriminator="state")]


def rental_state(end_date: date | None) -> Active | Ended:
    """Build the rental state implied by *end_date*."""
    if end_date is None:
        return Active()
    return Ended(end_date=end_date)


# ---------------------------------------------------------------------------
# Technique
# ---------------------------------------------------------------------------


class Technique(BaseModel):
    """A rented asset billed at a prorated daily rate."""

    model_config = {"frozen": True}

    id: str
    name: str
    description: str | None = None
    monthly_rent: Decimal
    planned_working_days: int
    start_date: date
    rental: RentalState = Field(default_factory=Active)
    day_offs: tuple[str, ...] = ()
    created_at: datetime
    version: int = 1

    @field_validator("day_offs", mode="before")
    @classmethod
    def canonical_day_offs(cls, value: Any) -> tuple[str, ...]:
        return tuple(sorted({canonical_day(day) for day in value or ()}))

    @property
    def status(self) -> TechniqueStatus:
        if isinstance(self.rental, Ended):
            return TechniqueStatus.ENDED
        return TechniqueStatus.ACTIVE

    @property
    def end_date(self) -> date | None:
        if isinstance(self.rental, Ended):
            return self.rental.end_date
        return None

    @property
    def is_active(self) -> bool:
        return self.status is TechniqueStatus.ACTIVE


# ---------------------------------------------------------------------------
# Workers, notes, payments
# ---------------------------------------------------------------------------


class WorkerNote(BaseModel):
    """Free-text annotation owned by one worker."""

    model_config = {"frozen": True}

    id: str
    worker_id: str
    title: str | None = None
    content: str
    created_at: datetime


class Worker(BaseModel):
    """An employee with an optional monthly salary target."""

    model_config = {"frozen": True}

    id: str
    full_name: str
    position: str
    monthly_salary: Decimal | None = None
    description: str | None = None
    photo: str | None = None
    created_at: datetime
    notes: tuple[WorkerNote, ...] = ()
    version: int = 1


class Payment(BaseModel):
    """An amount paid to one worker on one day."""

    model_config = {"frozen": True}

    id: str
    worker_id: str
    amount: Decimal
    date: dt.date
    note: str | None = None
