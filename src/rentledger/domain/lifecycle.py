"""Technique lifecycle: creation, ending, reopening, and field updates.

Two states, ``active`` and ``ended``. The state is carried by the rental
variant on :class:`~rentledger.domain.models.Technique`, so a transition is
always a change of end date:

- ``active -> ended``: ``end`` operation, or an update setting ``end_date``.
- ``ended -> active``: an update clearing ``end_date`` (reopening).

INVARIANT: the end date, when present, is never before the start date.
Mutations that would break it raise :class:`InvalidDateRangeError` and
produce no snapshot at all. Transitions never touch ``day_offs``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from rentledger.domain.accrual import effective_end
from rentledger.domain.errors import InvalidDateRangeError
from rentledger.domain.models import Active, Technique, rental_state
from rentledger.domain.types import TechniqueStatus

# --- Transition map ---

TECHNIQUE_TRANSITIONS: dict[str, list[str]] = {
    "active": ["ended"],
    "ended": ["active"],  # reopenable via update
}

# Fields the general update path may change.
UPDATABLE_FIELDS: tuple[str, ...] = (
    "name",
    "description",
    "monthly_rent",
    "planned_working_days",
    "start_date",
    "end_date",
)

# Identity, audit, and derived fields; never written by an update.
IMMUTABLE_FIELDS: frozenset[str] = frozenset(
    {"id", "created_at", "status", "rental", "day_offs", "version"}
)


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


@dataclass(frozen=True)
class UpdateOutcome:
    """A fully applied update: the new snapshot and what changed."""

    technique: Technique
    fields_changed: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    transition: tuple[str, str] | None = None


def new_technique(
    *,
    technique_id: str,
    name: str,
    monthly_rent: Decimal,
    planned_working_days: int,
    start_date: date,
    created_at: datetime,
    description: str | None = None,
) -> Technique:
    """Create a technique: always active, no end date, no day-offs."""
    return Technique(
        id=technique_id,
        name=name,
        description=description,
        monthly_rent=monthly_rent,
        planned_working_days=planned_working_days,
        start_date=start_date,
        rental=Active(),
        day_offs=(),
        created_at=created_at,
    )


def end_technique(
    technique: Technique,
    end_date: date | None = None,
    *,
    today: date,
) -> Technique:
    """Close the rental on *end_date* (default: *today*).

    Ending an already ended rental moves its end date.

    Raises:
        InvalidDateRangeError: If *end_date* is before the start date.
    """
    end = end_date if end_date is not None else today
    if end < technique.start_date:
        raise InvalidDateRangeError(technique.start_date, end)
    return technique.model_copy(update={"rental": rental_state(end)})


def apply_update(
    technique: Technique,
    changes: dict[str, Any],
    *,
    today: date,
) -> UpdateOutcome:
    """Apply a general field update, all or nothing.

    ``end_date`` in *changes* set to a date ends the rental; set to ``None``
    it reopens the rental. A ``status`` key is accepted only as a hint that
    agrees with the resulting end date.

    Raises:
        InvalidDateRangeError: If the resulting end precedes the start, or
            if ``start_date`` moves past the resulting effective end.
    """
    warnings: list[str] = []
    new_start: date = changes.get("start_date", technique.start_date)
    new_end: date | None = (
        changes["end_date"] if "end_date" in changes else technique.end_date
    )

    if new_end is not None and new_end < new_start:
        raise InvalidDateRangeError(new_start, new_end)
    if "start_date" in changes:
        if new_end is not None:
            current_end = new_end
        elif "end_date" in changes:
            current_end = today
        else:
            current_end = effective_end(technique, today=today)
        if new_start > current_end:
            raise InvalidDateRangeError(
                new_start,
                current_end,
                reason=(
                    f"Start date {new_start.isoformat()} is after the effective end "
                    f"{current_end.isoformat()}"
                ),
            )

    target_status = TechniqueStatus.ENDED if new_end is not None else TechniqueStatus.ACTIVE
    update: dict[str, Any] = {}
    fields_changed: list[str] = []

    for key, value in changes.items():
        if key == "status":
            if str(value) != str(target_status):
                warnings.append(
                    f"Status follows end_date; ignored status={value} (rental is {target_status})"
                )
            continue
        if key in IMMUTABLE_FIELDS:
            warnings.append(f"Cannot change immutable field: {key}")
            continue
        if key not in UPDATABLE_FIELDS:
            warnings.append(f"Unknown field ignored: {key}")
            continue
        if key == "end_date":
            if value != technique.end_date:
                update["rental"] = rental_state(value)
                fields_changed.append(key)
            continue
        if getattr(technique, key) != value:
            update[key] = value
            fields_changed.append(key)

    transition: tuple[str, str] | None = None
    if target_status is not technique.status and is_valid_transition(
        str(technique.status), str(target_status), TECHNIQUE_TRANSITIONS
    ):
        transition = (str(technique.status), str(target_status))

    return UpdateOutcome(
        technique=technique.model_copy(update=update) if update else technique,
        fields_changed=fields_changed,
        warnings=warnings,
        transition=transition,
    )
