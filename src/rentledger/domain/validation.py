"""Field-level validation of user input before it reaches the engines.

Each input schema is a pydantic model whose validators raise
``PydanticCustomError`` with a user-facing message. :func:`validate_fields`
flattens pydantic's error list into a ``{"field.path": "message"}`` map,
keeping only the first message per path.

``*Changes`` schemas accept a subset of fields for updates; validators run
only on the keys actually supplied.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from rentledger.domain.dates import parse_day
from rentledger.domain.errors import MalformedDayError
from rentledger.domain.money import to_decimal

MAX_MONTHLY_RENT = Decimal("100000000")
MAX_SALARY = Decimal("10000000")
MAX_PAYMENT = Decimal("10000000")


@dataclass(frozen=True)
class FieldValidation:
    """Outcome of :func:`validate_fields`."""

    valid: bool
    data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Shared checks
# ---------------------------------------------------------------------------


def _check_text(value: Any, *, label: str, maximum: int, required: bool) -> str | None:
    if value is None:
        if required:
            raise PydanticCustomError("missing", f"{label} is required")
        return None
    if not isinstance(value, str):
        raise PydanticCustomError("string_type", f"{label} must be text")
    value = value.strip()
    if not value:
        if required:
            raise PydanticCustomError("too_short", f"{label} is required")
        return None
    if len(value) > maximum:
        raise PydanticCustomError(
            "too_long", f"{label} must be less than {maximum} characters"
        )
    return value


def _check_amount(value: Any, *, label: str, maximum: Decimal) -> Decimal:
    if isinstance(value, bool):
        raise PydanticCustomError("decimal_type", f"{label} must be a number")
    try:
        amount = to_decimal(value)
    except (TypeError, ValueError) as exc:
        raise PydanticCustomError("decimal_type", f"{label} must be a number") from exc
    if not amount.is_finite():
        raise PydanticCustomError("decimal_type", f"{label} must be a number")
    if amount <= 0:
        raise PydanticCustomError("greater_than", f"{label} must be a positive number")
    if amount > maximum:
        raise PydanticCustomError(
            "less_than_equal", f"{label} exceeds maximum allowed value"
        )
    return amount


def _check_day(value: Any, *, label: str) -> dt.date:
    if value is None:
        raise PydanticCustomError("missing", f"{label} is required")
    try:
        return parse_day(value)
    except MalformedDayError as exc:
        raise PydanticCustomError(
            "date_parsing", f"{label} must be a calendar day (YYYY-MM-DD)"
        ) from exc


def _working_days(value: Any) -> int:
    if isinstance(value, bool):
        raise PydanticCustomError("int_type", "Working days must be a whole number")
    try:
        number = to_decimal(value)
    except (TypeError, ValueError) as exc:
        raise PydanticCustomError("int_type", "Working days must be a whole number") from exc
    if not number.is_finite() or number != number.to_integral_value():
        raise PydanticCustomError("int_type", "Working days must be a whole number")
    days = int(number)
    if days < 1:
        raise PydanticCustomError("greater_than_equal", "At least 1 working day is required")
    if days > 31:
        raise PydanticCustomError("less_than_equal", "Cannot exceed 31 days")
    return days


def _photo_url(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise PydanticCustomError("url_type", "Please enter a valid URL")
    if len(value) > 2000:
        raise PydanticCustomError("too_long", "URL is too long")
    parts = urlsplit(value.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise PydanticCustomError("url_parsing", "Please enter a valid URL")
    return value.strip()


# ---------------------------------------------------------------------------
# Techniques
# ---------------------------------------------------------------------------


class TechniqueInput(BaseModel):
    """Fields accepted when adding a technique."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: Any = None
    monthly_rent: Any = None
    planned_working_days: Any = None
    start_date: Any = None
    description: Any = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v: Any) -> str | None:
        return _check_text(v, label="Technique name", maximum=100, required=True)

    @field_validator("monthly_rent", mode="before")
    @classmethod
    def check_rent(cls, v: Any) -> Decimal:
        return _check_amount(v, label="Monthly rent", maximum=MAX_MONTHLY_RENT)

    @field_validator("planned_working_days", mode="before")
    @classmethod
    def check_days(cls, v: Any) -> int:
        return _working_days(v)

    @field_validator("start_date", mode="before")
    @classmethod
    def check_start(cls, v: Any) -> dt.date:
        return _check_day(v, label="Start date")

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, v: Any) -> str | None:
        return _check_text(v, label="Description", maximum=1000, required=False)


class TechniqueChanges(TechniqueInput):
    """Fields accepted by a technique update; ``end_date=None`` reopens."""

    model_config = {"frozen": True, "extra": "allow"}

    end_date: Any = None

    @field_validator("end_date", mode="before")
    @classmethod
    def check_end(cls, v: Any) -> dt.date | None:
        if v is None:
            return None
        return _check_day(v, label="End date")


class DayInput(BaseModel):
    model_config = {"frozen": True}

    day: Any = None

    @field_validator("day", mode="before")
    @classmethod
    def check_day(cls, v: Any) -> dt.date:
        return _check_day(v, label="Day")


# ---------------------------------------------------------------------------
# Workers, notes, payments
# ---------------------------------------------------------------------------


class WorkerInput(BaseModel):
    """Fields accepted when adding a worker."""

    model_config = {"frozen": True, "extra": "forbid"}

    full_name: Any = None
    position: Any = None
    monthly_salary: Any = None
    description: Any = None
    photo: Any = None

    @field_validator("full_name", mode="before")
    @classmethod
    def check_full_name(cls, v: Any) -> str | None:
        return _check_text(v, label="Full name", maximum=100, required=True)

    @field_validator("position", mode="before")
    @classmethod
    def check_position(cls, v: Any) -> str | None:
        return _check_text(v, label="Position", maximum=100, required=True)

    @field_validator("monthly_salary", mode="before")
    @classmethod
    def check_salary(cls, v: Any) -> Decimal | None:
        if v is None:
            return None
        return _check_amount(v, label="Salary", maximum=MAX_SALARY)

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, v: Any) -> str | None:
        return _check_text(v, label="Description", maximum=500, required=False)

    @field_validator("photo", mode="before")
    @classmethod
    def check_photo(cls, v: Any) -> str | None:
        return _photo_url(v)


class WorkerChanges(WorkerInput):
    model_config = {"frozen": True, "extra": "allow"}


class WorkerNoteInput(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    title: Any = None
    content: Any = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> str | None:
        return _check_text(v, label="Title", maximum=100, required=False)

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, v: Any) -> str | None:
        return _check_text(v, label="Note content", maximum=2000, required=True)


class PaymentInput(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    worker_id: Any = None
    amount: Any = None
    date: Any = None
    note: Any = None

    @field_validator("worker_id", mode="before")
    @classmethod
    def check_worker(cls, v: Any) -> str | None:
        return _check_text(v, label="Worker ID", maximum=100, required=True)

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v: Any) -> Decimal:
        return _check_amount(v, label="Amount", maximum=MAX_PAYMENT)

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v: Any) -> dt.date:
        return _check_day(v, label="Date")

    @field_validator("note", mode="before")
    @classmethod
    def check_note(cls, v: Any) -> str | None:
        return _check_text(v, label="Note", maximum=500, required=False)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

# Fields whose absence is an error when creating (the schemas default them
# to None so that every check reports through the same message map).
_REQUIRED: dict[type[BaseModel], tuple[str, ...]] = {
    TechniqueInput: ("name", "monthly_rent", "planned_working_days", "start_date"),
    WorkerInput: ("full_name", "position"),
    WorkerNoteInput: ("content",),
    PaymentInput: ("worker_id", "amount", "date"),
    DayInput: ("day",),
}


def validate_fields(schema: type[BaseModel], data: dict[str, Any]) -> FieldValidation:
    """Validate *data* against *schema*.

    On success ``data`` holds the cleaned values of the keys supplied. A
    required key missing from *data* is reported under its own path.
    """
    payload = dict(data)
    for name in _REQUIRED.get(schema, ()):
        payload.setdefault(name, None)
    try:
        model = schema.model_validate(payload)
    except ValidationError as exc:
        errors: dict[str, str] = {}
        for err in exc.errors():
            path = ".".join(str(part) for part in err["loc"]) or "__root__"
            if err["type"] == "extra_forbidden":
                errors.setdefault(path, f"Unknown field: {path}")
                continue
            errors.setdefault(path, err["msg"])
        return FieldValidation(valid=False, errors=errors)
    return FieldValidation(valid=True, data=model.model_dump(exclude_unset=True))
