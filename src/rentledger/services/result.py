"""ServiceResult and ServiceError — the contract every service returns.

INVARIANT: service methods return a ServiceResult for every expected
failure (bad input, missing entity, stale write, rejected credential)
instead of raising. The CLI consumes this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Error codes
VALIDATION_FAILED = "VALIDATION_FAILED"
INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
NOT_FOUND = "NOT_FOUND"
STALE_WRITE = "STALE_WRITE"
UNAUTHENTICATED = "UNAUTHENTICATED"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @property
    def field_errors(self) -> dict[str, str]:
        """Per-field messages of a ``VALIDATION_FAILED`` error, else empty."""
        fields = self.detail.get("fields")
        return dict(fields) if isinstance(fields, dict) else {}


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"add_technique"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (reference day, counts).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
