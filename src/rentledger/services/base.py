"""BaseService — shared foundation for all rentledger services.

Every service receives a :class:`Ledger` and the :class:`Credential` it
acts under. Services own their transaction boundaries via
``self._ledger.transaction(self._credential)``.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING, Any, ParamSpec

from rentledger.infrastructure.credentials import CredentialError
from rentledger.services.result import (
    NOT_FOUND,
    STALE_WRITE,
    UNAUTHENTICATED,
    VALIDATION_FAILED,
    ServiceError,
    ServiceResult,
)

if TYPE_CHECKING:
    from rentledger.infrastructure.credentials import Credential
    from rentledger.infrastructure.ledger import Ledger

logger = logging.getLogger(__name__)

P = ParamSpec("P")


def authenticated(
    op: str,
) -> Callable[[Callable[P, ServiceResult]], Callable[P, ServiceResult]]:
    """Turn a rejected credential into an ``UNAUTHENTICATED`` result for *op*.

    The rejected credential is revoked so that it cannot be retried.
    """

    def decorator(func: Callable[P, ServiceResult]) -> Callable[P, ServiceResult]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> ServiceResult:
            try:
                return func(*args, **kwargs)
            except CredentialError as exc:
                service = args[0]
                if isinstance(service, BaseService) and service._credential is not None:
                    service._ledger.revoke(service._credential)
                logger.debug("Credential rejected for %s: %s", op, exc)
                return failure(op, UNAUTHENTICATED, str(exc))

        return wrapper

    return decorator


def failure(
    op: str,
    code: str,
    message: str,
    detail: dict[str, Any] | None = None,
) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=detail or {}),
    )


def validation_failure(op: str, errors: dict[str, str]) -> ServiceResult:
    """``VALIDATION_FAILED`` with the field map under ``detail["fields"]``."""
    summary = "; ".join(f"{path}: {msg}" for path, msg in errors.items())
    return failure(op, VALIDATION_FAILED, summary, {"fields": errors})


def not_found(op: str, kind: str, entity_id: str) -> ServiceResult:
    return failure(op, NOT_FOUND, f"No {kind} found with ID: {entity_id}", {"id": entity_id})


def stale_write(
    op: str,
    entity_id: str,
    expected: int | None,
    actual: int | None,
) -> ServiceResult:
    return failure(
        op,
        STALE_WRITE,
        f"{entity_id} changed since version {expected}; reload and retry",
        {"id": entity_id, "expected_version": expected, "actual_version": actual},
    )


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class TechniqueService(BaseService):
            @authenticated("delete_technique")
            def delete(self, technique_id: str) -> ServiceResult:
                with self._ledger.transaction(self._credential) as txn:
                    ...
    """

    def __init__(self, ledger: Ledger, credential: Credential | None) -> None:
        self._ledger = ledger
        self._credential = credential

    def _today(self) -> date:
        return self._ledger.clock.today()

    @property
    def _places(self) -> int:
        return self._ledger.settings.billing.display_places

    def _meta(self) -> dict[str, Any]:
        return {"as_of": self._today().isoformat()}
