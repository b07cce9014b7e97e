"""Explicit credentials for store access.

A :class:`Credential` is acquired with :meth:`CredentialRegistry.sign_in`
and passed to every store call. There is no ambient "current user": the
owner a row is read or written for is always the owner of the credential
in hand. A credential stops working once signed out or revoked after the
store rejects it.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime


class CredentialError(PermissionError):
    """Missing, signed-out, or revoked credential."""


@dataclass(frozen=True)
class Credential:
    owner: str
    token: str
    issued_at: datetime

    def __repr__(self) -> str:
        return f"Credential(owner={self.owner!r}, issued_at={self.issued_at.isoformat()})"


class CredentialRegistry:
    """Issues credentials and tracks which tokens are still live."""

    def __init__(self) -> None:
        self._live: dict[str, str] = {}

    def sign_in(self, owner: str, *, now: datetime) -> Credential:
        """Issue a fresh credential for *owner*.

        Raises:
            CredentialError: If *owner* is blank.
        """
        owner = owner.strip()
        if not owner:
            msg = "Cannot sign in without an owner name"
            raise CredentialError(msg)
        token = secrets.token_hex(16)
        self._live[token] = owner
        return Credential(owner=owner, token=token, issued_at=now)

    def sign_out(self, credential: Credential) -> None:
        """Invalidate *credential*; a no-op if it is already gone."""
        self._live.pop(credential.token, None)

    revoke = sign_out

    def is_live(self, credential: Credential) -> bool:
        return self._live.get(credential.token) == credential.owner

    def authorize(self, credential: Credential | None) -> str:
        """Return the owner of *credential* or raise.

        Raises:
            CredentialError: If *credential* is missing or no longer live.
        """
        if credential is None:
            msg = "No credential supplied; sign in first"
            raise CredentialError(msg)
        if not self.is_live(credential):
            msg = f"Credential for {credential.owner!r} is no longer valid; sign in again"
            raise CredentialError(msg)
        return credential.owner
