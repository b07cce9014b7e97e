"""Tests for explicit credentials."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from rentledger.infrastructure.credentials import CredentialError, CredentialRegistry

NOW = datetime(2024, 1, 10, tzinfo=UTC)


class TestCredentialRegistry:
    def test_sign_in_and_authorize(self) -> None:
        registry = CredentialRegistry()
        cred = registry.sign_in("alice", now=NOW)
        assert registry.authorize(cred) == "alice"

    def test_blank_owner(self) -> None:
        with pytest.raises(CredentialError):
            CredentialRegistry().sign_in("  ", now=NOW)

    def test_missing_credential(self) -> None:
        with pytest.raises(CredentialError, match="sign in first"):
            CredentialRegistry().authorize(None)

    def test_signed_out_credential_is_dead(self) -> None:
        registry = CredentialRegistry()
        cred = registry.sign_in("alice", now=NOW)
        registry.sign_out(cred)
        assert not registry.is_live(cred)
        with pytest.raises(CredentialError):
            registry.authorize(cred)

    def test_revoke_only_affects_that_credential(self) -> None:
        registry = CredentialRegistry()
        first = registry.sign_in("alice", now=NOW)
        second = registry.sign_in("alice", now=NOW)
        registry.revoke(first)
        assert registry.authorize(second) == "alice"

    def test_foreign_credential_rejected(self) -> None:
        cred = CredentialRegistry().sign_in("alice", now=NOW)
        with pytest.raises(CredentialError):
            CredentialRegistry().authorize(cred)

    def test_repr_hides_token(self) -> None:
        cred = CredentialRegistry().sign_in("alice", now=NOW)
        assert cred.token not in repr(cred)
