"""Tests for the Ledger store: credentials, snapshots, transactions."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from rentledger.config.settings import LedgerSettings
from rentledger.domain.clock import FixedClock, SystemClock
from rentledger.infrastructure.credentials import CredentialError
from rentledger.infrastructure.database.counters import TECHNIQUE_PREFIX
from rentledger.infrastructure.ledger import Ledger


class TestLedger:
    def test_sign_in_uses_configured_owner(self, ledger: Ledger) -> None:
        assert ledger.sign_in().owner == "default"
        assert ledger.sign_in("alice").owner == "alice"

    def test_transaction_requires_live_credential(self, ledger: Ledger) -> None:
        cred = ledger.sign_in()
        ledger.sign_out(cred)
        with pytest.raises(CredentialError), ledger.transaction(cred):
            pass

    def test_snapshot_is_owner_scoped(self, ledger: Ledger, make_technique) -> None:
        alice = ledger.sign_in("alice")
        with ledger.transaction(alice) as txn:
            txn.techniques.insert(make_technique(technique_id=txn.next_id(TECHNIQUE_PREFIX)))
        assert len(ledger.snapshot(alice).techniques) == 1
        assert ledger.snapshot(ledger.sign_in("bob")).techniques == []

    def test_exception_rolls_back(self, ledger: Ledger, make_technique) -> None:
        cred = ledger.sign_in()
        with pytest.raises(RuntimeError), ledger.transaction(cred) as txn:
            txn.techniques.insert(make_technique())
            raise RuntimeError("boom")
        assert ledger.snapshot(cred).techniques == []


class TestClockSelection:
    def test_pinned_day_from_settings(self, tmp_path: Path) -> None:
        settings = LedgerSettings.from_cli(ledger_root=tmp_path, clock={"today": "2024-03-01"})
        store = Ledger(settings)
        try:
            assert isinstance(store.clock, FixedClock)
            assert store.clock.today() == date(2024, 3, 1)
        finally:
            store.close()

    def test_wall_clock_by_default(self, tmp_path: Path) -> None:
        store = Ledger(LedgerSettings.from_cli(ledger_root=tmp_path))
        try:
            assert isinstance(store.clock, SystemClock)
            assert store.root == tmp_path
        finally:
            store.close()
