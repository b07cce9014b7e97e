"""Tests for LedgerSettings — CLI flags, env vars, and TOML in one object."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click
import pytest

from rentledger.config.settings import LedgerSettings


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = LedgerSettings.from_cli(ledger_root=tmp_path)
        assert settings.ledger_root == tmp_path.resolve()
        assert settings.json_output is False
        assert settings.ledger.owner == "default"
        assert settings.billing.display_places == 2
        assert settings.payments.recent_limit == 5
        assert settings.clock.today is None
        assert settings.db_path == tmp_path / ".rentledger" / "ledger.db"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = LedgerSettings.from_cli(ledger_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_sparse_override(self, tmp_path: Path) -> None:
        (tmp_path / "rentledger.toml").write_text(
            '[ledger]\nname = "north-site"\ncurrency = "EUR"\n[billing]\ndisplay_places = 4\n'
        )
        settings = LedgerSettings.from_cli(ledger_root=tmp_path)
        assert settings.ledger.name == "north-site"
        assert settings.ledger.currency == "EUR"
        assert settings.billing.display_places == 4
        assert settings.payments.recent_limit == 5

    def test_root_follows_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "rentledger.toml").write_text("")
        nested = tmp_path / "sub" / "dir"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = LedgerSettings.from_cli()
        assert settings.ledger_root == tmp_path.resolve()
        assert settings.config_path == tmp_path.resolve() / "rentledger.toml"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text('[clock]\ntoday = "2024-02-29"\n')
        settings = LedgerSettings.from_cli(config_path=str(custom), ledger_root=tmp_path)
        assert settings.clock.today == date(2024, 2, 29)

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            LedgerSettings.from_cli(config_path=str(tmp_path / "nope.toml"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "rentledger.toml").write_text("[ledger\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            LedgerSettings.from_cli(ledger_root=tmp_path)


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "rentledger.toml").write_text("[payments]\nrecent_limit = 3\n")
        monkeypatch.setenv("RENTLEDGER_PAYMENTS__RECENT_LIMIT", "9")
        settings = LedgerSettings.from_cli(ledger_root=tmp_path)
        assert settings.payments.recent_limit == 9

    def test_cli_beats_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RENTLEDGER_QUIET", "false")
        settings = LedgerSettings.from_cli(ledger_root=tmp_path, quiet=True)
        assert settings.quiet is True

    def test_none_flags_do_not_mask(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RENTLEDGER_JSON_OUTPUT", "true")
        settings = LedgerSettings.from_cli(ledger_root=tmp_path, json_output=None)
        assert settings.json_output is True
