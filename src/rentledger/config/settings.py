"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``RENTLEDGER_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``rentledger.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`rentledger.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from rentledger.config.discovery import locate_config
from rentledger.config.models import (
    BillingConfig,
    ClockConfig,
    LedgerConfig,
    PaymentsConfig,
    StorageConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``rentledger.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for the TOML path during construction.
_tls = threading.local()


class LedgerSettings(BaseSettings):
    """Unified settings for the rentledger CLI.

    Attributes:
        ledger_root: Directory holding the ledger storage directory (parent
            of ``rentledger.toml``, or CWD if no config was found).
        config_path: The TOML file actually loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "RENTLEDGER_",
        "env_nested_delimiter": "__",
    }

    ledger_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    billing: BillingConfig = Field(default_factory=BillingConfig)
    payments: PaymentsConfig = Field(default_factory=PaymentsConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    clock: ClockConfig = Field(default_factory=ClockConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def db_path(self) -> Path:
        return self.ledger_root / self.storage.directory / self.storage.filename

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        ledger_root: Path | None = None,
        **cli_flags: Any,
    ) -> LedgerSettings:
        """Construct settings from a CLI invocation.

        Locates ``rentledger.toml`` (see :func:`locate_config`), resolves
        *ledger_root* from the config file's parent directory, and merges
        CLI flags as highest-priority overrides. Flags passed as ``None``
        are dropped so that they do not mask lower-priority sources.
        """
        location = locate_config(config_path, ledger_root)
        toml_path = location.path if location else None

        resolved_root = ledger_root
        if resolved_root is None:
            resolved_root = location.ledger_root if location else Path.cwd()

        overrides = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(
                ledger_root=resolved_root,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None
