"""Locate the ``rentledger.toml`` that configures a ledger.

Lookup order:
  1. ``--config PATH`` passed on the command line
  2. ``RENTLEDGER_CONFIG`` environment variable
  3. walk up from the start directory to the filesystem root

A path named by (1) or (2) must exist: pointing at a missing file is an
error, never a silent fall back to the walk-up. Only (3) may find nothing,
in which case the ledger runs on code defaults rooted at the start directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import click

CONFIG_FILENAME = "rentledger.toml"
CONFIG_ENV_VAR = "RENTLEDGER_CONFIG"

ConfigOrigin = Literal["flag", "env", "walk-up"]


class ConfigNotFoundError(click.ClickException):
    """An explicitly named config file does not exist."""

    def __init__(self, path: str, origin: ConfigOrigin) -> None:
        where = f" (from {CONFIG_ENV_VAR})" if origin == "env" else ""
        super().__init__(f"Config file not found: {path}{where}")
        self.path = path
        self.origin = origin


@dataclass(frozen=True)
class ConfigLocation:
    path: Path
    origin: ConfigOrigin

    @property
    def ledger_root(self) -> Path:
        """Directory the ledger's storage lives under: the file's parent."""
        return self.path.parent


def walk_up(start: Path) -> Path | None:
    """Nearest ``rentledger.toml`` in *start* or any of its parents."""
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_config(
    explicit: str | None = None, start: Path | None = None
) -> ConfigLocation | None:
    """Resolve which config file applies, or ``None`` if there is none.

    Raises:
        ConfigNotFoundError: If *explicit* or ``RENTLEDGER_CONFIG`` names a
            file that does not exist.
    """
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigNotFoundError(explicit, "flag")
        return ConfigLocation(path, "flag")

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if not path.is_file():
            raise ConfigNotFoundError(env_path, "env")
        return ConfigLocation(path, "env")

    found = walk_up(start or Path.cwd())
    return ConfigLocation(found, "walk-up") if found else None
