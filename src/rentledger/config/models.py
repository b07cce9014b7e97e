"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, rentledger.toml only contains
overrides. A fresh ledger needs no config file at all.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class LedgerConfig(BaseModel):
    """[ledger] section."""

    model_config = {"frozen": True}

    name: str = "my-ledger"
    owner: str = "default"
    currency: str = ""


class BillingConfig(BaseModel):
    """[billing] section."""

    model_config = {"frozen": True}

    display_places: int = Field(default=2, ge=0, le=8)


class PaymentsConfig(BaseModel):
    """[payments] section."""

    model_config = {"frozen": True}

    recent_limit: int = Field(default=5, ge=1)


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    directory: str = ".rentledger"
    filename: str = "ledger.db"


class ClockConfig(BaseModel):
    """[clock] section. ``today`` pins the reference day; unset means wall clock."""

    model_config = {"frozen": True}

    today: date | None = None
