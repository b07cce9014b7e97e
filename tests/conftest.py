"""Shared pytest fixtures for rentledger tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from datetime import UTC, date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from rentledger.config.settings import LedgerSettings
from rentledger.domain.clock import FixedClock
from rentledger.domain.models import Ended, Payment, Technique, Worker
from rentledger.infrastructure.credentials import Credential
from rentledger.infrastructure.database.engine import init_database
from rentledger.infrastructure.ledger import Ledger

TODAY = date(2024, 1, 10)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep RENTLEDGER_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("RENTLEDGER_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def clock() -> FixedClock:
    """Reference clock pinned to 2024-01-10; tests may move it."""
    return FixedClock(TODAY)


@pytest.fixture
def ledger(tmp_path: Path, clock: FixedClock) -> Iterator[Ledger]:
    """Ledger on a temp directory with a pinned clock."""
    settings = LedgerSettings.from_cli(ledger_root=tmp_path)
    store = Ledger(settings, clock=clock)
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def credential(ledger: Ledger) -> Credential:
    return ledger.sign_in()


@pytest.fixture
def _isolated_ledger(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI tests from a temp directory so each gets its own ledger.

    Use via ``@pytest.mark.usefixtures("_isolated_ledger")``.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Entity factories for pure domain tests
# ---------------------------------------------------------------------------

_CREATED = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_technique() -> Callable[..., Technique]:
    def _make(
        *,
        technique_id: str = "TECH-0001",
        monthly_rent: str = "15000",
        planned_working_days: int = 26,
        start: date = date(2024, 1, 1),
        end: date | None = None,
        day_offs: tuple[str, ...] = (),
        **kwargs: Any,
    ) -> Technique:
        fields: dict[str, Any] = {
            "id": technique_id,
            "name": kwargs.pop("name", "Excavator"),
            "monthly_rent": Decimal(monthly_rent),
            "planned_working_days": planned_working_days,
            "start_date": start,
            "day_offs": day_offs,
            "created_at": _CREATED,
            **kwargs,
        }
        if end is not None:
            fields["rental"] = Ended(end_date=end)
        return Technique(**fields)

    return _make


@pytest.fixture
def make_worker() -> Callable[..., Worker]:
    def _make(
        worker_id: str = "WRK-0001",
        *,
        salary: str | None = "3000",
        full_name: str = "Ivan Petrov",
        position: str = "Operator",
    ) -> Worker:
        return Worker(
            id=worker_id,
            full_name=full_name,
            position=position,
            monthly_salary=Decimal(salary) if salary is not None else None,
            created_at=_CREATED,
        )

    return _make


@pytest.fixture
def make_payment() -> Callable[..., Payment]:
    counter = iter(range(1, 10_000))

    def _make(worker_id: str, amount: str, day: date, note: str | None = None) -> Payment:
        return Payment(
            id=f"PAY-{next(counter):04d}",
            worker_id=worker_id,
            amount=Decimal(amount),
            date=day,
            note=note,
        )

    return _make
