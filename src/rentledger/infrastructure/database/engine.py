"""Database engine setup for SQLite with WAL mode.

The DB lives at ``{root}/{directory}/{filename}``, by default
``{root}/.rentledger/ledger.db``. Foreign keys are switched on per
connection so that deleting a technique or worker cascades to its
day-offs, notes and payments.

SQLAlchemy Core (not ORM): the CLI is a short-lived process that reads
whole snapshots, so there is nothing for a session or identity map to do.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Engine

from rentledger.infrastructure.database.counters import SEQUENTIAL_PREFIXES
from rentledger.infrastructure.database.schema import id_counters, metadata

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY = ".rentledger"
DEFAULT_FILENAME = "ledger.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(
    root: Path,
    *,
    directory: str = DEFAULT_DIRECTORY,
    filename: str = DEFAULT_FILENAME,
) -> Engine:
    """Initialize the ledger database under *root*.

    Creates the storage directory, all tables from :data:`schema.metadata`
    and seeds ``id_counters``. Idempotent — safe to call on an existing
    ledger.
    """
    storage_dir = root / directory
    storage_dir.mkdir(parents=True, exist_ok=True)
    db_path = storage_dir / filename
    logger.debug("Opening ledger database at %s", db_path)

    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    _seed_counters(engine)
    return engine


def _seed_counters(engine: Engine) -> None:
    """Insert initial counter rows for every entity prefix that lacks one."""
    with engine.begin() as conn:
        for prefix in SEQUENTIAL_PREFIXES:
            row = conn.execute(
                select(id_counters.c.type_prefix).where(id_counters.c.type_prefix == prefix)
            ).first()
            if row is None:
                conn.execute(insert(id_counters).values(type_prefix=prefix, next_value=1))
