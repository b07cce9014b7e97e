"""SQLite database engine, schema, and ID counters via SQLAlchemy Core."""

from rentledger.infrastructure.database.counters import next_sequential_id
from rentledger.infrastructure.database.engine import create_db_engine, init_database
from rentledger.infrastructure.database.schema import (
    id_counters,
    metadata,
    payments,
    technique_day_offs,
    techniques,
    worker_notes,
    workers,
)

__all__ = [
    "create_db_engine",
    "id_counters",
    "init_database",
    "metadata",
    "next_sequential_id",
    "payments",
    "technique_day_offs",
    "techniques",
    "worker_notes",
    "workers",
]
