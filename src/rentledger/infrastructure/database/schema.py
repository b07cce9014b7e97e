"""SQLAlchemy Core table definitions for the ledger database.

Amounts are stored as TEXT (the ``str`` of a ``Decimal``) and days as
canonical ``YYYY-MM-DD`` TEXT, so both round-trip without float or
timezone drift. Every top-level row carries the ``owner`` it belongs to.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

techniques = Table(
    "techniques",
    metadata,
    Column("id", Text, primary_key=True),
    Column("owner", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("description", Text),
    Column("monthly_rent", Text, nullable=False),  # Decimal as text
    Column("planned_working_days", Integer, nullable=False),
    Column("start_date", Text, nullable=False),
    Column("status", Text, nullable=False),  # active | ended, kept for display
    Column("end_date", Text),
    Column("created_at", Text, nullable=False),
    Column("version", Integer, nullable=False, default=1, server_default="1"),
)

technique_day_offs = Table(
    "technique_day_offs",
    metadata,
    Column(
        "technique_id",
        Text,
        ForeignKey("techniques.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("day", Text, nullable=False),
    UniqueConstraint("technique_id", "day"),
)

workers = Table(
    "workers",
    metadata,
    Column("id", Text, primary_key=True),
    Column("owner", Text, nullable=False),
    Column("full_name", Text, nullable=False),
    Column("position", Text, nullable=False),
    Column("monthly_salary", Text),  # Decimal as text, NULL when unset
    Column("description", Text),
    Column("photo", Text),
    Column("created_at", Text, nullable=False),
    Column("version", Integer, nullable=False, default=1, server_default="1"),
)

worker_notes = Table(
    "worker_notes",
    metadata,
    Column("id", Text, primary_key=True),
    Column(
        "worker_id",
        Text,
        ForeignKey("workers.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("title", Text),
    Column("content", Text, nullable=False),
    Column("created_at", Text, nullable=False),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Text, primary_key=True),
    Column("owner", Text, nullable=False),
    Column(
        "worker_id",
        Text,
        ForeignKey("workers.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("amount", Text, nullable=False),
    Column("date", Text, nullable=False),
    Column("note", Text),
    Column("created_at", Text, nullable=False),
)

id_counters = Table(
    "id_counters",
    metadata,
    Column("type_prefix", Text, primary_key=True),
    Column("next_value", Integer, nullable=False, default=1, server_default="1"),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_techniques_owner", techniques.c.owner)
Index("ix_workers_owner", workers.c.owner)
Index("ix_payments_owner", payments.c.owner)
Index("ix_payments_worker", payments.c.worker_id)
Index("ix_payments_date", payments.c.date)
Index("ix_worker_notes_worker", worker_notes.c.worker_id)
