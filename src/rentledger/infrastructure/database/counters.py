"""Atomic sequential ID generation for ledger entities.

Uses the ``id_counters`` table inside the caller's transaction, so an ID
is only consumed when the surrounding write commits. Minimum 4 digits,
grows naturally past 9999.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update

from rentledger.infrastructure.database.schema import id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection

TECHNIQUE_PREFIX = "TECH-"
WORKER_PREFIX = "WRK-"
PAYMENT_PREFIX = "PAY-"
NOTE_PREFIX = "NOTE-"

SEQUENTIAL_PREFIXES: tuple[str, ...] = (
    TECHNIQUE_PREFIX,
    WORKER_PREFIX,
    PAYMENT_PREFIX,
    NOTE_PREFIX,
)


def next_sequential_id(conn: Connection, type_prefix: str) -> str:
    """Claim the next sequential ID for *type_prefix*.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        type_prefix: One of :data:`SEQUENTIAL_PREFIXES`.

    Returns:
        The new ID string (e.g. ``"TECH-0001"`` or ``"PAY-0042"``).

    Raises:
        ValueError: If *type_prefix* is not a recognized prefix.
    """
    if type_prefix not in SEQUENTIAL_PREFIXES:
        msg = (
            f"Unknown sequential type prefix: {type_prefix!r}. "
            f"Expected one of {sorted(SEQUENTIAL_PREFIXES)}"
        )
        raise ValueError(msg)

    row = conn.execute(
        select(id_counters.c.next_value).where(id_counters.c.type_prefix == type_prefix)
    ).one()
    current_value: int = row.next_value

    conn.execute(
        update(id_counters)
        .where(id_counters.c.type_prefix == type_prefix)
        .values(next_value=current_value + 1)
    )
    return f"{type_prefix}{current_value:04d}"
