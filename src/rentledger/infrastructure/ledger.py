"""Ledger — the store that owns persistence and hands out snapshots.

The Ledger is the single dependency injected into every service. It owns
the database engine, the credential registry, and the reference clock.

Reads return whole immutable snapshots (every technique, worker and
payment of one owner). Writes happen inside :meth:`transaction`, which
maps onto ``engine.begin()``: commit on success, rollback on any
exception, so a rejected mutation never leaves partial state behind.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rentledger.domain.clock import Clock, FixedClock, SystemClock
from rentledger.infrastructure.credentials import Credential, CredentialRegistry
from rentledger.infrastructure.database.counters import next_sequential_id
from rentledger.infrastructure.database.engine import init_database
from rentledger.infrastructure.repositories import (
    PaymentRepository,
    TechniqueRepository,
    WorkerRepository,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from rentledger.config.settings import LedgerSettings
    from rentledger.domain.models import Payment, Technique, Worker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Everything one owner has stored, as of one read."""

    techniques: list[Technique] = field(default_factory=list)
    workers: list[Worker] = field(default_factory=list)
    payments: list[Payment] = field(default_factory=list)


@dataclass
class LedgerTransaction:
    """Open connection scoped to one owner, with repository accessors."""

    conn: Connection
    owner: str

    @property
    def techniques(self) -> TechniqueRepository:
        return TechniqueRepository(self.conn, self.owner)

    @property
    def workers(self) -> WorkerRepository:
        return WorkerRepository(self.conn, self.owner)

    @property
    def payments(self) -> PaymentRepository:
        return PaymentRepository(self.conn, self.owner)

    def next_id(self, type_prefix: str) -> str:
        """Claim the next ``PREFIX-NNNN`` id inside this transaction."""
        return next_sequential_id(self.conn, type_prefix)


class Ledger:
    """Repository encapsulating database access for one ledger directory.

    Constructed once at CLI startup from :class:`LedgerSettings` and stored
    on the Click context. Services receive it via :class:`BaseService`.
    """

    def __init__(self, settings: LedgerSettings, *, clock: Clock | None = None) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            settings.ledger_root,
            directory=settings.storage.directory,
            filename=settings.storage.filename,
        )
        self._credentials = CredentialRegistry()
        if clock is None:
            pinned = settings.clock.today
            clock = FixedClock(pinned) if pinned is not None else SystemClock()
        self._clock = clock

    @property
    def root(self) -> Path:
        return self._settings.ledger_root

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    @property
    def clock(self) -> Clock:
        return self._clock

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def sign_in(self, owner: str | None = None) -> Credential:
        """Issue a credential for *owner* (default: ``[ledger] owner``)."""
        who = owner if owner is not None else self._settings.ledger.owner
        credential = self._credentials.sign_in(who, now=self._clock.now())
        logger.debug("Signed in as %s", credential.owner)
        return credential

    def sign_out(self, credential: Credential) -> None:
        self._credentials.sign_out(credential)

    def revoke(self, credential: Credential) -> None:
        """Invalidate *credential* after the store refused it."""
        self._credentials.revoke(credential)

    def authorize(self, credential: Credential | None) -> str:
        """Owner of *credential*; raises :class:`CredentialError` if not live."""
        return self._credentials.authorize(credential)

    # ------------------------------------------------------------------
    # Reads and writes
    # ------------------------------------------------------------------

    def snapshot(self, credential: Credential | None) -> LedgerSnapshot:
        """Fetch every entity of the credential's owner in one read."""
        owner = self.authorize(credential)
        with self._engine.connect() as conn:
            return LedgerSnapshot(
                techniques=TechniqueRepository(conn, owner).list_all(),
                workers=WorkerRepository(conn, owner).list_all(),
                payments=PaymentRepository(conn, owner).list_all(),
            )

    @contextmanager
    def read(self, credential: Credential | None) -> Iterator[LedgerTransaction]:
        """Owner-scoped read-only access outside any write transaction."""
        owner = self.authorize(credential)
        with self._engine.connect() as conn:
            yield LedgerTransaction(conn=conn, owner=owner)

    @contextmanager
    def transaction(self, credential: Credential | None) -> Iterator[LedgerTransaction]:
        """Owner-scoped write transaction.

        DB writes commit when the block exits normally and roll back on
        any exception raised inside it.

        Usage::

            with ledger.transaction(credential) as txn:
                txn.techniques.insert(technique)

        Raises:
            CredentialError: If *credential* is missing or no longer live;
                nothing is opened in that case.
        """
        owner = self.authorize(credential)
        with self._engine.begin() as conn:
            yield LedgerTransaction(conn=conn, owner=owner)
