"""Tests for sequential ID generation."""

from __future__ import annotations

import pytest
from sqlalchemy.engine import Engine

from rentledger.infrastructure.database.counters import (
    PAYMENT_PREFIX,
    TECHNIQUE_PREFIX,
    next_sequential_id,
)


class TestNextSequentialId:
    def test_first_ids(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            assert next_sequential_id(conn, TECHNIQUE_PREFIX) == "TECH-0001"
            assert next_sequential_id(conn, TECHNIQUE_PREFIX) == "TECH-0002"
            assert next_sequential_id(conn, PAYMENT_PREFIX) == "PAY-0001"

    def test_rolled_back_id_is_reissued(self, db_engine: Engine) -> None:
        with pytest.raises(RuntimeError), db_engine.begin() as conn:
            next_sequential_id(conn, TECHNIQUE_PREFIX)
            raise RuntimeError("abort")
        with db_engine.begin() as conn:
            assert next_sequential_id(conn, TECHNIQUE_PREFIX) == "TECH-0001"

    def test_unknown_prefix(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn, pytest.raises(ValueError, match="Unknown"):
            next_sequential_id(conn, "BOGUS-")
