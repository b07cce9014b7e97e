"""Tests for amount helpers and the injectable clock."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from rentledger.domain.clock import FixedClock, SystemClock
from rentledger.domain.money import format_amount, quantize_amount, to_decimal


class TestMoney:
    def test_float_goes_through_repr(self) -> None:
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string(self) -> None:
        assert to_decimal("9000.50") == Decimal("9000.50")

    def test_garbage_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Not a decimal amount"):
            to_decimal("twelve")

    def test_half_up(self) -> None:
        assert quantize_amount(Decimal("0.125")) == Decimal("0.13")
        assert quantize_amount(Decimal("0.124")) == Decimal("0.12")

    def test_format_places(self) -> None:
        assert format_amount(Decimal("15000") / 26) == "576.92"
        assert format_amount(Decimal("15000") / 26, 4) == "576.9231"
        assert format_amount(Decimal("5"), 0) == "5"


class TestClock:
    def test_fixed_clock(self) -> None:
        clock = FixedClock(date(2024, 1, 10))
        assert clock.today() == date(2024, 1, 10)
        assert clock.now().date() == date(2024, 1, 10)

    def test_advance_and_set(self) -> None:
        clock = FixedClock(date(2024, 1, 31))
        clock.advance()
        assert clock.today() == date(2024, 2, 1)
        clock.set_day(date(2025, 6, 1))
        assert clock.today() == date(2025, 6, 1)

    def test_system_clock_returns_a_date(self) -> None:
        assert isinstance(SystemClock().today(), date)
