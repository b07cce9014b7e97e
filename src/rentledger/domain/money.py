"""Decimal helpers for amounts.

Amounts stay unrounded through every intermediate step; rounding to the
display precision happens only here, at presentation time.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
DEFAULT_PLACES = 2


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert *value* to ``Decimal`` (floats go through ``str`` to avoid binary noise)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        msg = f"Not a decimal amount: {value!r}"
        raise ValueError(msg) from exc


def quantize_amount(amount: Decimal, places: int = DEFAULT_PLACES) -> Decimal:
    """Round *amount* half-up to *places* fractional digits."""
    exponent = Decimal(1).scaleb(-places)
    return amount.quantize(exponent, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal, places: int = DEFAULT_PLACES) -> str:
    """Display string for *amount*, e.g. ``"5769.23"``."""
    return f"{quantize_amount(amount, places):f}"
