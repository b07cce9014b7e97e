"""Rich Console factory and theme for rentledger output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

LEDGER_THEME = Theme(
    {
        "rl.ok": "bold green",
        "rl.error": "bold red",
        "rl.warning": "bold yellow",
        "rl.op": "bold cyan",
        "rl.key": "dim",
        "rl.id": "bold blue",
        "rl.name": "bold",
        "rl.amount": "magenta",
        "rl.status.active": "green",
        "rl.status.ended": "dim",
        "rl.pay.full": "green",
        "rl.pay.partial": "yellow",
        "rl.pay.none": "red",
        "rl.day.working": "green",
        "rl.day.day_off": "bold red",
        "rl.day.outside": "dim",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "active": "rl.status.active",
    "ended": "rl.status.ended",
    "full": "rl.pay.full",
    "partial": "rl.pay.partial",
    "none": "rl.pay.none",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=LEDGER_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Rich style for a rental or payment status (empty if unknown)."""
    return _STATUS_STYLES.get(status, "")
