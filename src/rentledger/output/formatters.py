"""Rich/JSON output dispatch.

The CLI renders ServiceResult for humans (Rich tables and panels) or for
machines (``--json``). ``--quiet`` prints ids only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rentledger.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from rentledger.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult according to *settings* (human by default)."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
