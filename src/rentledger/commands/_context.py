"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed down via ``@click.pass_obj``.
Opens the ledger and signs in lazily, and routes results to stdout or
stderr with the right exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rentledger.config.logging import (
    bind_ledger_context,
    clear_ledger_context,
    configure_logging,
)
from rentledger.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from rentledger.config.settings import LedgerSettings
    from rentledger.infrastructure.credentials import Credential
    from rentledger.infrastructure.ledger import Ledger
    from rentledger.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The ledger is opened on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: LedgerSettings) -> None:
        self.settings = settings
        self._ledger: Ledger | None = None
        self._credential: Credential | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def ledger(self) -> Ledger:
        """The ledger instance (created lazily on first access)."""
        if self._ledger is None:
            from rentledger.infrastructure.ledger import Ledger

            self._ledger = Ledger(self.settings)
        return self._ledger

    @property
    def credential(self) -> Credential:
        """Credential for the configured owner, issued on first access."""
        if self._credential is None:
            self._credential = self.ledger.sign_in()
            bind_ledger_context(
                ledger=self.settings.ledger.name, owner=self._credential.owner
            )
        return self._credential

    def close(self) -> None:
        if self._ledger is not None:
            if self._credential is not None:
                self._ledger.sign_out(self._credential)
                self._credential = None
                clear_ledger_context()
            self._ledger.close()
            self._ledger = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr, except in JSON
          mode where they are already part of the payload.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
