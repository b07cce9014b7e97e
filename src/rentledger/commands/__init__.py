"""Subcommand modules for rentledger.

Provides register_commands(), which uses deferred imports to keep
``rentledger --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command groups and standalone commands on the root group."""
    # --- Groups ---
    from rentledger.commands.note import note
    from rentledger.commands.payment import payment
    from rentledger.commands.technique import technique
    from rentledger.commands.worker import worker

    cli.add_command(technique)
    cli.add_command(worker)
    cli.add_command(note)
    cli.add_command(payment)

    # --- Standalone commands ---
    from rentledger.commands.dashboard import dashboard

    cli.add_command(dashboard)
