"""Click base classes with an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints worked invocations and exits.
"""

from __future__ import annotations

from typing import Any

import click


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples)
    ctx.exit(0)


class _ExamplesMixin:
    """Adds ``examples=`` to a Click command and exposes it as ``--examples``."""

    examples: str | None

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(  # type: ignore[attr-defined]
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_show_examples,
                    help="Show usage examples.",
                )
            )


class LedgerCommand(_ExamplesMixin, click.Command):
    pass


class LedgerGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`LedgerCommand` by default."""

    command_class = LedgerCommand
