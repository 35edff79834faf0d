"""Click base class with --examples support.

``--examples`` prints usage examples and exits, keeping ``--help`` short.
"""

from __future__ import annotations

from typing import Any, TypeVar

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


F = TypeVar("F")


class PriceCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def app_id_option(func: F) -> F:
    """Shared ``-i/--app-id`` option; falls back to configuration when omitted."""
    return click.option(
        "-i",
        "--app-id",
        "app_id",
        default=None,
        metavar="ID",
        help="Open Exchange Rates App ID (see https://openexchangerates.org/account/app-ids).",
    )(func)


def split_commodities(values: tuple[str, ...]) -> list[str]:
    """Accept ``-c NZD -c USD`` as well as ``-c NZD,USD`` and ``-c "NZD USD"``."""
    return [part for value in values for part in value.replace(",", " ").split()]
