"""Subcommand modules for pricectl.

register_commands() uses deferred imports so ``pricectl --help`` stays
fast and never imports the HTTP stack.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pricectl.commands.latest import latest
    from pricectl.commands.series import series
    from pricectl.commands.usage import usage

    cli.add_command(series)
    cli.add_command(latest)
    cli.add_command(usage)
