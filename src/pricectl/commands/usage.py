"""Command: API usage statistics."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pricectl.commands._base import PriceCommand, app_id_option

if TYPE_CHECKING:
    from pricectl.commands._context import AppContext


@click.command(
    cls=PriceCommand,
    examples="""\
  pricectl usage -i $APP_ID
  pricectl --json usage""",
)
@app_id_option
@click.pass_obj
def usage(app: AppContext, app_id: str | None) -> None:
    """Print your API usage stats."""
    from pricectl.services.usage import UsageService

    app.emit(UsageService(app.client("usage", app_id)).usage())
