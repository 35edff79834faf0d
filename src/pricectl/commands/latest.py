"""Command: price listings from the latest published rates."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pricectl.commands._base import PriceCommand, app_id_option, split_commodities

if TYPE_CHECKING:
    from pricectl.commands._context import AppContext


@click.command(
    cls=PriceCommand,
    examples="""\
  pricectl latest -c NZD -b AUD
  pricectl latest -c NZD,USD,EUR -b AUD -r 4 >> prices.beancount""",
)
@app_id_option
@click.option(
    "-c",
    "--commodities",
    multiple=True,
    required=True,
    metavar="COMMODITIES",
    help="Commodities to price (repeatable, or comma separated).",
)
@click.option("-b", "--base", required=True, metavar="COMMODITY", help="Base commodity.")
@click.option("-r", "--rounding", type=int, default=None, metavar="DP", help="Decimal places.")
@click.option(
    "--rounding-mode",
    type=click.Choice(["half-even", "half-up"]),
    default=None,
    help="Rounding rule for --rounding (default: half-even).",
)
@click.pass_obj
def latest(
    app: AppContext,
    app_id: str | None,
    commodities: tuple[str, ...],
    base: str,
    rounding: int | None,
    rounding_mode: str | None,
) -> None:
    """Fetch price listings from the most recent rates."""
    from pricectl.services.latest import LatestService

    defaults = app.settings.series
    app.emit(
        LatestService(app.client("latest", app_id)).latest(
            commodities=split_commodities(commodities),
            base=base,
            rounding=rounding if rounding is not None else defaults.rounding,
            rounding_mode=rounding_mode or defaults.rounding_mode,  # type: ignore[arg-type]
        )
    )
