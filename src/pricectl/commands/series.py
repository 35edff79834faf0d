"""Command: price listings for every day of a date range."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pricectl.commands._base import PriceCommand, app_id_option, split_commodities

if TYPE_CHECKING:
    from pricectl.commands._context import AppContext


@click.command(
    cls=PriceCommand,
    examples="""\
  pricectl series -s 2020-01-01 -e 2020-01-31 -c NZD -b AUD
  pricectl series -s 2020-01-01 -e 2020-01-05 -c NZD,USD -b AUD --desc -r 4
  pricectl series -i $APP_ID -s 2020-05-01 -e 2020-05-31 -c EUR -b USD -p 8 >> prices.beancount
  pricectl --json series -s 2020-01-01 -e 2020-01-02 -c GBP -b EUR --no-quota-check""",
)
@app_id_option
@click.option("-s", "--start", required=True, metavar="DATE", help="Start date, YYYY-mm-dd.")
@click.option("-e", "--end", required=True, metavar="DATE", help="End date, YYYY-mm-dd.")
@click.option(
    "-c",
    "--commodities",
    multiple=True,
    required=True,
    metavar="COMMODITIES",
    help="Commodities to price (repeatable, or comma separated), e.g. NZD,USD.",
)
@click.option(
    "-b",
    "--base",
    required=True,
    metavar="COMMODITY",
    help="Commodity the prices are expressed in.",
)
@click.option(
    "-p",
    "--parallel-requests",
    type=int,
    default=None,
    metavar="N",
    help="Maximum number of requests in flight (default: 2).",
)
@click.option(
    "-r",
    "--rounding",
    type=int,
    default=None,
    metavar="DP",
    help="Number of decimal places to round to.",
)
@click.option(
    "--rounding-mode",
    type=click.Choice(["half-even", "half-up"]),
    default=None,
    help="Rounding rule for --rounding (default: half-even).",
)
@click.option("-d", "--desc", is_flag=True, help="Order the listings by descending date.")
@click.option(
    "-q",
    "--no-quota-check",
    is_flag=True,
    help="Skip the quota check before fetching (saves a request, may exceed your quota).",
)
@click.pass_obj
def series(
    app: AppContext,
    app_id: str | None,
    start: str,
    end: str,
    commodities: tuple[str, ...],
    base: str,
    parallel_requests: int | None,
    rounding: int | None,
    rounding_mode: str | None,
    desc: bool,
    no_quota_check: bool,
) -> None:
    """Fetch a series of ledger price listings, one per day and commodity."""
    from pricectl.services.series import SeriesService

    defaults = app.settings.series
    svc = SeriesService(app.client("series", app_id))
    app.emit(
        svc.series(
            start=start,
            end=end,
            commodities=split_commodities(commodities),
            base=base,
            parallel_requests=(
                parallel_requests if parallel_requests is not None else defaults.parallel_requests
            ),
            rounding=rounding if rounding is not None else defaults.rounding,
            rounding_mode=rounding_mode or defaults.rounding_mode,  # type: ignore[arg-type]
            descending=desc or defaults.descending,
            quota_check=defaults.quota_check and not no_quota_check,
        )
    )
