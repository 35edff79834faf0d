"""SeriesService — price listings for every day of a date range.

Validation happens before any request is made.  The usage endpoint is
consulted first (unless disabled) so a run that would exhaust the quota
fails fast instead of half-way through.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

import structlog

from pricectl.domain.dates import generate_dates, parse_date
from pricectl.domain.errors import FatalFetchError, PricectlError
from pricectl.domain.ordering import order_results
from pricectl.domain.prices import (
    PriceLine,
    RoundingMode,
    format_price_line,
    round_rate,
    validate_rounding,
)
from pricectl.domain.rates import RateResult, normalize_commodities, normalize_commodity
from pricectl.infrastructure.models import AccessStatus
from pricectl.services.base import BaseService
from pricectl.services.orchestrator import BoundedFetcher, validate_parallelism
from pricectl.services.result import ServiceResult
from pricectl.services.telemetry import annotate, traced

log = structlog.get_logger(__name__)


def _as_date(value: date | str) -> date:
    return value if isinstance(value, date) else parse_date(value)


def build_price_lines(
    ordered: Sequence[tuple[date, RateResult]],
    commodities: Iterable[str],
    base: str,
    *,
    rounding: int | None = None,
    rounding_mode: RoundingMode = "half-even",
) -> list[PriceLine]:
    """One PriceLine per (commodity, date), commodities in the order given."""
    lines: list[PriceLine] = []
    for commodity in commodities:
        for day, result in ordered:
            price = result.price_of(commodity, base)
            if price is None:
                log.warning("price.missing", date=day.isoformat(), commodity=commodity)
                continue
            rate = round_rate(price, rounding, rounding_mode)
            lines.append(PriceLine(day, commodity, rate, base))
    return lines


class SeriesService(BaseService):
    """Fetch historical rates for a date range and turn them into price lines."""

    @traced
    def series(
        self,
        *,
        start: date | str,
        end: date | str,
        commodities: Iterable[str],
        base: str,
        parallel_requests: int = 2,
        rounding: int | None = None,
        rounding_mode: RoundingMode = "half-even",
        descending: bool = False,
        quota_check: bool = True,
    ) -> ServiceResult:
        op = "series"
        try:
            base_code = normalize_commodity(base)
            wanted = normalize_commodities(commodities)
            validate_rounding(rounding, rounding_mode)
            validate_parallelism(parallel_requests)
            dates = generate_dates(_as_date(start), _as_date(end))

            if quota_check:
                self._check_quota(len(dates))

            fetcher = BoundedFetcher(self._client, parallel_requests=parallel_requests)
            results = fetcher.fetch(dates, base_code, wanted)
        except PricectlError as exc:
            return self._error(op, exc)

        ordered = order_results(results, descending=descending)
        lines = build_price_lines(
            ordered,
            wanted,
            base_code,
            rounding=rounding,
            rounding_mode=rounding_mode,
        )
        failures = sorted(results.failures().items())
        annotate("requests", len(results))
        annotate("failed", len(failures))

        data: dict[str, Any] = {
            "start": dates.first.isoformat(),
            "end": dates.last.isoformat(),
            "base": base_code,
            "commodities": list(wanted),
            "count": len(lines),
            "lines": [format_price_line(line) for line in lines],
            "prices": [line.to_dict() for line in lines],
            "failed_dates": [day.isoformat() for day, _ in failures],
        }
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=[f"{day.isoformat()}: {failure.message}" for day, failure in failures],
        )

    def _check_quota(self, expected_requests: int) -> None:
        """Fail before fetching when the run cannot fit in the remaining quota."""
        usage = self._client.fetch_usage().data
        if usage.status is AccessStatus.ACCESS_RESTRICTED:
            raise FatalFetchError(
                "API access is restricted for this app id",
                code="QUOTA_EXCEEDED",
                detail={"status": usage.status.value},
            )
        remaining = usage.usage.requests_remaining
        if expected_requests > remaining:
            msg = (
                f"The expected number of requests ({expected_requests}) for this "
                f"command will exceed your remaining quota ({remaining})"
            )
            raise FatalFetchError(
                msg,
                code="QUOTA_EXCEEDED",
                detail={"expected": expected_requests, "remaining": remaining},
            )
