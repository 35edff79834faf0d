"""LatestService — price listings from the most recent published rates."""

from __future__ import annotations

from collections.abc import Iterable

from pricectl.domain.errors import PricectlError
from pricectl.domain.prices import RoundingMode, format_price_line, validate_rounding
from pricectl.domain.rates import RateResult, normalize_commodities, normalize_commodity
from pricectl.services.base import BaseService
from pricectl.services.result import ServiceResult
from pricectl.services.series import build_price_lines
from pricectl.services.telemetry import traced


class LatestService(BaseService):
    """Single-request counterpart of SeriesService, dated by the API timestamp."""

    @traced
    def latest(
        self,
        *,
        commodities: Iterable[str],
        base: str,
        rounding: int | None = None,
        rounding_mode: RoundingMode = "half-even",
    ) -> ServiceResult:
        op = "latest"
        try:
            base_code = normalize_commodity(base)
            wanted = normalize_commodities(commodities)
            validate_rounding(rounding, rounding_mode)
            day, rates = self._client.fetch_latest(sorted({*wanted, base_code}))
        except PricectlError as exc:
            return self._error(op, exc)

        lines = build_price_lines(
            [(day, RateResult.success(day, rates))],
            wanted,
            base_code,
            rounding=rounding,
            rounding_mode=rounding_mode,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "date": day.isoformat(),
                "base": base_code,
                "count": len(lines),
                "lines": [format_price_line(line) for line in lines],
                "prices": [line.to_dict() for line in lines],
            },
        )
