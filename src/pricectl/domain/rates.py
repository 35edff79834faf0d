"""Rate queries, per-date results, and their aggregation.

Rates returned by the API are quoted against the API's own reference
currency (USD on most plans).  Prices between two commodities are derived
as cross rates: one unit of ``commodity`` costs
``rates[base] / rates[commodity]`` units of ``base``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from types import MappingProxyType

from pricectl.domain.errors import InvalidConfigError, QueryFailure

# Ledger commodity names: upper case, may contain digits and '._-
COMMODITY_PATTERN = re.compile(r"^[A-Z](?:[A-Z0-9'._-]{0,22}[A-Z0-9])?$")


def normalize_commodity(code: str) -> str:
    """Upper-case and validate a commodity code."""
    normalized = code.strip().upper()
    if not COMMODITY_PATTERN.match(normalized):
        msg = f"Invalid commodity code {code!r}"
        raise InvalidConfigError(msg, detail={"commodity": code})
    return normalized


def normalize_commodities(codes: Iterable[str]) -> tuple[str, ...]:
    """Validate commodity codes, dropping duplicates but keeping first-seen order.

    Raises:
        InvalidConfigError: If no codes are given or any code is invalid.
    """
    seen: dict[str, None] = {}
    for code in codes:
        seen.setdefault(normalize_commodity(code), None)
    if not seen:
        raise InvalidConfigError("At least one commodity is required")
    return tuple(seen)


@dataclass(frozen=True)
class RateQuery:
    """One rate lookup: the commodities to price in *base* on *day*."""

    day: date
    base: str
    commodities: tuple[str, ...]

    @property
    def symbols(self) -> tuple[str, ...]:
        """Symbols to request from the API (commodities plus the base), sorted."""
        return tuple(sorted({*self.commodities, self.base}))


@dataclass(frozen=True)
class RateResult:
    """Outcome of one RateQuery. Exactly one of *rates* / *failure* is set."""

    day: date
    rates: Mapping[str, Decimal] | None = None
    failure: QueryFailure | None = None

    def __post_init__(self) -> None:
        if (self.rates is None) == (self.failure is None):
            raise ValueError("RateResult needs exactly one of rates or failure")

    @classmethod
    def success(cls, day: date, rates: Mapping[str, Decimal]) -> RateResult:
        return cls(day=day, rates=MappingProxyType(dict(rates)))

    @classmethod
    def failed(cls, failure: QueryFailure) -> RateResult:
        return cls(day=failure.day, failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def price_of(self, commodity: str, base: str) -> Decimal | None:
        """Price of one unit of *commodity* in *base*, or None if not derivable."""
        if self.rates is None:
            return None
        if commodity == base:
            return Decimal(1)
        commodity_rate = self.rates.get(commodity)
        base_rate = self.rates.get(base)
        if commodity_rate is None or base_rate is None or commodity_rate == 0:
            return None
        return base_rate / commodity_rate


@dataclass(frozen=True)
class AggregatedResults:
    """Read-only mapping of date to RateResult, one entry per scheduled date."""

    _results: Mapping[date, RateResult] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_results", MappingProxyType(dict(self._results)))

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[date]:
        return iter(self._results)

    def __getitem__(self, day: date) -> RateResult:
        return self._results[day]

    def __contains__(self, day: object) -> bool:
        return day in self._results

    def items(self) -> Iterable[tuple[date, RateResult]]:
        return self._results.items()

    def succeeded(self) -> dict[date, RateResult]:
        return {day: result for day, result in self._results.items() if result.ok}

    def failures(self) -> dict[date, QueryFailure]:
        return {
            day: result.failure
            for day, result in self._results.items()
            if result.failure is not None
        }
