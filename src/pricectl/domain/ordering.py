"""Deterministic output ordering of aggregated rate results."""

from __future__ import annotations

from datetime import date

from pricectl.domain.rates import AggregatedResults, RateResult


def order_results(
    results: AggregatedResults,
    *,
    descending: bool = False,
) -> list[tuple[date, RateResult]]:
    """Sort successful results by date, ascending unless *descending*.

    Dates whose lookup failed are excluded.  Completion order of the
    fetches has no influence on the returned sequence.
    """
    return sorted(
        ((day, result) for day, result in results.items() if result.ok),
        key=lambda pair: pair[0],
        reverse=descending,
    )
