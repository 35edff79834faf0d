"""Tests for rate queries, results, cross rates and aggregation."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from pricectl.domain.errors import InvalidConfigError, QueryFailure
from pricectl.domain.rates import (
    AggregatedResults,
    RateQuery,
    RateResult,
    normalize_commodities,
    normalize_commodity,
)

DAY = date(2020, 1, 1)


class TestNormalizeCommodity:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("nzd", "NZD"), (" AUD ", "AUD"), ("VBTLX", "VBTLX"), ("X", "X"), ("BRK.B", "BRK.B")],
    )
    def test_valid(self, raw: str, expected: str) -> None:
        assert normalize_commodity(raw) == expected

    @pytest.mark.parametrize("raw", ["", "1USD", "US D", "USD-", "A" * 25])
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidConfigError):
            normalize_commodity(raw)

    def test_deduplicates_preserving_order(self) -> None:
        assert normalize_commodities(["usd", "NZD", "USD"]) == ("USD", "NZD")

    def test_empty_set_rejected(self) -> None:
        with pytest.raises(InvalidConfigError, match="At least one commodity"):
            normalize_commodities([])


class TestRateQuery:
    def test_symbols_include_base(self) -> None:
        query = RateQuery(day=DAY, base="AUD", commodities=("NZD", "USD"))
        assert query.symbols == ("AUD", "NZD", "USD")

    def test_symbols_without_duplicate_base(self) -> None:
        query = RateQuery(day=DAY, base="AUD", commodities=("AUD",))
        assert query.symbols == ("AUD",)


class TestRateResult:
    def test_success(self) -> None:
        result = RateResult.success(DAY, {"AUD": Decimal("1.5")})
        assert result.ok
        assert result.failure is None
        assert result.rates == {"AUD": Decimal("1.5")}

    def test_failed(self) -> None:
        failure = QueryFailure(DAY, "timeout", "timed out")
        result = RateResult.failed(failure)
        assert not result.ok
        assert result.day == DAY
        assert result.price_of("NZD", "AUD") is None

    def test_requires_exactly_one_outcome(self) -> None:
        with pytest.raises(ValueError):
            RateResult(day=DAY)

    def test_rates_are_read_only(self) -> None:
        result = RateResult.success(DAY, {"AUD": Decimal("1.5")})
        with pytest.raises(TypeError):
            result.rates["AUD"] = Decimal(2)  # type: ignore[index]

    def test_cross_rate(self) -> None:
        result = RateResult.success(DAY, {"AUD": Decimal("1.5"), "NZD": Decimal("1.6")})
        assert result.price_of("NZD", "AUD") == Decimal("0.9375")

    def test_cross_rate_same_commodity(self) -> None:
        result = RateResult.success(DAY, {"AUD": Decimal("1.5")})
        assert result.price_of("AUD", "AUD") == Decimal(1)

    def test_cross_rate_missing_symbol(self) -> None:
        result = RateResult.success(DAY, {"AUD": Decimal("1.5")})
        assert result.price_of("NZD", "AUD") is None


class TestAggregatedResults:
    def test_views(self) -> None:
        failure = QueryFailure(date(2020, 1, 2), "http_500", "boom")
        results = AggregatedResults(
            {
                DAY: RateResult.success(DAY, {"AUD": Decimal(1)}),
                date(2020, 1, 2): RateResult.failed(failure),
            }
        )
        assert len(results) == 2
        assert DAY in results
        assert list(results.succeeded()) == [DAY]
        assert results.failures() == {date(2020, 1, 2): failure}

    def test_empty(self) -> None:
        results = AggregatedResults()
        assert len(results) == 0
        assert results.failures() == {}

    def test_immutable_after_construction(self) -> None:
        source = {DAY: RateResult.success(DAY, {"AUD": Decimal(1)})}
        results = AggregatedResults(source)
        source.clear()
        assert DAY in results
