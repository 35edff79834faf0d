"""Shared pytest fixtures and test helpers for pricectl tests."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Generator, Iterable
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from pricectl.domain.errors import FatalFetchError, InvalidConfigError, QueryFailure
from pricectl.domain.rates import RateQuery
from pricectl.infrastructure.client import RatesClient
from pricectl.infrastructure.models import Usage
from pricectl.services.telemetry import disable_telemetry


def rates_for(day: date) -> dict[str, Decimal]:
    """Deterministic USD-quoted rates that drift a little from day to day."""
    drift = Decimal(day.day) / 1000
    return {
        "USD": Decimal(1),
        "AUD": Decimal("1.4") + drift,
        "NZD": Decimal("1.5") + drift,
        "EUR": Decimal("0.9"),
        "GBP": Decimal("0.8"),
    }


def usage_payload(
    *,
    remaining: int = 900,
    status: str = "active",
) -> dict[str, Any]:
    """A ``usage.json`` response body."""
    return {
        "status": 200,
        "data": {
            "app_id": "test-app",
            "status": status,
            "plan": {
                "name": "Free",
                "quota": "1000 requests / month",
                "update_frequency": "3600s",
                "features": {
                    "base": False,
                    "symbols": False,
                    "experimental": True,
                    "time-series": False,
                    "convert": False,
                },
            },
            "usage": {
                "requests": 1000 - remaining,
                "requests_quota": 1000,
                "requests_remaining": remaining,
                "days_elapsed": 10,
                "days_remaining": 20,
                "daily_average": 10,
            },
        },
    }


class FakeRatesClient:
    """Thread-safe stand-in for RatesClient that records every query.

    Parameters:
        failures: Dates whose lookup raises QueryFailure.
        fatal_on: Dates whose lookup raises FatalFetchError.
        delay: Seconds each fetch sleeps, to keep several queries in flight.
        barrier: Optional barrier every fetch waits on before answering.
    """

    def __init__(
        self,
        *,
        failures: Iterable[date] = (),
        fatal_on: Iterable[date] = (),
        delay: float = 0.0,
        barrier: threading.Barrier | None = None,
        usage: dict[str, Any] | None = None,
        latest_day: date = date(2020, 1, 2),
    ) -> None:
        self.failures = set(failures)
        self.fatal_on = set(fatal_on)
        self.delay = delay
        self.barrier = barrier
        self.usage = usage or usage_payload()
        self.latest_day = latest_day
        self.calls: list[RateQuery] = []
        self.usage_calls = 0
        self.active = 0
        self.peak = 0
        self.closed = False
        self._lock = threading.Lock()

    @property
    def called_days(self) -> list[date]:
        return [query.day for query in self.calls]

    def fetch(self, query: RateQuery) -> dict[str, Decimal]:
        with self._lock:
            self.calls.append(query)
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            if self.barrier is not None:
                self.barrier.wait(timeout=5)
            if self.delay:
                time.sleep(self.delay)
            if query.day in self.fatal_on:
                raise FatalFetchError("Invalid App ID", detail={"status": 401})
            if query.day in self.failures:
                raise QueryFailure(query.day, "http_500", "Server error")
            rates = rates_for(query.day)
            return {symbol: rates[symbol] for symbol in query.symbols}
        finally:
            with self._lock:
                self.active -= 1

    def fetch_latest(self, symbols: Iterable[str]) -> tuple[date, dict[str, Decimal]]:
        rates = rates_for(self.latest_day)
        return self.latest_day, {symbol: rates[symbol] for symbol in symbols}

    def fetch_usage(self) -> Usage:
        self.usage_calls += 1
        return Usage.model_validate(self.usage)

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Run every test from an empty directory with no pricectl env vars.

    CLI invocations reconfigure logging, so root handlers are restored too.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    for name in ("PRICECTL_CONFIG", "PRICECTL_API__APP_ID", "PRICECTL_QUIET"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    root.handlers = handlers
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_client() -> FakeRatesClient:
    return FakeRatesClient()


@pytest.fixture
def install_client(
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[[FakeRatesClient], FakeRatesClient]:
    """Make the CLI build *client* instead of a real RatesClient.

    The app id check still applies, so a missing app id fails as usual.
    """

    def install(client: FakeRatesClient) -> FakeRatesClient:
        def from_settings(cls: type, settings: Any, app_id: str | None = None) -> Any:
            if not (app_id or settings.api.app_id):
                raise InvalidConfigError("An Open Exchange Rates app id is required")
            return client

        monkeypatch.setattr(RatesClient, "from_settings", classmethod(from_settings))
        return client

    return install
