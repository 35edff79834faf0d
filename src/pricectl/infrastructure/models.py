"""Pydantic models for Open Exchange Rates API payloads.

Covers the ``latest.json``/``historical/*.json`` rate payloads and the
``usage.json`` account statistics.  Numbers are parsed as Decimal so no
precision is lost between the wire and the ledger.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class HistoricalRates(BaseModel):
    """Rates for one day, quoted against *base* (the API reference currency)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: int
    base: str
    rates: dict[str, Decimal] = Field(default_factory=dict)

    @property
    def day(self) -> date:
        """Calendar date (UTC) the rates were published for."""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).date()


class ApiErrorBody(BaseModel):
    """Error envelope returned with non-2xx responses."""

    model_config = ConfigDict(extra="ignore")

    error: bool = True
    status: int = 0
    message: str = ""
    description: str = ""


class AccessStatus(StrEnum):
    ACTIVE = "active"
    ACCESS_RESTRICTED = "access_restricted"


class PlanFeatures(BaseModel):
    """Feature switches of the account plan."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base: bool = False
    symbols: bool = False
    experimental: bool = False
    time_series: bool = Field(default=False, alias="time-series")
    convert: bool = False


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    quota: str
    update_frequency: str
    features: PlanFeatures = Field(default_factory=PlanFeatures)


class UsageStats(BaseModel):
    """Request counters for the current billing period."""

    model_config = ConfigDict(frozen=True)

    requests: int
    requests_quota: int
    requests_remaining: int
    days_elapsed: int
    days_remaining: int
    daily_average: int


class UsageData(BaseModel):
    model_config = ConfigDict(frozen=True)

    app_id: str | None = Field(default=None, exclude=True)
    status: AccessStatus
    plan: Plan
    usage: UsageStats


class Usage(BaseModel):
    """Top-level ``usage.json`` payload."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    data: UsageData
