"""Error taxonomy for price fetching.

Configuration and range errors are raised before any network activity.
``FatalFetchError`` invalidates the whole batch of queries, while
``QueryFailure`` is isolated to the single date it was raised for.
"""

from __future__ import annotations

from datetime import date
from typing import Any


class PricectlError(Exception):
    """Base class for every error pricectl reports to the user."""

    code = "PRICECTL_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = dict(detail or {})


class InvalidRangeError(PricectlError):
    """Start date after end date, or an unparseable date."""

    code = "INVALID_RANGE"


class InvalidConfigError(PricectlError):
    """Parallelism, rounding precision, credential, or commodity set is unusable."""

    code = "INVALID_CONFIG"


class FatalFetchError(PricectlError):
    """Authentication, quota, or shared request failure. Halts the batch."""

    code = "FATAL_FETCH"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, detail=detail)
        if code is not None:
            self.code = code


class QueryFailure(PricectlError):
    """A single date's rate lookup failed. Other dates are unaffected.

    Attributes:
        day: The date whose lookup failed.
        reason: Short machine-readable cause (``timeout``, ``network``,
            ``http_503``, ``unsupported_commodity``, ``malformed_response``).
    """

    code = "QUERY_FAILED"

    def __init__(
        self,
        day: date,
        reason: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
    ) -> None:
        payload = {"date": day.isoformat(), "reason": reason, **(detail or {})}
        super().__init__(message, detail=payload)
        self.day = day
        self.reason = reason
