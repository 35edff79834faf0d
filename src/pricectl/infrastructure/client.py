"""RatesClient — Open Exchange Rates HTTP client.

One ``httpx.Client`` is shared by every fetch worker (httpx clients are
thread-safe).  Failures are classified here, at the network boundary:

* ``FatalFetchError`` for failures shared by every query (bad or missing
  app id, plan restrictions, exhausted quota, rejected base currency).
* ``QueryFailure`` for failures isolated to one date (timeouts, transport
  errors, server errors, malformed payloads, unsupported commodities).

No retries are performed.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol

import httpx
from pydantic import ValidationError

from pricectl.domain.errors import FatalFetchError, InvalidConfigError, QueryFailure
from pricectl.infrastructure.models import ApiErrorBody, HistoricalRates, Usage

if TYPE_CHECKING:
    from pricectl.config.settings import PriceSettings
    from pricectl.domain.rates import RateQuery

logger = logging.getLogger(__name__)

API_URL = "https://openexchangerates.org/api"

FATAL_STATUSES = frozenset({401, 403, 429})
FATAL_MESSAGES = frozenset(
    {
        "missing_app_id",
        "invalid_app_id",
        "not_allowed",
        "access_restricted",
        "invalid_base",
    }
)


class RateClient(Protocol):
    """Capability the orchestrator needs: one rate lookup per query."""

    def fetch(self, query: RateQuery) -> dict[str, Decimal]: ...


class _RequestFailed(Exception):
    """Non-fatal failure of a single request, before it is tied to a date."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


def symbols_param(symbols: Iterable[str]) -> str | None:
    """Comma-joined ``symbols`` query parameter, or None for all symbols."""
    joined = ",".join(symbols)
    return joined or None


class RatesClient:
    """Blocking Open Exchange Rates client.

    Parameters:
        app_id: Open Exchange Rates App ID.
        base_url: API root, without trailing slash.
        timeout: Per-request timeout in seconds. Timeouts are query failures.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        app_id: str,
        *,
        base_url: str = API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not app_id:
            raise InvalidConfigError(
                "An Open Exchange Rates app id is required (--app-id or [api] app_id)"
            )
        self._app_id = app_id
        self._http = httpx.Client(
            base_url=base_url.rstrip("/") + "/",
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: PriceSettings, app_id: str | None = None) -> RatesClient:
        """Build a client from settings, with an explicit *app_id* taking priority."""
        configured = settings.api.app_id.get_secret_value() if settings.api.app_id else None
        return cls(
            app_id or configured or "",
            base_url=settings.api.base_url,
            timeout=settings.api.timeout,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> RatesClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch(self, query: RateQuery) -> dict[str, Decimal]:
        """Fetch historical rates for ``query.day``.

        Raises:
            FatalFetchError: Credential, plan, or quota problems.
            QueryFailure: Anything isolated to this date, including a
                response that lacks one of the requested symbols.
        """
        path = f"historical/{query.day.isoformat()}.json"
        try:
            payload = self._get_json(path, symbols=query.symbols)
            rates = HistoricalRates.model_validate(payload)
        except _RequestFailed as exc:
            raise QueryFailure(query.day, exc.reason, exc.message) from exc
        except ValidationError as exc:
            msg = f"Malformed rates payload for {query.day.isoformat()}"
            raise QueryFailure(query.day, "malformed_response", msg) from exc

        missing = [symbol for symbol in query.symbols if symbol not in rates.rates]
        if missing:
            msg = f"No rate for {', '.join(missing)} on {query.day.isoformat()}"
            raise QueryFailure(
                query.day,
                "unsupported_commodity",
                msg,
                detail={"missing": missing},
            )
        return {symbol: rates.rates[symbol] for symbol in query.symbols}

    def fetch_latest(self, symbols: Iterable[str]) -> tuple[date, dict[str, Decimal]]:
        """Fetch the most recent rates. Returns ``(publication date, rates)``.

        Any failure is fatal here: there is only one request.
        """
        wanted = tuple(symbols)
        try:
            payload = self._get_json("latest.json", symbols=wanted)
            rates = HistoricalRates.model_validate(payload)
        except _RequestFailed as exc:
            raise FatalFetchError(exc.message, detail={"reason": exc.reason}) from exc
        except ValidationError as exc:
            raise FatalFetchError(
                "Malformed latest rates payload", detail={"reason": "malformed_response"}
            ) from exc

        missing = [symbol for symbol in wanted if symbol not in rates.rates]
        if missing:
            msg = f"No latest rate for {', '.join(missing)}"
            raise FatalFetchError(msg, detail={"reason": "unsupported_commodity"})
        return rates.day, {symbol: rates.rates[symbol] for symbol in wanted}

    def fetch_usage(self) -> Usage:
        """Fetch account usage statistics for the app id."""
        try:
            payload = self._get_json("usage.json")
            return Usage.model_validate(payload)
        except _RequestFailed as exc:
            raise FatalFetchError(exc.message, detail={"reason": exc.reason}) from exc
        except ValidationError as exc:
            raise FatalFetchError(
                "Malformed usage payload", detail={"reason": "malformed_response"}
            ) from exc

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _get_json(self, path: str, *, symbols: Iterable[str] = ()) -> Any:
        params: dict[str, str] = {"app_id": self._app_id, "prettyprint": "false"}
        joined = symbols_param(symbols)
        if joined is not None:
            params["symbols"] = joined

        logger.debug("GET %s symbols=%s", path, joined)
        try:
            response = self._http.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise _RequestFailed("timeout", f"Request for {path} timed out") from exc
        except httpx.TransportError as exc:
            raise _RequestFailed("network", f"Request for {path} failed: {exc}") from exc

        if response.is_error:
            self._raise_for_error(path, response)

        try:
            return json.loads(response.text, parse_float=Decimal)
        except ValueError as exc:
            raise _RequestFailed(
                "malformed_response", f"Response for {path} is not valid JSON"
            ) from exc

    def _raise_for_error(self, path: str, response: httpx.Response) -> None:
        body = _error_body(response)
        description = body.description or body.message or response.reason_phrase
        if response.status_code in FATAL_STATUSES or body.message in FATAL_MESSAGES:
            code = "QUOTA_EXCEEDED" if response.status_code == 429 else None
            status = response.status_code
            msg = f"Open Exchange Rates rejected the request ({status}): {description}"
            raise FatalFetchError(
                msg,
                code=code,
                detail={"status": response.status_code, "message": body.message},
            )
        raise _RequestFailed(
            f"http_{response.status_code}",
            f"Request for {path} failed ({response.status_code}): {description}",
        )


def _error_body(response: httpx.Response) -> ApiErrorBody:
    try:
        return ApiErrorBody.model_validate(response.json())
    except (ValueError, ValidationError):
        return ApiErrorBody(status=response.status_code)
