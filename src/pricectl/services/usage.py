"""UsageService — API quota and plan statistics for an app id."""

from __future__ import annotations

from pricectl.domain.errors import PricectlError
from pricectl.services.base import BaseService
from pricectl.services.result import ServiceResult
from pricectl.services.telemetry import traced


class UsageService(BaseService):
    @traced
    def usage(self) -> ServiceResult:
        """Report plan, access status, and request counters."""
        try:
            usage = self._client.fetch_usage()
        except PricectlError as exc:
            return self._error("usage", exc)
        return ServiceResult(
            ok=True,
            op="usage",
            data=usage.data.model_dump(mode="json", by_alias=True),
        )
