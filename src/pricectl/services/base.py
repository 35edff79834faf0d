"""BaseService — shared foundation for pricectl services.

Every service receives its rate client at construction time, so the
credential travels with the client instead of living in global state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pricectl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pricectl.domain.errors import PricectlError
    from pricectl.infrastructure.client import RatesClient

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service classes operating against the rates API."""

    def __init__(self, client: RatesClient) -> None:
        self._client = client

    @staticmethod
    def _error(op: str, exc: PricectlError) -> ServiceResult:
        """Convert a pricectl error into a failed ServiceResult."""
        logger.debug("%s failed: %s (%s)", op, exc.message, exc.code)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
        )
