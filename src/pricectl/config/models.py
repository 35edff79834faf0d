"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pricectl.toml only contains
overrides.  A typical file needs only ``[api] app_id``.
"""

from __future__ import annotations

from pydantic import BaseModel, SecretStr

from pricectl.domain.prices import RoundingMode
from pricectl.infrastructure.client import API_URL


class ApiConfig(BaseModel):
    """[api] section."""

    model_config = {"frozen": True}

    app_id: SecretStr | None = None
    base_url: str = API_URL
    timeout: float = 30.0


class SeriesConfig(BaseModel):
    """[series] section."""

    model_config = {"frozen": True}

    parallel_requests: int = 2
    rounding: int | None = None
    rounding_mode: RoundingMode = "half-even"
    descending: bool = False
    quota_check: bool = True
