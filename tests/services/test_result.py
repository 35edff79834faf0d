"""Tests for ServiceResult and ServiceError."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pricectl.domain.errors import InvalidRangeError
from pricectl.services.base import BaseService
from pricectl.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_defaults(self) -> None:
        result = ServiceResult(ok=True, op="series")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="series")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(
            ok=False,
            op="latest",
            error=ServiceError(code="FATAL_FETCH", message="nope", detail={"status": 401}),
        )
        assert ServiceResult.model_validate_json(result.model_dump_json()) == result


def test_error_conversion() -> None:
    exc = InvalidRangeError("bad range", detail={"start": "2020-01-02"})
    result = BaseService._error("series", exc)
    assert not result.ok
    assert result.op == "series"
    assert result.error == ServiceError(
        code="INVALID_RANGE", message="bad range", detail={"start": "2020-01-02"}
    )
