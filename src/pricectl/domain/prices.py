"""PriceLine records and decimal rounding.

Rounding defaults to banker's rounding (round half to even), matching the
decimal library used by ledger tooling.  ``half-up`` is available for
users who prefer commercial rounding.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from typing import Literal

from pricectl.domain.errors import InvalidConfigError

RoundingMode = Literal["half-even", "half-up"]

MAX_PRECISION = 12

_ROUNDING: dict[str, str] = {
    "half-even": ROUND_HALF_EVEN,
    "half-up": ROUND_HALF_UP,
}


def validate_rounding(precision: int | None, mode: str = "half-even") -> None:
    """Reject precisions outside ``0..MAX_PRECISION`` and unknown rounding modes."""
    if precision is not None and not 0 <= precision <= MAX_PRECISION:
        msg = f"Rounding precision must be between 0 and {MAX_PRECISION}, got {precision}"
        raise InvalidConfigError(msg, detail={"rounding": precision})
    if mode not in _ROUNDING:
        msg = f"Unknown rounding mode {mode!r}; expected one of {', '.join(_ROUNDING)}"
        raise InvalidConfigError(msg, detail={"rounding_mode": mode})


def round_rate(
    value: Decimal,
    precision: int | None,
    mode: RoundingMode = "half-even",
) -> Decimal:
    """Round *value* to *precision* decimal places (None leaves it untouched).

    Examples:
        >>> round_rate(Decimal("0.95832"), 4)
        Decimal('0.9583')
        >>> round_rate(Decimal("0.95832"), 0)
        Decimal('1')
    """
    validate_rounding(precision, mode)
    if precision is None:
        return value
    return value.quantize(Decimal(1).scaleb(-precision), rounding=_ROUNDING[mode])


def render_decimal(value: Decimal) -> str:
    """Fixed-point rendering, never scientific notation."""
    return format(value, "f")


@dataclass(frozen=True)
class PriceLine:
    """On *day*, one unit of *commodity* is worth *rate* units of *base*."""

    day: date
    commodity: str
    rate: Decimal
    base: str

    def to_dict(self) -> dict[str, str]:
        return {
            "date": self.day.isoformat(),
            "commodity": self.commodity,
            "rate": render_decimal(self.rate),
            "base": self.base,
        }


def format_price_line(line: PriceLine) -> str:
    """Render a ledger price directive: ``<date> price <commodity> <rate> <base>``."""
    return f"{line.day.isoformat()} price {line.commodity} {render_decimal(line.rate)} {line.base}"
