"""Calendar date ranges and the day-by-day series generated from them.

A :class:`DateSeries` is restartable: the orchestrator iterates it to
schedule queries and the orderer may iterate it again afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from pricectl.domain.errors import InvalidRangeError

DATE_FORMAT = "%Y-%m-%d"

_ONE_DAY = timedelta(days=1)


def parse_date(text: str) -> date:
    """Parse a ``YYYY-mm-dd`` date, raising InvalidRangeError on bad input."""
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except ValueError as exc:
        msg = f"Unable to parse date {text!r}: expected YYYY-mm-dd"
        raise InvalidRangeError(msg, detail={"value": text}) from exc


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range. INVARIANT: start <= end."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            msg = f"Start date {self.start.isoformat()} is after end date {self.end.isoformat()}"
            raise InvalidRangeError(
                msg,
                detail={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class DateSeries:
    """Dates of a :class:`DateRange`, one per day, generated lazily on iteration."""

    range: DateRange

    def __iter__(self) -> Iterator[date]:
        current = self.range.start
        while current <= self.range.end:
            yield current
            current += _ONE_DAY

    def __len__(self) -> int:
        return self.range.days

    def __contains__(self, item: object) -> bool:
        return isinstance(item, date) and self.range.start <= item <= self.range.end

    @property
    def first(self) -> date:
        return self.range.start

    @property
    def last(self) -> date:
        return self.range.end


def generate_dates(start: date, end: date) -> DateSeries:
    """Return the series of dates from *start* to *end* inclusive.

    Raises:
        InvalidRangeError: If *start* is after *end*.
    """
    return DateSeries(DateRange(start, end))
