import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Protocol, TypeVar
from zoneinfo import ZoneInfo

from errors import FormatError

DATE_INPUT_PATTERN = re.compile(
    r"^(0?[1-9]|1[012])/(0?[1-9]|[12][0-9]|3[01])/((?:19|20)\d\d)$"
)


class HasDMY(Protocol):
    year: int
    month: int
    day: int


DayT = TypeVar("DayT", bound=HasDMY)


@dataclass(frozen=True)
class DMY:
    """A calendar date as discrete integers; ``month_idx`` is zero-based."""

    year: int
    month_idx: int
    day: int

    @classmethod
    def from_date(cls, value: date) -> "DMY":
        return cls(year=value.year, month_idx=value.month - 1, day=value.day)

    @classmethod
    def parse(cls, value: str) -> "DMY":
        """Parse ``MM/DD/YYYY`` (leading zeros optional)."""
        match = DATE_INPUT_PATTERN.match(value.strip())
        if not match:
            raise FormatError(f"Invalid date: {value!r}")
        month, day, year = match.groups()
        return cls(year=int(year), month_idx=int(month) - 1, day=int(day))

    @property
    def display(self) -> str:
        return f"{self.month_idx + 1}-{self.day}-{self.year}"


@dataclass(frozen=True)
class YearSpan:
    from_year: int
    to_year: int

    def contains(self, other: "YearSpan") -> bool:
        return self.from_year <= other.from_year and other.to_year <= self.to_year


@dataclass(frozen=True)
class DateRange:
    start: DMY
    end: DMY

    @classmethod
    def from_dates(cls, start: date, end: date) -> "DateRange":
        return cls(DMY.from_date(start), DMY.from_date(end))

    @property
    def years(self) -> YearSpan:
        return YearSpan(self.start.year, self.end.year)


def current_year(timezone: str, *, now: Optional[datetime] = None) -> int:
    now = now or datetime.now(ZoneInfo(timezone))
    return now.year


def default_span(this_year: int) -> YearSpan:
    return YearSpan(this_year - 1, this_year)


def in_range(d: HasDMY, start: DMY, end: DMY) -> bool:
    if d.year < start.year or d.year > end.year:
        return False
    if start.year < d.year < end.year:
        return True

    after_start = True
    if d.year == start.year:
        after_start = d.month > start.month_idx or (
            d.month == start.month_idx and d.day >= start.day
        )
    before_end = True
    if d.year == end.year:
        before_end = d.month < end.month_idx or (
            d.month == end.month_idx and d.day <= end.day
        )
    return after_start and before_end


def filter_by_range(days: Iterable[DayT], start: DMY, end: DMY) -> list[DayT]:
    return [d for d in days if in_range(d, start, end)]


def sort_days_desc(days: Iterable[DayT]) -> list[DayT]:
    return sorted(days, key=lambda d: (d.year, d.month, d.day), reverse=True)
