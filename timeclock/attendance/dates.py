"""Calendar utilities and the eligible-window range resolver.

Everything here works on naive calendar dates: no timezone conversion
happens anywhere in the attendance pipeline.
"""

from __future__ import annotations

import logging
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Union

from timeclock.common.constants import MONTH_NAMES
from timeclock.common.exceptions import InvalidRangeError, ValidationException

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)

_MONTH_LOOKUP: dict[str, int] = {}
for _number, _name in enumerate(MONTH_NAMES, start=1):
    _MONTH_LOOKUP[_name.lower()] = _number
    _MONTH_LOOKUP[_name[:3].lower()] = _number
_MONTH_LOOKUP["sept"] = 9


# ═════════════════════════════════════════════════════════════════════
# DateRange
# ═════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class DateRange:
    """Inclusive [start, end] span of calendar days.

    A range whose start is after its end is empty; iterating it yields
    nothing and ``len()`` is 0.
    """

    start: date
    end: date

    @classmethod
    def empty(cls, anchor: date) -> DateRange:
        return cls(anchor, anchor - ONE_DAY)

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def __len__(self) -> int:
        return max((self.end - self.start).days + 1, 0)

    def __iter__(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += ONE_DAY

    def __contains__(self, item: object) -> bool:
        if isinstance(item, datetime):
            item = item.date()
        if not isinstance(item, date):
            return False
        return self.start <= item <= self.end

    def clip(self, other: DateRange) -> DateRange:
        """Intersection of two ranges (possibly empty)."""
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start > end:
            return DateRange.empty(start)
        return DateRange(start, end)

    def months(self) -> Iterator[tuple[int, int]]:
        """Yield every (year, month) the range touches, ascending."""
        if self.is_empty:
            return
        year, month = self.start.year, self.start.month
        while (year, month) <= (self.end.year, self.end.month):
            yield year, month
            month += 1
            if month > 12:
                year, month = year + 1, 1


# ═════════════════════════════════════════════════════════════════════
# Calendar helpers
# ═════════════════════════════════════════════════════════════════════


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> DateRange:
    return DateRange(date(year, month, 1), date(year, month, days_in_month(year, month)))


def year_bounds(year: int) -> DateRange:
    return DateRange(date(year, 1, 1), date(year, 12, 31))


def day_name(value: date) -> str:
    """English weekday name, independent of the process locale."""
    return ("Monday", "Tuesday", "Wednesday", "Thursday",
            "Friday", "Saturday", "Sunday")[value.weekday()]


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def parse_month(value: Union[int, str]) -> int:
    """Resolve a month number or English month name to 1..12.

    Raises:
        ValidationException: for an unknown name or an out-of-range number.
    """
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        if text.isascii() and text.isdigit():
            number = int(text)
        else:
            number = _MONTH_LOOKUP.get(text.lower(), 0)

    if not 1 <= number <= 12:
        raise ValidationException({"month": [f"'{value}' is not a valid month."]})
    return number


def parse_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


# ═════════════════════════════════════════════════════════════════════
# Range resolver
# ═════════════════════════════════════════════════════════════════════


def resolve_range(
    join_date: date,
    year: int,
    last_activity: Optional[date] = None,
    end_date: Optional[date] = None,
) -> DateRange:
    """Compute the window of days to evaluate for one member and year.

    * start = max(join_date, Jan 1 of *year*)
    * end   = min(last_activity or Dec 31, Dec 31, end_date)

    Raises:
        InvalidRangeError: when the resolved start falls after the end.
    """
    bounds = year_bounds(year)
    start = max(join_date, bounds.start)
    end = min(last_activity or bounds.end, bounds.end)
    if end_date is not None:
        end = min(end, end_date)

    if start > end:
        raise InvalidRangeError(start, end)
    return DateRange(start, end)


def eligible_window(
    join_date: date,
    year: int,
    last_activity: Optional[date] = None,
    end_date: Optional[date] = None,
) -> DateRange:
    """``resolve_range`` that turns an impossible window into an empty one.

    A member who joined after the requested year (or left before it) is a
    valid state, not an error.
    """
    try:
        return resolve_range(join_date, year, last_activity, end_date)
    except InvalidRangeError as exc:
        logger.debug(
            "Empty attendance window for year %s: %s > %s",
            year, exc.start, exc.end,
        )
        return DateRange.empty(exc.start)
