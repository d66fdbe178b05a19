"""Average clock-in / clock-out times.

Two modes (``TimeAveragingMode``):

``time_of_day``
    Circular mean of the clock readings on a 24 h dial. 23:00 and 01:00
    average to 00:00, and readings taken on different dates compare by
    their clock time only.

``epoch``
    Arithmetic mean of absolute Unix timestamps, rendered as the clock
    time of the mean instant (UTC). Mixing dates shifts the result: two
    09:00 readings a day apart average to 21:00.

Inputs may be ``datetime``, ``time``, ISO strings or numeric epoch
seconds in any mix; ``None`` entries are skipped.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, time, timezone
from typing import Iterable, Optional, Union

from timeclock.common.constants import (
    CLOCK_TIME_FORMAT,
    SECONDS_PER_DAY,
    TimeAveragingMode,
)

ClockValue = Union[datetime, time, date, str, int, float]

# Resultant vector length below which the readings cancel out and the
# circular mean has no direction.
_RESULTANT_EPSILON = 1e-9


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _parse_text(value: str) -> Union[datetime, time, float]:
    text = value.strip()
    try:
        return float(text)
    except ValueError:
        pass
    if len(text) <= 8 or (":" in text[:3] and "-" not in text):
        if text.find(":") == 1:
            text = "0" + text  # fromisoformat needs a two-digit hour before 3.11
        return time.fromisoformat(text)
    return datetime.fromisoformat(text)


def to_epoch_seconds(value: ClockValue) -> float:
    """Unix seconds for *value*; naive datetimes are read as UTC."""
    if isinstance(value, str):
        value = _parse_text(value)
    if isinstance(value, bool):
        raise TypeError("bool is not a clock value")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.timestamp()
        return calendar.timegm(value.timetuple()) + value.microsecond / 1_000_000
    if isinstance(value, time):
        return float(to_day_seconds(value))
    if isinstance(value, date):
        return float(calendar.timegm(value.timetuple()))
    raise TypeError(f"Unsupported clock value: {value!r}")


def to_day_seconds(value: ClockValue) -> float:
    """Seconds since midnight of the wall-clock reading in *value*."""
    if isinstance(value, str):
        value = _parse_text(value)
    if isinstance(value, bool):
        raise TypeError("bool is not a clock value")
    if isinstance(value, (int, float)):
        return float(value) % SECONDS_PER_DAY
    if isinstance(value, (datetime, time)):
        return (
            value.hour * 3600
            + value.minute * 60
            + value.second
            + value.microsecond / 1_000_000
        )
    if isinstance(value, date):
        return 0.0
    raise TypeError(f"Unsupported clock value: {value!r}")


def format_day_seconds(seconds: int) -> str:
    seconds %= SECONDS_PER_DAY
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def _circular_mean(day_seconds: list[float]) -> float:
    factor = 2 * math.pi / SECONDS_PER_DAY
    sin_sum = math.fsum(math.sin(s * factor) for s in day_seconds)
    cos_sum = math.fsum(math.cos(s * factor) for s in day_seconds)

    if math.hypot(sin_sum, cos_sum) < _RESULTANT_EPSILON * len(day_seconds):
        return math.fsum(day_seconds) / len(day_seconds)

    angle = math.atan2(sin_sum, cos_sum)
    return (angle / factor) % SECONDS_PER_DAY


def average_clock_time(
    times: Iterable[Optional[ClockValue]],
    mode: TimeAveragingMode = TimeAveragingMode.time_of_day,
) -> Optional[str]:
    """Average clock readings to an ``HH:MM:SS`` string, or None when empty."""
    values = [t for t in times if t is not None]
    if not values:
        return None

    if mode == TimeAveragingMode.epoch:
        epochs = [to_epoch_seconds(v) for v in values]
        mean = _round_half_up(math.fsum(epochs) / len(epochs))
        return datetime.fromtimestamp(mean, tz=timezone.utc).strftime(CLOCK_TIME_FORMAT)

    mean = _circular_mean([to_day_seconds(v) for v in values])
    return format_day_seconds(_round_half_up(mean))
