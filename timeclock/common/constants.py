"""Enums and constants for the timeclock API."""

from __future__ import annotations

import enum


# ── Members ─────────────────────────────────────────────────────────

class MemberStatus(enum.IntEnum):
    inactive = 0
    active = 1


# ── Reports ─────────────────────────────────────────────────────────

class ReportStatus(enum.IntEnum):
    absent = 0
    present = 1


# ── Attendance summaries ────────────────────────────────────────────

class TimeAveragingMode(str, enum.Enum):
    # circular mean of the clock reading, wraps at midnight
    time_of_day = "time_of_day"
    # mean of absolute epoch seconds, collapsed to its clock reading
    epoch = "epoch"


MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# ── Misc constants ──────────────────────────────────────────────────

CLOCK_TIME_FORMAT = "%H:%M:%S"
SECONDS_PER_DAY = 24 * 60 * 60
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50
