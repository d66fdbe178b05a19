"""Attendance summary Pydantic v2 schemas — derived, never persisted.

Naming conventions:
  - *Record  → one reconciled calendar day
  - *Summary → aggregate over a month / year
  - *Report  → response envelopes returned by the router
"""


from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from timeclock.members.schemas import MemberBrief


# ═════════════════════════════════════════════════════════════════════
# Daily
# ═════════════════════════════════════════════════════════════════════


class DailyRecord(BaseModel):
    """One calendar day: a projected report, or an absence placeholder."""

    model_config = ConfigDict(frozen=True)

    date: date
    day_name: str
    work_time: int = 0
    in_time: Optional[datetime] = None
    out_time: Optional[datetime] = None
    short_leave_time: int = 0
    total_work_time: int = 0
    status: int = 0
    present: bool = False


# ═════════════════════════════════════════════════════════════════════
# Month / year
# ═════════════════════════════════════════════════════════════════════


class MonthSummary(BaseModel):
    """Totals for one calendar month, clipped to the member's window."""

    year: int
    month: int = Field(..., ge=1, le=12)
    month_name: str
    total_days: int = 0
    total_present_days: int = 0
    leave_days: int = 0
    total_work_complete: int = 0
    total_work_time_sum: int = 0
    average_work_time: float = 0.0
    average_in_time: Optional[str] = None
    average_out_time: Optional[str] = None


class YearSummary(BaseModel):
    """Totals for one year, rolled up from month summaries."""

    year: int
    total_days: int = 0
    total_present_days: int = 0
    total_leave_days: int = 0
    total_work_complete: int = 0
    total_work_time_sum: int = 0
    average_work_time: float = 0.0
    average_in_time: Optional[str] = None
    average_out_time: Optional[str] = None


class MemberYearSummary(BaseModel):
    """One row of the fleet-wide yearly report."""

    member: MemberBrief
    year_summary: YearSummary
    leave_allowance: int = 0
    time_difference: int = 0
    time_difference_days: float = 0.0


# ═════════════════════════════════════════════════════════════════════
# Response envelopes
# ═════════════════════════════════════════════════════════════════════


class MemberMonthReport(BaseModel):
    member: MemberBrief
    month_summary: MonthSummary
    reports: list[DailyRecord]


class MemberYearReport(BaseModel):
    member: MemberBrief
    year_summary: YearSummary
    monthly_summary: list[MonthSummary]
    leave_allowance: int = 0


class FleetYearReport(BaseModel):
    year: int
    members: list[MemberYearSummary]
