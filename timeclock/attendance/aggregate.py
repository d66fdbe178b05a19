"""Monthly and yearly attendance aggregation.

All functions are pure: they take reconciled ``DailyRecord`` lists (or raw
reports plus a member) and return summary schemas. Division hazards are
guarded with defaults instead of exceptions: zero present days gives an
average of 0, and a zero daily work time is treated as 1.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from timeclock.attendance.dates import (
    DateRange,
    eligible_window,
    month_bounds,
    month_name,
    parse_date,
    year_bounds,
)
from timeclock.attendance.reconcile import reconcile_window
from timeclock.attendance.schemas import (
    DailyRecord,
    MemberYearSummary,
    MonthSummary,
    YearSummary,
)
from timeclock.attendance.timeavg import average_clock_time
from timeclock.common.constants import MemberStatus, TimeAveragingMode
from timeclock.members.schemas import MemberBrief

if TYPE_CHECKING:
    from timeclock.members.models import Member
    from timeclock.reports.models import Report

logger = logging.getLogger(__name__)


def _average(total: int, count: int) -> float:
    return round(total / count, 2) if count else 0.0


# ═════════════════════════════════════════════════════════════════════
# Month
# ═════════════════════════════════════════════════════════════════════


def aggregate_month(
    records: Sequence[DailyRecord],
    year: int,
    month: int,
    window: Optional[DateRange] = None,
    mode: TimeAveragingMode = TimeAveragingMode.time_of_day,
) -> MonthSummary:
    """Summarize one calendar month of reconciled days.

    ``total_days`` is the month clipped to *window*, so a member joining
    or leaving mid-month is not charged leave for days outside it.
    ``total_present_days + leave_days == total_days`` always holds.
    """
    span = month_bounds(year, month)
    if window is not None:
        span = span.clip(window)

    present = [r for r in records if r.present and r.date in span]
    total_days = len(span)
    present_days = len(present)
    work_complete = sum(r.total_work_time for r in present)

    return MonthSummary(
        year=year,
        month=month,
        month_name=month_name(month),
        total_days=total_days,
        total_present_days=present_days,
        leave_days=max(total_days - present_days, 0),
        total_work_complete=work_complete,
        total_work_time_sum=sum(r.work_time for r in present),
        average_work_time=_average(work_complete, present_days),
        average_in_time=average_clock_time((r.in_time for r in present), mode),
        average_out_time=average_clock_time((r.out_time for r in present), mode),
    )


# ═════════════════════════════════════════════════════════════════════
# Year
# ═════════════════════════════════════════════════════════════════════


def aggregate_year(
    year: int,
    month_summaries: Sequence[MonthSummary],
    records: Optional[Sequence[DailyRecord]] = None,
    mode: TimeAveragingMode = TimeAveragingMode.time_of_day,
) -> YearSummary:
    """Roll month summaries up into a year.

    The average work time is recomputed from the totals rather than taken
    as the mean of monthly averages, so sparse months are not overweighted.
    Clock-time averages cannot be combined this way: they come from the
    present *records* when given and are left unset otherwise.
    """
    present = [r for r in records or () if r.present]
    present_days = sum(m.total_present_days for m in month_summaries)
    work_complete = sum(m.total_work_complete for m in month_summaries)

    return YearSummary(
        year=year,
        total_days=sum(m.total_days for m in month_summaries),
        total_present_days=present_days,
        total_leave_days=sum(m.leave_days for m in month_summaries),
        total_work_complete=work_complete,
        total_work_time_sum=sum(m.total_work_time_sum for m in month_summaries),
        average_work_time=_average(work_complete, present_days),
        average_in_time=average_clock_time((r.in_time for r in present), mode),
        average_out_time=average_clock_time((r.out_time for r in present), mode),
    )


def aggregate_flat_year(
    records: Sequence[DailyRecord],
    year: int,
    window: DateRange,
    mode: TimeAveragingMode = TimeAveragingMode.time_of_day,
) -> YearSummary:
    """Summarize a full year of reconciled days in one pass."""
    span = year_bounds(year).clip(window)
    present = [r for r in records if r.present and r.date in span]
    total_days = len(span)
    present_days = len(present)
    work_complete = sum(r.total_work_time for r in present)

    return YearSummary(
        year=year,
        total_days=total_days,
        total_present_days=present_days,
        total_leave_days=max(total_days - present_days, 0),
        total_work_complete=work_complete,
        total_work_time_sum=sum(r.work_time for r in present),
        average_work_time=_average(work_complete, present_days),
        average_in_time=average_clock_time((r.in_time for r in present), mode),
        average_out_time=average_clock_time((r.out_time for r in present), mode),
    )


def summarize_year(
    records: Sequence[DailyRecord],
    year: int,
    window: DateRange,
    mode: TimeAveragingMode = TimeAveragingMode.time_of_day,
) -> tuple[YearSummary, list[MonthSummary]]:
    """Month-by-month breakdown plus the year roll-up for one window."""
    months = [
        aggregate_month(records, y, m, window, mode)
        for y, m in window.months()
    ]
    in_window = [r for r in records if r.date in window]
    return aggregate_year(year, months, in_window, mode), months


# ═════════════════════════════════════════════════════════════════════
# Per member / fleet
# ═════════════════════════════════════════════════════════════════════


def last_activity_date(reports: Sequence[Report], year: int) -> Optional[date]:
    dates = [parse_date(r.date) for r in reports]
    dates = [d for d in dates if d.year == year]
    return max(dates) if dates else None


def member_window(
    member: Member,
    year: int,
    last_activity: Optional[date] = None,
) -> DateRange:
    return eligible_window(member.join_date, year, last_activity, member.end_date)


def build_member_year(
    member: Member,
    reports: Sequence[Report],
    year: int,
    mode: TimeAveragingMode = TimeAveragingMode.time_of_day,
) -> MemberYearSummary:
    """Full per-member pipeline: window → reconcile → year summary.

    The window stops at the member's last report of the year; a member
    without reports is evaluated up to Dec 31 (or their end date).
    """
    window = member_window(member, year, last_activity_date(reports, year))
    records = reconcile_window(reports, window)
    summary = aggregate_flat_year(records, year, window, mode)

    difference = summary.total_work_complete - summary.total_work_time_sum
    return MemberYearSummary(
        member=MemberBrief.model_validate(member),
        year_summary=summary,
        leave_allowance=member.leave or 0,
        time_difference=difference,
        time_difference_days=round(difference / member.effective_work_time, 2),
    )


def aggregate_fleet(
    members: Sequence[Member],
    reports_by_member: Mapping[int, Sequence[Report]],
    year: int,
    mode: TimeAveragingMode = TimeAveragingMode.time_of_day,
    max_workers: int = 1,
) -> list[MemberYearSummary]:
    """Yearly summaries for every active member, in input order.

    Each member is computed independently, so the work is scattered over a
    thread pool and gathered back with ``Executor.map``, which preserves
    the input order.
    """
    active = [m for m in members if m.status == MemberStatus.active]

    def _one(member: Member) -> MemberYearSummary:
        return build_member_year(member, reports_by_member.get(member.id, ()), year, mode)

    if max_workers <= 1 or len(active) <= 1:
        return [_one(m) for m in active]

    logger.debug("Fleet report for %s: %d members on %d workers",
                 year, len(active), max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(_one, active))
