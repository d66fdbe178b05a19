"""Attendance summary service — monthly, yearly and fleet-wide reports.

Each method loads what it needs through ``SqlAttendanceRepository`` first,
then hands the snapshot to the pure pipeline:

    eligible window → reconcile → aggregate
"""

from __future__ import annotations

import logging
from typing import Union

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from timeclock.attendance.aggregate import (
    aggregate_fleet,
    aggregate_month,
    member_window,
    summarize_year,
)
from timeclock.attendance.dates import month_bounds, parse_month, year_bounds
from timeclock.attendance.reconcile import reconcile_window
from timeclock.attendance.repository import AttendanceRepository, SqlAttendanceRepository
from timeclock.attendance.schemas import (
    FleetYearReport,
    MemberMonthReport,
    MemberYearReport,
)
from timeclock.common.exceptions import NotFoundException
from timeclock.config import settings
from timeclock.members.models import Member
from timeclock.members.schemas import MemberBrief

logger = logging.getLogger(__name__)


class AttendanceReportService:
    """Read-only attendance summaries built from members and reports."""

    @staticmethod
    async def _require_member(repo: AttendanceRepository, member_id: int) -> Member:
        member = await repo.find_member(member_id)
        if member is None:
            raise NotFoundException("Member", member_id)
        return member

    # ── Month ───────────────────────────────────────────────────────

    @staticmethod
    async def get_member_month(
        db: AsyncSession,
        member_id: int,
        year: int,
        month: Union[int, str],
    ) -> MemberMonthReport:
        """Day-by-day report of one member for one month.

        The window is bounded by the join date and end date only; days
        after the last report still count as leave.
        """
        month_number = parse_month(month)
        repo = SqlAttendanceRepository(db)
        member = await AttendanceReportService._require_member(repo, member_id)

        window = member_window(member, year).clip(month_bounds(year, month_number))
        reports = []
        if not window.is_empty:
            reports = await repo.find_reports_by_member_and_range(
                member.id, window.start, window.end,
            )

        records = reconcile_window(reports, window)
        summary = aggregate_month(
            records, year, month_number, window, settings.TIME_AVERAGING_MODE,
        )
        logger.debug(
            "Month report member=%s %s-%02d: %d/%d present",
            member.id, year, month_number,
            summary.total_present_days, summary.total_days,
        )
        return MemberMonthReport(
            member=MemberBrief.model_validate(member),
            month_summary=summary,
            reports=records,
        )

    # ── Year ────────────────────────────────────────────────────────

    @staticmethod
    async def get_member_year(
        db: AsyncSession,
        member_id: int,
        year: int,
    ) -> MemberYearReport:
        """Yearly roll-up with a per-month breakdown.

        The window stops at the member's last report of the year.

        Raises:
            NotFoundException: unknown member, or no reports in *year*.
        """
        repo = SqlAttendanceRepository(db)
        member = await AttendanceReportService._require_member(repo, member_id)

        last_activity = await repo.find_latest_report_date(member.id, year)
        if last_activity is None:
            raise NotFoundException(
                "Report", member_id,
                detail=f"No reports found for member {member_id} in {year}.",
            )

        window = member_window(member, year, last_activity)
        reports = []
        if not window.is_empty:
            reports = await repo.find_reports_by_member_and_range(
                member.id, window.start, window.end,
            )

        records = reconcile_window(reports, window)
        summary, months = summarize_year(
            records, year, window, settings.TIME_AVERAGING_MODE,
        )
        return MemberYearReport(
            member=MemberBrief.model_validate(member),
            year_summary=summary,
            monthly_summary=months,
            leave_allowance=member.leave or 0,
        )

    # ── Fleet ───────────────────────────────────────────────────────

    @staticmethod
    async def get_fleet_year(db: AsyncSession, year: int) -> FleetYearReport:
        """Yearly summary of every active member, ordered by member id."""
        repo = SqlAttendanceRepository(db)
        members = list(await repo.list_active_members())
        if not members:
            return FleetYearReport(year=year, members=[])

        bounds = year_bounds(year)
        reports_by_member = await repo.find_reports_for_members(
            [m.id for m in members], bounds.start, bounds.end,
        )

        # Aggregation is CPU-bound and touches no session state
        summaries = await run_in_threadpool(
            aggregate_fleet,
            members,
            reports_by_member,
            year,
            settings.TIME_AVERAGING_MODE,
            settings.FLEET_MAX_WORKERS,
        )
        logger.info("Fleet report for %s: %d members", year, len(summaries))
        return FleetYearReport(year=year, members=summaries)
