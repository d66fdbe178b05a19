"""Read-side data access for attendance summaries.

The summary pipeline only reads. Every query a computation needs runs
before aggregation starts, so the pure functions in ``aggregate`` see one
consistent snapshot.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional, Protocol, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.common.constants import MemberStatus
from timeclock.members.models import Member
from timeclock.reports.models import Report


class AttendanceRepository(Protocol):
    async def find_member(self, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    async def list_active_members(self) -> Sequence[Member]:
        raise NotImplementedError

    async def find_reports_by_member_and_range(
        self, member_id: int, start: date, end: date,
    ) -> Sequence[Report]:
        raise NotImplementedError

    async def find_latest_report_date(self, member_id: int, year: int) -> Optional[date]:
        raise NotImplementedError

    async def find_reports_for_members(
        self, member_ids: Sequence[int], start: date, end: date,
    ) -> dict[int, list[Report]]:
        """Reports of many members in one query, grouped by member id."""

        raise NotImplementedError


class SqlAttendanceRepository:
    """``AttendanceRepository`` backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_member(self, member_id: int) -> Optional[Member]:
        return await self.db.get(Member, member_id)

    async def list_active_members(self) -> Sequence[Member]:
        result = await self.db.execute(
            select(Member)
            .where(Member.status == MemberStatus.active)
            .order_by(Member.id)
        )
        return result.scalars().all()

    async def find_reports_by_member_and_range(
        self, member_id: int, start: date, end: date,
    ) -> Sequence[Report]:
        result = await self.db.execute(
            select(Report)
            .where(
                Report.member_id == member_id,
                Report.date >= start,
                Report.date <= end,
            )
            .order_by(Report.date)
        )
        return result.scalars().all()

    async def find_latest_report_date(self, member_id: int, year: int) -> Optional[date]:
        result = await self.db.execute(
            select(func.max(Report.date)).where(
                Report.member_id == member_id,
                Report.date >= date(year, 1, 1),
                Report.date <= date(year, 12, 31),
            )
        )
        return result.scalar_one_or_none()

    async def find_reports_for_members(
        self, member_ids: Sequence[int], start: date, end: date,
    ) -> dict[int, list[Report]]:
        grouped: dict[int, list[Report]] = defaultdict(list)
        if not member_ids:
            return {}

        result = await self.db.execute(
            select(Report)
            .where(
                Report.member_id.in_(member_ids),
                Report.date >= start,
                Report.date <= end,
            )
            .order_by(Report.member_id, Report.date)
        )
        for report in result.scalars().all():
            grouped[report.member_id].append(report)
        return dict(grouped)
