"""Report service layer — async CRUD for daily time-clock rows.

Business rules:
  - Bulk create inserts every row or none (one flush per request)
  - At most one report per member per date (409 on violation)
  - Every report must reference an existing member (422 otherwise)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.common.exceptions import (
    ConflictError,
    NotFoundException,
    ValidationException,
)
from timeclock.common.pagination import PaginatedResponse, PaginationParams, paginate
from timeclock.members.models import Member
from timeclock.reports.models import Report
from timeclock.reports.schemas import ReportCreate, ReportUpdate

logger = logging.getLogger(__name__)


class ReportService:
    """Async CRUD operations for reports."""

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    async def _ensure_members_exist(db: AsyncSession, member_ids: set[int]) -> None:
        result = await db.execute(select(Member.id).where(Member.id.in_(member_ids)))
        missing = member_ids - set(result.scalars().all())
        if missing:
            raise ValidationException(
                {"member_id": [f"Member {m} does not exist." for m in sorted(missing)]}
            )

    @staticmethod
    def _check_duplicate_dates(rows: Sequence[ReportCreate]) -> None:
        seen: set[tuple[int, date]] = set()
        for row in rows:
            key = (row.member_id, row.date)
            if key in seen:
                raise ConflictError("member_id/date", f"{row.member_id}/{row.date.isoformat()}")
            seen.add(key)

    # ── List ────────────────────────────────────────────────────────

    @staticmethod
    async def list_reports(
        db: AsyncSession,
        pagination: PaginationParams,
        *,
        member_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> PaginatedResponse:
        """Return a paginated report list, newest date first."""

        query = select(Report).order_by(Report.date.desc(), Report.id)
        if member_id is not None:
            query = query.where(Report.member_id == member_id)
        if date_from is not None:
            query = query.where(Report.date >= date_from)
        if date_to is not None:
            query = query.where(Report.date <= date_to)

        return await paginate(db, query, pagination, model=Report)

    @staticmethod
    async def list_member_reports(db: AsyncSession, member_id: int) -> list[Report]:
        """All reports of one member by date; 404 when there are none."""

        result = await db.execute(
            select(Report)
            .where(Report.member_id == member_id)
            .order_by(Report.date)
        )
        reports = list(result.scalars().all())
        if not reports:
            raise NotFoundException(
                "Report", member_id,
                detail="No reports found for this member.",
            )
        return reports

    # ── Get single ──────────────────────────────────────────────────

    @staticmethod
    async def get_report(db: AsyncSession, report_id: int) -> Report:
        report = await db.get(Report, report_id)
        if report is None:
            raise NotFoundException("Report", report_id)
        return report

    # ── Create (bulk) ───────────────────────────────────────────────

    @staticmethod
    async def create_reports(
        db: AsyncSession,
        rows: Sequence[ReportCreate],
    ) -> list[Report]:
        """Insert a batch of reports in one flush."""

        ReportService._check_duplicate_dates(rows)
        await ReportService._ensure_members_exist(db, {r.member_id for r in rows})

        reports = [Report(**row.model_dump()) for row in rows]
        db.add_all(reports)
        try:
            await db.flush()
        except IntegrityError as exc:
            await db.rollback()
            if "uq_report_member_date" in str(exc.orig) or "UNIQUE" in str(exc.orig):
                raise ConflictError("member_id/date", "existing report")
            raise

        logger.info("Created %d report(s)", len(reports))
        return reports

    # ── Update ──────────────────────────────────────────────────────

    @staticmethod
    async def update_report(
        db: AsyncSession,
        report_id: int,
        data: ReportUpdate,
    ) -> Report:
        report = await ReportService.get_report(db, report_id)
        changes = data.model_dump(exclude_unset=True)

        if "member_id" in changes:
            await ReportService._ensure_members_exist(db, {changes["member_id"]})

        in_time = changes.get("in_time", report.in_time)
        out_time = changes.get("out_time", report.out_time)
        if in_time is not None and out_time is not None and out_time < in_time:
            raise ValidationException(
                {"out_time": ["out_time must not be before in_time."]}
            )

        for field, value in changes.items():
            setattr(report, field, value)
        key = f"{report.member_id}/{report.date.isoformat()}"

        try:
            await db.flush()
        except IntegrityError as exc:
            await db.rollback()
            if "uq_report_member_date" in str(exc.orig) or "UNIQUE" in str(exc.orig):
                raise ConflictError("member_id/date", key) from exc
            raise

        await db.refresh(report)
        return report

    # ── Delete ──────────────────────────────────────────────────────

    @staticmethod
    async def delete_report(db: AsyncSession, report_id: int) -> None:
        report = await ReportService.get_report(db, report_id)
        await db.delete(report)
        await db.flush()
        logger.info("Deleted report %s", report_id)
