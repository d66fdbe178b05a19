"""Attendance router — monthly, yearly and fleet-wide summaries.

Routes:
    /members/{id}/reports/{year}/{month}   — Day-by-day month report
    /members/{id}/reports/{year}           — Year roll-up with monthly breakdown
    /all-reports?year=YYYY                 — Every active member for one year
"""


from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.attendance.schemas import (
    FleetYearReport,
    MemberMonthReport,
    MemberYearReport,
)
from timeclock.attendance.service import AttendanceReportService
from timeclock.common.rate_limit import limiter
from timeclock.database import get_db

router = APIRouter(prefix="", tags=["attendance"])


# ── GET /members/{id}/reports/{year}/{month} ───────────────────────

@router.get(
    "/members/{member_id}/reports/{year}/{month}",
    response_model=MemberMonthReport,
)
async def member_month_report(
    member_id: int,
    year: int = Path(..., ge=1900, le=9999),
    month: str = Path(..., description="Month number (1-12) or English name"),
    db: AsyncSession = Depends(get_db),
):
    """Reconciled days and totals for one member and month."""
    return await AttendanceReportService.get_member_month(db, member_id, year, month)


# ── GET /members/{id}/reports/{year} ───────────────────────────────

@router.get(
    "/members/{member_id}/reports/{year}",
    response_model=MemberYearReport,
)
async def member_year_report(
    member_id: int,
    year: int = Path(..., ge=1900, le=9999),
    db: AsyncSession = Depends(get_db),
):
    """Year summary plus one entry per month of the member's window."""
    return await AttendanceReportService.get_member_year(db, member_id, year)


# ── GET /all-reports ───────────────────────────────────────────────

@router.get("/all-reports", response_model=FleetYearReport)
@limiter.limit("10/minute")
async def all_reports(
    request: Request,
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Defaults to the current year"),
    db: AsyncSession = Depends(get_db),
):
    """Yearly summaries for every active member."""
    return await AttendanceReportService.get_fleet_year(db, year or date.today().year)
