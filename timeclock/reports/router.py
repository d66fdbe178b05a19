"""Reports router — daily time-clock rows.

Routes:
    /reports                 — List, bulk-create reports
    /reports/{id}            — Get, update, delete a report
    /members/{id}/reports    — Every report of one member
"""


from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.common.pagination import PaginationParams
from timeclock.database import get_db
from timeclock.reports.schemas import (
    ReportBulkCreate,
    ReportResponse,
    ReportUpdate,
)
from timeclock.reports.service import ReportService

router = APIRouter(prefix="", tags=["reports"])
member_reports_router = APIRouter(prefix="", tags=["reports"])


# ── GET /reports ────────────────────────────────────────────────────

@router.get("")
async def list_reports(
    db: AsyncSession = Depends(get_db),
    pagination: PaginationParams = Depends(),
    member_id: Optional[int] = Query(None, description="Filter by member"),
    date_from: Optional[date] = Query(None, description="Date range start (inclusive)"),
    date_to: Optional[date] = Query(None, description="Date range end (inclusive)"),
):
    """List reports with pagination and member / date filters."""
    result = await ReportService.list_reports(
        db,
        pagination,
        member_id=member_id,
        date_from=date_from,
        date_to=date_to,
    )
    return {
        "data": [
            ReportResponse.model_validate(r).model_dump(mode="json")
            for r in result.data
        ],
        "meta": result.meta.model_dump(),
    }


# ── POST /reports ───────────────────────────────────────────────────

@router.post("", response_model=list[ReportResponse], status_code=201)
async def create_reports(
    body: ReportBulkCreate,
    db: AsyncSession = Depends(get_db),
):
    """Insert one or more reports in a single request."""
    return await ReportService.create_reports(db, body.data)


# ── GET /reports/{id} ───────────────────────────────────────────────

@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await ReportService.get_report(db, report_id)


# ── PUT /reports/{id} ───────────────────────────────────────────────

@router.put("/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: int,
    body: ReportUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partially update a report."""
    return await ReportService.update_report(db, report_id, body)


# ── DELETE /reports/{id} ────────────────────────────────────────────

@router.delete("/{report_id}")
async def delete_report(
    report_id: int,
    db: AsyncSession = Depends(get_db),
):
    await ReportService.delete_report(db, report_id)
    return {"message": "Report deleted successfully"}


# ── GET /members/{id}/reports ───────────────────────────────────────

@member_reports_router.get("/{member_id}/reports", response_model=list[ReportResponse])
async def list_member_reports(
    member_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Every report of a member, oldest first."""
    return await ReportService.list_member_reports(db, member_id)
