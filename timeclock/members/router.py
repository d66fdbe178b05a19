"""Members router — roster CRUD.

Routes:
    /members        — List, create members
    /members/{id}   — Get, update, delete a member
"""


from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.common.constants import MemberStatus
from timeclock.common.pagination import PaginationParams
from timeclock.database import get_db
from timeclock.members.schemas import MemberCreate, MemberResponse, MemberUpdate
from timeclock.members.service import MemberService

router = APIRouter(prefix="", tags=["members"])


# ── GET /members ────────────────────────────────────────────────────

@router.get("")
async def list_members(
    db: AsyncSession = Depends(get_db),
    pagination: PaginationParams = Depends(),
    status: Optional[MemberStatus] = Query(None, description="Filter by status (0 inactive, 1 active)"),
    search: Optional[str] = Query(None, description="Search by name or email"),
):
    """List members with pagination, search, and status filter."""
    result = await MemberService.list_members(
        db, pagination, status=status, search=search,
    )
    return {
        "data": [
            MemberResponse.model_validate(m).model_dump(mode="json")
            for m in result.data
        ],
        "meta": result.meta.model_dump(),
    }


# ── POST /members ───────────────────────────────────────────────────

@router.post("", response_model=MemberResponse, status_code=201)
async def create_member(
    body: MemberCreate,
    db: AsyncSession = Depends(get_db),
):
    """Add a member to the roster."""
    return await MemberService.create_member(db, body)


# ── GET /members/{id} ───────────────────────────────────────────────

@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await MemberService.get_member(db, member_id)


# ── PUT /members/{id} ───────────────────────────────────────────────

@router.put("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: int,
    body: MemberUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partially update a member."""
    return await MemberService.update_member(db, member_id, body)


# ── DELETE /members/{id} ────────────────────────────────────────────

@router.delete("/{member_id}")
async def delete_member(
    member_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a member and all of their reports."""
    await MemberService.delete_member(db, member_id)
    return {"message": "Member deleted successfully"}
