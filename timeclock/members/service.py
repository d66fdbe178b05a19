"""Member service layer — async CRUD for the roster.

Uses:
  - ``paginate()`` from timeclock.common.pagination
  - ``NotFoundException / ConflictError / ValidationException`` from
    timeclock.common.exceptions
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.common.exceptions import (
    ConflictError,
    NotFoundException,
    ValidationException,
)
from timeclock.common.pagination import PaginatedResponse, PaginationParams, paginate
from timeclock.config import settings
from timeclock.members.models import Member
from timeclock.members.schemas import MemberCreate, MemberUpdate

logger = logging.getLogger(__name__)


class MemberService:
    """Async CRUD operations for members."""

    # ── List (paginated, searchable, filterable) ────────────────────

    @staticmethod
    async def list_members(
        db: AsyncSession,
        pagination: PaginationParams,
        *,
        status: Optional[int] = None,
        search: Optional[str] = None,
    ) -> PaginatedResponse:
        """Return a paginated member list ordered by id."""

        query = select(Member).order_by(Member.id)
        if status is not None:
            query = query.where(Member.status == status)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(Member.name.ilike(pattern), Member.email.ilike(pattern))
            )

        return await paginate(db, query, pagination, model=Member)

    # ── Get single ──────────────────────────────────────────────────

    @staticmethod
    async def get_member(db: AsyncSession, member_id: int) -> Member:
        member = await db.get(Member, member_id)
        if member is None:
            raise NotFoundException("Member", member_id)
        return member

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_member(db: AsyncSession, data: MemberCreate) -> Member:
        """Create a new member; work time falls back to the configured default."""

        values = data.model_dump()
        if values["work_time"] is None:
            values["work_time"] = settings.DEFAULT_WORK_TIME

        member = Member(**values)
        db.add(member)
        try:
            await db.flush()
        except IntegrityError as exc:
            await db.rollback()
            if "email" in str(exc.orig):
                raise ConflictError("email", data.email)
            raise

        logger.info("Created member %s (%s)", member.id, member.email)
        return member

    # ── Update ──────────────────────────────────────────────────────

    @staticmethod
    async def update_member(
        db: AsyncSession,
        member_id: int,
        data: MemberUpdate,
    ) -> Member:
        """Apply a partial update; only fields present in the payload change."""

        member = await MemberService.get_member(db, member_id)
        changes = data.model_dump(exclude_unset=True)

        join_date = changes.get("join_date", member.join_date)
        end_date = changes.get("end_date", member.end_date)
        if end_date is not None and end_date < join_date:
            raise ValidationException(
                {"end_date": ["end_date must be on or after join_date."]}
            )

        for field, value in changes.items():
            setattr(member, field, value)

        try:
            await db.flush()
        except IntegrityError as exc:
            await db.rollback()
            if "email" in str(exc.orig):
                raise ConflictError("email", changes.get("email"))
            raise

        await db.refresh(member)
        return member

    # ── Delete ──────────────────────────────────────────────────────

    @staticmethod
    async def delete_member(db: AsyncSession, member_id: int) -> None:
        """Delete a member together with all of their reports."""

        member = await MemberService.get_member(db, member_id)
        await db.delete(member)
        await db.flush()
        logger.info("Deleted member %s", member_id)
