"""Member ORM model.

SQLAlchemy 2.0 async-compatible model with Mapped[] annotations.
Column names match the schema defined in 001_initial_schema.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeclock.common.constants import MemberStatus
from timeclock.database import Base

if TYPE_CHECKING:
    from timeclock.reports.models import Report


class Member(Base):
    """A person on the roster whose attendance is tracked."""

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    email: Mapped[str] = mapped_column(sa.String(255), unique=True, nullable=False)
    avatar: Mapped[Optional[str]] = mapped_column(sa.Text)
    join_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    work_time: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    leave: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    status: Mapped[int] = mapped_column(
        sa.SmallInteger, nullable=False, default=MemberStatus.active,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships ───────────────────────────────────────────────
    reports: Mapped[list[Report]] = relationship(
        back_populates="member",
        cascade="all, delete-orphan",
    )

    @property
    def effective_work_time(self) -> int:
        """Daily work time usable as a divisor (never below 1)."""
        return self.work_time if self.work_time and self.work_time >= 1 else 1

    def __repr__(self) -> str:
        return f"<Member {self.id} {self.name!r}>"
