"""Report ORM model — one time-clock row per member per calendar date."""

from __future__ import annotations

import datetime as dt
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeclock.common.constants import ReportStatus
from timeclock.database import Base

if TYPE_CHECKING:
    from timeclock.members.models import Member


class Report(Base):
    __tablename__ = "reports"
    __table_args__ = (
        sa.UniqueConstraint("member_id", "date", name="uq_report_member_date"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # dt.date: the attribute named "date" would shadow the type in annotations
    date: Mapped[dt.date] = mapped_column(sa.Date, nullable=False)
    work_time: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    # Naive wall-clock timestamps; no timezone conversion is applied.
    in_time: Mapped[datetime] = mapped_column(sa.DateTime, nullable=False)
    out_time: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)
    short_leave_time: Mapped[Optional[int]] = mapped_column(sa.Integer, default=0)
    total_work_time: Mapped[Optional[int]] = mapped_column(sa.Integer)
    status: Mapped[int] = mapped_column(
        sa.SmallInteger, nullable=False, default=ReportStatus.present,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    member: Mapped[Member] = relationship(back_populates="reports")

    def __repr__(self) -> str:
        return f"<Report member={self.member_id} {self.date.isoformat()}>"
