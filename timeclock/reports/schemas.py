"""Report Pydantic v2 schemas — request / response validation."""


import datetime as dt
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from timeclock.common.constants import ReportStatus

# Columns that reject NULL; a partial update may omit them but not null them
_NOT_NULL_FIELDS = ("member_id", "date", "work_time", "in_time", "status")


def _strip_tzinfo(value: Optional[datetime]) -> Optional[datetime]:
    """Keep the wall-clock reading; reports store naive timestamps."""
    if value is not None and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


# ═════════════════════════════════════════════════════════════════════
# Write schemas
# ═════════════════════════════════════════════════════════════════════


class ReportCreate(BaseModel):
    """One day's time-clock entry."""

    member_id: int
    date: date
    work_time: int = Field(..., ge=0, description="Planned minutes for the day")
    in_time: datetime
    out_time: Optional[datetime] = None
    short_leave_time: Optional[int] = Field(None, ge=0)
    total_work_time: Optional[int] = Field(None, ge=0)
    status: ReportStatus = ReportStatus.present

    _naive_times = field_validator("in_time", "out_time")(_strip_tzinfo)

    @model_validator(mode="after")
    def _out_after_in(self) -> "ReportCreate":
        if self.out_time is not None and self.out_time < self.in_time:
            raise ValueError("out_time must not be before in_time")
        return self


class ReportBulkCreate(BaseModel):
    """Bulk insert payload: ``{"data": [...]}``."""

    data: list[ReportCreate] = Field(..., min_length=1)


class ReportUpdate(BaseModel):
    """Partial-update payload for a report (all fields optional)."""

    member_id: Optional[int] = None
    # dt.date: a field named "date" with a default shadows the type name
    date: Optional[dt.date] = None
    work_time: Optional[int] = Field(None, ge=0)
    in_time: Optional[datetime] = None
    out_time: Optional[datetime] = None
    short_leave_time: Optional[int] = Field(None, ge=0)
    total_work_time: Optional[int] = Field(None, ge=0)
    status: Optional[ReportStatus] = None

    _naive_times = field_validator("in_time", "out_time")(_strip_tzinfo)

    @model_validator(mode="after")
    def _required_not_null(self) -> "ReportUpdate":
        nulls = [
            name for name in _NOT_NULL_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self


# ═════════════════════════════════════════════════════════════════════
# Read schemas
# ═════════════════════════════════════════════════════════════════════


class ReportResponse(BaseModel):
    """Full report representation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    date: date
    work_time: int
    in_time: datetime
    out_time: Optional[datetime] = None
    short_leave_time: Optional[int] = None
    total_work_time: Optional[int] = None
    status: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
