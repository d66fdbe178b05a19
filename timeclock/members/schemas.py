"""Member Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Update  → request bodies (write)
  - *Response          → response bodies (read)
  - *Brief             → compact representation embedded in summaries
"""


from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from timeclock.common.constants import MemberStatus

# Columns that reject NULL; a partial update may omit them but not null them
_NOT_NULL_FIELDS = ("name", "email", "join_date", "work_time", "leave", "status")


# ═════════════════════════════════════════════════════════════════════
# Write schemas
# ═════════════════════════════════════════════════════════════════════


class MemberCreate(BaseModel):
    """Payload for adding a member to the roster."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    avatar: Optional[str] = None
    join_date: date
    end_date: Optional[date] = None
    work_time: Optional[int] = Field(None, ge=0, description="Expected daily minutes")
    leave: int = Field(0, ge=0, description="Annual leave allowance (days)")
    status: MemberStatus = MemberStatus.active

    @model_validator(mode="after")
    def _end_after_join(self) -> "MemberCreate":
        if self.end_date is not None and self.end_date < self.join_date:
            raise ValueError("end_date must be on or after join_date")
        return self


class MemberUpdate(BaseModel):
    """Partial-update payload for a member (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None
    join_date: Optional[date] = None
    end_date: Optional[date] = None
    work_time: Optional[int] = Field(None, ge=0)
    leave: Optional[int] = Field(None, ge=0)
    status: Optional[MemberStatus] = None

    @model_validator(mode="after")
    def _required_not_null(self) -> "MemberUpdate":
        nulls = [name for name in _NOT_NULL_FIELDS
                 if name in self.model_fields_set and getattr(self, name) is None]
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self


# ═════════════════════════════════════════════════════════════════════
# Read schemas
# ═════════════════════════════════════════════════════════════════════


class MemberBrief(BaseModel):
    """Member identity embedded in attendance summaries."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: Optional[str] = None
    join_date: date
    end_date: Optional[date] = None
    work_time: int
    status: int


class MemberResponse(MemberBrief):
    """Full member representation."""

    leave: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
