"""Common module — shared utilities for the timeclock API."""

from timeclock.common.constants import (
    CLOCK_TIME_FORMAT,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MONTH_NAMES,
    MemberStatus,
    ReportStatus,
    TimeAveragingMode,
)
from timeclock.common.exceptions import (
    AppException,
    ConflictError,
    InvalidRangeError,
    NotFoundException,
    ValidationException,
    register_exception_handlers,
)
from timeclock.common.pagination import (
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
    paginate,
)

__all__ = [
    # Constants / Enums
    "MemberStatus",
    "ReportStatus",
    "TimeAveragingMode",
    "MONTH_NAMES",
    "CLOCK_TIME_FORMAT",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    # Exceptions
    "AppException",
    "ConflictError",
    "InvalidRangeError",
    "NotFoundException",
    "ValidationException",
    "register_exception_handlers",
    # Pagination
    "PaginatedResponse",
    "PaginationMeta",
    "PaginationParams",
    "paginate",
]
