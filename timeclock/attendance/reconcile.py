"""Daily reconciliation: one DailyRecord per calendar day of a range.

Report rows are sparse (only days someone clocked in); the reconciler
walks every date of the range and fills the gaps with absence
placeholders so downstream aggregation can count leave days directly.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Iterable, Iterator

from timeclock.attendance.dates import DateRange, day_name, parse_date
from timeclock.attendance.schemas import DailyRecord
from timeclock.common.constants import ReportStatus

if TYPE_CHECKING:
    from timeclock.reports.models import Report

logger = logging.getLogger(__name__)


def index_reports(reports: Iterable[Report]) -> dict[date, Report]:
    """Key reports by calendar date.

    At most one report per member per date is expected; if that does not
    hold, the row indexed last wins.
    """
    lookup: dict[date, Report] = {}
    for report in reports:
        key = parse_date(report.date)
        if key in lookup:
            logger.warning(
                "Duplicate report for member %s on %s; keeping the last row",
                report.member_id, key.isoformat(),
            )
        lookup[key] = report
    return lookup


def project_report(report: Report, day: date) -> DailyRecord:
    return DailyRecord(
        date=day,
        day_name=day_name(day),
        work_time=report.work_time or 0,
        in_time=report.in_time,
        out_time=report.out_time,
        short_leave_time=report.short_leave_time or 0,
        total_work_time=report.total_work_time or 0,
        status=int(report.status if report.status is not None else ReportStatus.present),
        present=True,
    )


def absence(day: date) -> DailyRecord:
    return DailyRecord(
        date=day,
        day_name=day_name(day),
        status=int(ReportStatus.absent),
    )


def iter_reconcile(
    reports: Iterable[Report],
    start: date,
    end: date,
) -> Iterator[DailyRecord]:
    """Lazily yield the reconciled day for each date in [start, end]."""
    lookup = index_reports(reports)
    for day in DateRange(start, end):
        report = lookup.get(day)
        yield project_report(report, day) if report is not None else absence(day)


def reconcile(
    reports: Iterable[Report],
    start: date,
    end: date,
) -> list[DailyRecord]:
    """Materialize ``iter_reconcile``; ranges are bounded to a year at most."""
    return list(iter_reconcile(reports, start, end))


def reconcile_window(reports: Iterable[Report], window: DateRange) -> list[DailyRecord]:
    return reconcile(reports, window.start, window.end)
