"""Attendance summary tests — service layer (direct DB) and HTTP API.

Uses the shared conftest.py pattern with in-memory SQLite.
"""

from __future__ import annotations

from datetime import date

import pytest

from timeclock.attendance.repository import AttendanceRepository, SqlAttendanceRepository
from timeclock.attendance.service import AttendanceReportService
from timeclock.common.constants import MemberStatus
from timeclock.common.exceptions import NotFoundException, ValidationException
from timeclock.members.models import Member
from tests.conftest import _make_member, create_member, create_reports


class InMemoryAttendanceRepository:
    """AttendanceRepository over plain lists, for service tests without SQL."""

    def __init__(self, members=(), reports=()):
        self.members = {m.id: m for m in members}
        self.reports = list(reports)

    async def find_member(self, member_id):
        return self.members.get(member_id)

    async def list_active_members(self):
        return [m for m in self.members.values() if m.status == MemberStatus.active]

    async def find_reports_by_member_and_range(self, member_id, start, end):
        return [r for r in self.reports if r.member_id == member_id and start <= r.date <= end]

    async def find_latest_report_date(self, member_id, year):
        dates = [r.date for r in self.reports if r.member_id == member_id and r.date.year == year]
        return max(dates, default=None)

    async def find_reports_for_members(self, member_ids, start, end):
        return {
            mid: list(await self.find_reports_by_member_and_range(mid, start, end))
            for mid in member_ids
        }


# ═════════════════════════════════════════════════════════════════════
# REPOSITORY
# ═════════════════════════════════════════════════════════════════════


class TestRepository:

    async def test_list_active_members_ordered_by_id(self, db):
        a = await create_member(db, email="a@example.com")
        await create_member(db, email="b@example.com", status=MemberStatus.inactive)
        c = await create_member(db, email="c@example.com")

        members = await SqlAttendanceRepository(db).list_active_members()
        assert [m.id for m in members] == [a.id, c.id]

    async def test_latest_report_date_within_year(self, db, test_member):
        await create_reports(
            db, test_member.id,
            [date(2023, 12, 31), date(2024, 2, 3), date(2024, 5, 9), date(2025, 1, 1)],
        )
        repo = SqlAttendanceRepository(db)
        assert await repo.find_latest_report_date(test_member.id, 2024) == date(2024, 5, 9)
        assert await repo.find_latest_report_date(test_member.id, 2022) is None

    async def test_reports_for_members_grouped(self, db):
        a = await create_member(db, email="a@example.com")
        b = await create_member(db, email="b@example.com")
        await create_reports(db, a.id, [date(2024, 1, 2), date(2024, 1, 3)])
        await create_reports(db, b.id, [date(2024, 1, 2), date(2023, 6, 1)])

        grouped = await SqlAttendanceRepository(db).find_reports_for_members(
            [a.id, b.id], date(2024, 1, 1), date(2024, 12, 31),
        )
        assert len(grouped[a.id]) == 2
        assert len(grouped[b.id]) == 1

    async def test_reports_for_no_members(self, db):
        repo = SqlAttendanceRepository(db)
        assert await repo.find_reports_for_members([], date(2024, 1, 1), date(2024, 12, 31)) == {}

    async def test_require_member_against_in_memory_repository(self):
        member = Member(id=7, **_make_member())
        repo: AttendanceRepository = InMemoryAttendanceRepository(members=[member])

        assert await AttendanceReportService._require_member(repo, 7) is member
        with pytest.raises(NotFoundException):
            await AttendanceReportService._require_member(repo, 8)

    async def test_in_memory_repository_matches_sql_contract(self, db, test_member):
        [report] = await create_reports(db, test_member.id, [date(2024, 2, 3)])
        fake = InMemoryAttendanceRepository(members=[test_member], reports=[report])
        sql = SqlAttendanceRepository(db)

        for repo in (fake, sql):
            assert (await repo.find_member(test_member.id)).id == test_member.id
            assert await repo.find_latest_report_date(test_member.id, 2024) == date(2024, 2, 3)
            grouped = await repo.find_reports_for_members(
                [test_member.id], date(2024, 1, 1), date(2024, 12, 31),
            )
            assert [r.id for r in grouped[test_member.id]] == [report.id]


# ═════════════════════════════════════════════════════════════════════
# MONTH REPORT
# ═════════════════════════════════════════════════════════════════════


class TestMemberMonth:

    async def test_two_present_days_in_january(self, db, test_member):
        await create_reports(db, test_member.id, [date(2024, 1, 5), date(2024, 1, 10)])

        result = await AttendanceReportService.get_member_month(db, test_member.id, 2024, 1)

        assert result.member.id == test_member.id
        assert len(result.reports) == 31
        assert result.month_summary.total_present_days == 2
        assert result.month_summary.leave_days == 29
        assert result.reports[4].present is True
        assert result.reports[0].present is False

    async def test_month_by_name(self, db, test_member):
        await create_reports(db, test_member.id, [date(2024, 2, 29)])

        result = await AttendanceReportService.get_member_month(db, test_member.id, 2024, "february")
        assert result.month_summary.month == 2
        assert result.month_summary.total_days == 29
        assert result.month_summary.total_present_days == 1

    async def test_month_clipped_to_join_date(self, db):
        member = await create_member(db, join_date=date(2024, 6, 15))

        result = await AttendanceReportService.get_member_month(db, member.id, 2024, 6)
        assert len(result.reports) == 16
        assert result.reports[0].date == date(2024, 6, 15)
        assert result.month_summary.total_days == 16

    async def test_month_before_join_is_empty(self, db):
        member = await create_member(db, join_date=date(2024, 6, 15))

        result = await AttendanceReportService.get_member_month(db, member.id, 2024, 3)
        assert result.reports == []
        assert result.month_summary.total_days == 0
        assert result.month_summary.leave_days == 0

    async def test_unknown_member(self, db):
        with pytest.raises(NotFoundException):
            await AttendanceReportService.get_member_month(db, 999, 2024, 1)

    async def test_invalid_month(self, db, test_member):
        with pytest.raises(ValidationException):
            await AttendanceReportService.get_member_month(db, test_member.id, 2024, "13")


# ═════════════════════════════════════════════════════════════════════
# YEAR REPORT
# ═════════════════════════════════════════════════════════════════════


class TestMemberYear:

    async def test_window_stops_at_last_report(self, db, test_member):
        await create_reports(db, test_member.id, [date(2024, 1, 5), date(2024, 3, 10)])

        result = await AttendanceReportService.get_member_year(db, test_member.id, 2024)

        assert [m.month for m in result.monthly_summary] == [1, 2, 3]
        assert result.monthly_summary[2].total_days == 10
        assert result.year_summary.total_days == 31 + 29 + 10
        assert result.year_summary.total_present_days == 2
        assert result.year_summary.total_leave_days == 68
        assert result.leave_allowance == 12

    async def test_no_reports_in_year(self, db, test_member):
        await create_reports(db, test_member.id, [date(2023, 5, 1)])

        with pytest.raises(NotFoundException) as exc_info:
            await AttendanceReportService.get_member_year(db, test_member.id, 2024)
        assert "No reports" in exc_info.value.detail

    async def test_unknown_member(self, db):
        with pytest.raises(NotFoundException):
            await AttendanceReportService.get_member_year(db, 999, 2024)


# ═════════════════════════════════════════════════════════════════════
# FLEET REPORT
# ═════════════════════════════════════════════════════════════════════


class TestFleetYear:

    async def test_only_active_members(self, db):
        statuses = [
            MemberStatus.active,
            MemberStatus.inactive,
            MemberStatus.active,
            MemberStatus.inactive,
            MemberStatus.active,
        ]
        members = [
            await create_member(db, email=f"m{i}@example.com", status=s)
            for i, s in enumerate(statuses)
        ]
        for m in members:
            await create_reports(db, m.id, [date(2024, 1, 2), date(2024, 1, 3)])

        result = await AttendanceReportService.get_fleet_year(db, 2024)

        assert result.year == 2024
        assert [r.member.id for r in result.members] == [members[0].id, members[2].id, members[4].id]
        assert all(r.year_summary.total_present_days == 2 for r in result.members)

    async def test_no_members(self, db):
        result = await AttendanceReportService.get_fleet_year(db, 2024)
        assert result.members == []


# ═════════════════════════════════════════════════════════════════════
# HTTP API
# ═════════════════════════════════════════════════════════════════════


class TestAttendanceAPI:

    async def test_month_endpoint(self, client, db, test_member):
        await create_reports(db, test_member.id, [date(2024, 1, 5), date(2024, 1, 10)])

        resp = await client.get(f"/api/v1/members/{test_member.id}/reports/2024/jan")
        assert resp.status_code == 200
        body = resp.json()
        assert body["month_summary"]["total_present_days"] == 2
        assert body["month_summary"]["leave_days"] == 29
        assert body["month_summary"]["average_in_time"] == "09:00:00"
        assert len(body["reports"]) == 31
        assert body["reports"][4]["date"] == "2024-01-05"

    async def test_month_endpoint_invalid_month(self, client, test_member):
        resp = await client.get(f"/api/v1/members/{test_member.id}/reports/2024/13")
        assert resp.status_code == 422
        assert resp.headers["content-type"].startswith("application/problem+json")
        assert "month" in resp.json()["errors"]

    async def test_year_endpoint(self, client, db, test_member):
        await create_reports(db, test_member.id, [date(2024, 1, 5), date(2024, 3, 10)])

        resp = await client.get(f"/api/v1/members/{test_member.id}/reports/2024")
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["monthly_summary"]) == 3
        assert body["year_summary"]["total_present_days"] == 2

    async def test_year_endpoint_rejects_bad_year(self, client, test_member):
        resp = await client.get(f"/api/v1/members/{test_member.id}/reports/1800")
        assert resp.status_code == 422

    async def test_year_endpoint_unknown_member(self, client):
        resp = await client.get("/api/v1/members/999/reports/2024")
        assert resp.status_code == 404
        assert resp.json()["type"].endswith("/not-found")

    async def test_all_reports(self, client, db, test_member):
        await create_reports(db, test_member.id, [date(2024, 7, 1)])

        resp = await client.get("/api/v1/all-reports", params={"year": 2024})
        assert resp.status_code == 200
        body = resp.json()
        assert body["year"] == 2024
        assert len(body["members"]) == 1
        assert body["members"][0]["member"]["email"] == test_member.email
        assert body["members"][0]["year_summary"]["total_present_days"] == 1

    async def test_all_reports_defaults_to_current_year(self, client):
        resp = await client.get("/api/v1/all-reports")
        assert resp.status_code == 200
        assert resp.json()["year"] == date.today().year

    async def test_all_reports_rate_limited(self, client):
        statuses = [(await client.get("/api/v1/all-reports")).status_code for _ in range(11)]
        assert statuses[:10] == [200] * 10
        assert statuses[10] == 429
