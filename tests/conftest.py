"""Shared test fixtures — async DB, client, factories.

Reusable across all test modules (members, reports, attendance, etc.).
Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Point settings at SQLite before any other import touches pydantic-settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "warning")

from datetime import date, datetime, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from timeclock.common.constants import MemberStatus, ReportStatus
from timeclock.database import Base, get_db
from timeclock.main import create_app

# Import ALL model modules so SQLAlchemy can resolve Member <-> Report
import timeclock.members.models  # noqa: F401
import timeclock.reports.models  # noqa: F401


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from timeclock.common.rate_limit import limiter

    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────


@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────


def _make_member(
    *,
    name: str = "Test Member",
    email: str = "test.member@example.com",
    join_date: date = date(2023, 1, 1),
    end_date: Optional[date] = None,
    work_time: int = 480,
    leave: int = 12,
    status: MemberStatus = MemberStatus.active,
) -> dict:
    return dict(
        name=name,
        email=email,
        join_date=join_date,
        end_date=end_date,
        work_time=work_time,
        leave=leave,
        status=status,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


def _make_report(
    *,
    member_id: int,
    day: date,
    in_clock: str = "09:00:00",
    out_clock: Optional[str] = "17:00:00",
    work_time: int = 480,
    total_work_time: Optional[int] = 480,
    short_leave_time: int = 0,
    status: ReportStatus = ReportStatus.present,
) -> dict:
    in_time = datetime.fromisoformat(f"{day.isoformat()}T{in_clock}")
    out_time = (
        datetime.fromisoformat(f"{day.isoformat()}T{out_clock}") if out_clock else None
    )
    return dict(
        member_id=member_id,
        date=day,
        work_time=work_time,
        in_time=in_time,
        out_time=out_time,
        short_leave_time=short_leave_time,
        total_work_time=total_work_time,
        status=status,
    )


async def create_member(db: AsyncSession, **overrides):
    """Insert a member and return the ORM instance."""
    from timeclock.members.models import Member

    member = Member(**_make_member(**overrides))
    db.add(member)
    await db.commit()
    return member


async def create_reports(db: AsyncSession, member_id: int, days, **overrides) -> list:
    """Insert one report per day for *member_id*."""
    from timeclock.reports.models import Report

    reports = [Report(**_make_report(member_id=member_id, day=d, **overrides)) for d in days]
    db.add_all(reports)
    await db.commit()
    return reports


@pytest.fixture
async def test_member(db):
    """An active member who joined before every year used in tests."""
    return await create_member(db)
