"""001 – Initial schema: members and reports.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 10:00:00.000000+00:00
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── 1. members ────────────────────────────────────────────────────────
    # status: 0 = inactive, 1 = active
    op.execute("""
        CREATE TABLE members (
            id          SERIAL PRIMARY KEY,
            name        VARCHAR(255) NOT NULL,
            email       VARCHAR(255) NOT NULL UNIQUE,
            avatar      TEXT,
            join_date   DATE NOT NULL,
            end_date    DATE,
            work_time   INTEGER NOT NULL,
            leave       INTEGER NOT NULL DEFAULT 0,
            status      SMALLINT NOT NULL DEFAULT 1,
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            updated_at  TIMESTAMPTZ DEFAULT NOW(),
            CHECK (end_date IS NULL OR end_date >= join_date)
        )
    """)

    # ── 2. reports ────────────────────────────────────────────────────────
    # status: 0 = absent, 1 = present
    op.execute("""
        CREATE TABLE reports (
            id               SERIAL PRIMARY KEY,
            member_id        INTEGER NOT NULL REFERENCES members(id) ON DELETE CASCADE,
            date             DATE NOT NULL,
            work_time        INTEGER NOT NULL,
            in_time          TIMESTAMP NOT NULL,
            out_time         TIMESTAMP,
            short_leave_time INTEGER DEFAULT 0,
            total_work_time  INTEGER,
            status           SMALLINT NOT NULL DEFAULT 1,
            created_at       TIMESTAMPTZ DEFAULT NOW(),
            updated_at       TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_report_member_date UNIQUE (member_id, date)
        )
    """)

    # ── Indexes ───────────────────────────────────────────────────────────
    op.execute("CREATE INDEX ix_reports_member_id ON reports (member_id)")


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    for t in ("reports", "members"):
        op.execute(f"DROP TABLE IF EXISTS {t} CASCADE")
