"""Initial schema: events, evidence, moderators, auth sessions

Revision ID: 001
Revises:
Create Date: 2025-11-28 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Check if tables already exist and skip if so
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = inspector.get_table_names()

    if "events" in existing_tables:
        return

    # Create events table
    op.create_table(
        "events",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("date", sa.DateTime, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("status", sa.Text, nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.CheckConstraint("status IN ('pending', 'verified', 'rejected')", name="ck_events_status"),
    )
    op.create_index("idx_events_status", "events", ["status"])

    # Create evidence table
    op.create_table(
        "evidence",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("event_id", sa.Uuid, sa.ForeignKey("events.id"), nullable=False),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("type", sa.Text, nullable=False),
        sa.Column("side", sa.Text, nullable=False, server_default="neutral"),
        sa.Column("content_url", sa.Text, nullable=False),
        sa.Column("status", sa.Text, nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.CheckConstraint("status IN ('pending', 'verified', 'rejected')", name="ck_evidence_status"),
        sa.CheckConstraint("type IN ('link', 'youtube', 'iframe', 'blob')", name="ck_evidence_type"),
        sa.CheckConstraint("side IN ('neutral', 'pro', 'against')", name="ck_evidence_side"),
    )
    op.create_index("idx_evidence_status", "evidence", ["status"])
    op.create_index("idx_evidence_event_id", "evidence", ["event_id"])

    # Create moderators table
    op.create_table(
        "moderators",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("email", sa.Text, nullable=False, unique=True),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )

    # Create auth_sessions table
    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "moderator_id",
            sa.Uuid,
            sa.ForeignKey("moderators.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime, nullable=False),
        sa.Column("revoked_at", sa.DateTime),
    )
    op.create_index("idx_auth_sessions_moderator_id", "auth_sessions", ["moderator_id"])


def downgrade() -> None:
    op.drop_table("auth_sessions")
    op.drop_table("moderators")
    op.drop_table("evidence")
    op.drop_table("events")
