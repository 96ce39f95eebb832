"""create events

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    event_type_enum = sa.Enum("study", "personal", name="event_type")
    event_source_enum = sa.Enum("manual", "imported", name="event_source")

    op.create_table(
        "events",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("owner_user_id", sa.String(length=36), nullable=True),
        sa.Column("program", sa.String(length=100), nullable=True),
        sa.Column("year", sa.String(length=20), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("type", event_type_enum, nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("source", event_source_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_owner_user_id", "events", ["owner_user_id"])
    op.create_index("ix_events_program_year", "events", ["program", "year"])


def downgrade() -> None:
    op.drop_index("ix_events_program_year", table_name="events")
    op.drop_index("ix_events_owner_user_id", table_name="events")
    op.drop_table("events")
    sa.Enum(name="event_source").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="event_type").drop(op.get_bind(), checkfirst=True)
