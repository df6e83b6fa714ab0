"""Initial schema: ownership claims and event records.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2024-03-19 00:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_RECORD_STATUSES = ("UNRESOLVED", "PROCESSED", "IGNORED", "ACTIVE")


def upgrade() -> None:
    op.create_table(
        "ownership_claim",
        sa.Column("primary_key", sa.String(), nullable=False),
        sa.Column("secondary_key", sa.String(), nullable=False),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("primary_key", name=op.f("pk_ownership_claim")),
    )
    op.create_table(
        "event_record",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_key", sa.String(), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*_RECORD_STATUSES, name="recordstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("observed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ingested_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_event_record")),
        sqlite_autoincrement=True,
    )
    op.create_index(
        "ix_event_record_entity_status",
        "event_record",
        ["entity_key", "status"],
    )
    op.create_index(
        "ix_event_record_entity_recency",
        "event_record",
        ["entity_key", "observed_at", "id"],
    )


def downgrade() -> None:
    op.drop_index("ix_event_record_entity_recency", table_name="event_record")
    op.drop_index("ix_event_record_entity_status", table_name="event_record")
    op.drop_table("event_record")
    op.drop_table("ownership_claim")
