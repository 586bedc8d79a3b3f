"""create drawdown_events table

Revision ID: 005_create_drawdown_events
Revises: 004_create_rotations
Create Date: 2026-10-19 00:04:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "005_create_drawdown_events"
down_revision: Union[str, None] = "004_create_rotations"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "drawdown_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        # NULL mientras el evento está activo
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("initial_balance", sa.NUMERIC(20, 8), nullable=False),
        sa.Column("lowest_balance", sa.NUMERIC(20, 8), nullable=True),
        sa.Column("drawdown_percentage", sa.NUMERIC(9, 4), nullable=False),
        sa.Column("actions_taken", sa.Text(), nullable=True),
        sa.Column("recovery_successful", sa.Boolean(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.CheckConstraint("level BETWEEN 1 AND 4", name="ck_drawdown_events_level"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_drawdown_events_end_date_level", "drawdown_events", ["end_date", "level"])


def downgrade() -> None:
    op.drop_index("ix_drawdown_events_end_date_level", table_name="drawdown_events")
    op.drop_table("drawdown_events")
