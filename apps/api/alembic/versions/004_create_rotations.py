"""create rotations table (historial inmutable)

Revision ID: 004_create_rotations
Revises: 003_create_operations
Create Date: 2026-10-19 00:03:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "004_create_rotations"
down_revision: Union[str, None] = "003_create_operations"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "rotations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("rotation_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("from_strategy", sa.String(10), nullable=False),
        # Incluye el destino combinado ETH/PAXG (reparto 50/50)
        sa.Column("to_strategy", sa.String(10), nullable=False),
        sa.Column("amount", sa.NUMERIC(20, 8), nullable=False),
        sa.Column("percentage_of_origin", sa.NUMERIC(9, 4), nullable=False),
        sa.Column("trigger_condition", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.CheckConstraint("from_strategy IN ('PAXG', 'ETH', 'ALTCOIN')", name="ck_rotations_from_strategy"),
        sa.CheckConstraint(
            "to_strategy IN ('PAXG', 'ETH', 'ALTCOIN', 'ETH/PAXG')",
            name="ck_rotations_to_strategy",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("rotations")
