"""create system_config table (+ fila por defecto)

Revision ID: 001_create_system_config
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_create_system_config"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    system_config = op.create_table(
        "system_config",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        # Porcentajes 0-100
        sa.Column("paxg_min_percentage", sa.NUMERIC(9, 4), nullable=False),
        sa.Column("eth_max_percentage", sa.NUMERIC(9, 4), nullable=False),
        sa.Column("altcoin_max_percentage", sa.NUMERIC(9, 4), nullable=False),
        sa.Column("max_drawdown_allowed", sa.NUMERIC(9, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.bulk_insert(
        system_config,
        [
            {
                "paxg_min_percentage": 40,
                "eth_max_percentage": 40,
                "altcoin_max_percentage": 20,
                "max_drawdown_allowed": 25,
            }
        ],
    )


def downgrade() -> None:
    op.drop_table("system_config")
