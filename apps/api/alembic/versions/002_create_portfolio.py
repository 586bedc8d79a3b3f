"""create portfolio table

Revision ID: 002_create_portfolio
Revises: 001_create_system_config
Create Date: 2026-10-19 00:01:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002_create_portfolio"
down_revision: Union[str, None] = "001_create_system_config"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "portfolio",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        # NUMERIC(20,8): importes
        sa.Column("total_balance", sa.NUMERIC(20, 8), nullable=False),
        sa.Column("paxg_balance", sa.NUMERIC(20, 8), nullable=False),
        sa.Column("eth_balance", sa.NUMERIC(20, 8), nullable=False),
        sa.Column("altcoin_balance", sa.NUMERIC(20, 8), nullable=False),
        sa.Column("premercado_balance", sa.NUMERIC(20, 8), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("portfolio")
