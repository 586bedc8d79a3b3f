"""create operations table

Revision ID: 003_create_operations
Revises: 002_create_portfolio
Create Date: 2026-10-19 00:02:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "003_create_operations"
down_revision: Union[str, None] = "002_create_portfolio"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "operations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("strategy_type", sa.String(10), nullable=False),
        sa.Column("asset_name", sa.String(50), nullable=False),
        sa.Column("operation_type", sa.String(4), nullable=False),
        sa.Column("entry_price", sa.NUMERIC(20, 8), nullable=False),
        sa.Column("exit_price", sa.NUMERIC(20, 8), nullable=True),
        sa.Column("amount", sa.NUMERIC(20, 8), nullable=False),
        # entry_price * amount
        sa.Column("position_size", sa.NUMERIC(20, 8), nullable=False),
        sa.Column("stop_loss", sa.NUMERIC(20, 8), nullable=True),
        sa.Column("take_profit_1", sa.NUMERIC(20, 8), nullable=True),
        sa.Column("take_profit_2", sa.NUMERIC(20, 8), nullable=True),
        sa.Column("take_profit_3", sa.NUMERIC(20, 8), nullable=True),
        sa.Column("status", sa.String(10), nullable=False),
        sa.Column("entry_reason", sa.Text(), nullable=True),
        sa.Column("exit_reason", sa.Text(), nullable=True),
        sa.Column("profit_loss", sa.NUMERIC(20, 8), nullable=True),
        sa.Column("profit_loss_percentage", sa.NUMERIC(9, 4), nullable=True),
        sa.Column("entry_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("exit_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.CheckConstraint("strategy_type IN ('ETH', 'ALTCOIN')", name="ck_operations_strategy_type"),
        sa.CheckConstraint("operation_type IN ('BUY', 'SELL')", name="ck_operations_operation_type"),
        sa.CheckConstraint("status IN ('OPEN', 'CLOSED', 'CANCELLED')", name="ck_operations_status"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_operations_status_entry_date", "operations", ["status", "entry_date"])


def downgrade() -> None:
    op.drop_index("ix_operations_status_entry_date", table_name="operations")
    op.drop_table("operations")
