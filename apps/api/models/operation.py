"""
Modelo: operations - posiciones de trading por estrategia (ETH / ALTCOIN).
"""

from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from models.base import MONEY, PERCENT, Base

STRATEGY_TYPES = ("ETH", "ALTCOIN")
OPERATION_TYPES = ("BUY", "SELL")
OPERATION_STATUSES = ("OPEN", "CLOSED", "CANCELLED")
TERMINAL_STATUSES = frozenset({"CLOSED", "CANCELLED"})

# Campos que PATCH puede modificar
UPDATABLE_FIELDS = (
    "exit_price",
    "status",
    "exit_reason",
    "profit_loss",
    "profit_loss_percentage",
    "exit_date",
    "notes",
)


class Operation(Base):
    __tablename__ = "operations"

    __table_args__ = (
        sa.CheckConstraint(f"strategy_type IN {STRATEGY_TYPES}", name="ck_operations_strategy_type"),
        sa.CheckConstraint(f"operation_type IN {OPERATION_TYPES}", name="ck_operations_operation_type"),
        sa.CheckConstraint(f"status IN {OPERATION_STATUSES}", name="ck_operations_status"),
        sa.Index("ix_operations_status_entry_date", "status", "entry_date"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    strategy_type: Mapped[str] = mapped_column(sa.String(10), nullable=False)
    asset_name: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    operation_type: Mapped[str] = mapped_column(sa.String(4), nullable=False, default="BUY")
    entry_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    exit_price: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    # entry_price * amount
    position_size: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    stop_loss: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    take_profit_1: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    take_profit_2: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    take_profit_3: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    status: Mapped[str] = mapped_column(sa.String(10), nullable=False, default="OPEN")
    entry_reason: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    exit_reason: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    profit_loss: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    profit_loss_percentage: Mapped[Decimal | None] = mapped_column(PERCENT, nullable=True)
    entry_date: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )
    exit_date: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
