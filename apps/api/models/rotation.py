"""
Modelo: rotations - historial inmutable de transferencias de capital entre buckets.
"""

from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from models.base import MONEY, PERCENT, Base

ROTATION_STRATEGIES = ("PAXG", "ETH", "ALTCOIN")
# Destino combinado: reparte 50/50 entre ETH y PAXG
SPLIT_TARGET = "ETH/PAXG"
ROTATION_TARGETS = (*ROTATION_STRATEGIES, SPLIT_TARGET)


class Rotation(Base):
    __tablename__ = "rotations"

    __table_args__ = (
        sa.CheckConstraint(f"from_strategy IN {ROTATION_STRATEGIES}", name="ck_rotations_from_strategy"),
        sa.CheckConstraint(f"to_strategy IN {ROTATION_TARGETS}", name="ck_rotations_to_strategy"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    rotation_date: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )
    from_strategy: Mapped[str] = mapped_column(sa.String(10), nullable=False)
    to_strategy: Mapped[str] = mapped_column(sa.String(10), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    percentage_of_origin: Mapped[Decimal] = mapped_column(PERCENT, nullable=False)
    trigger_condition: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
