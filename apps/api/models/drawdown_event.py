"""
Modelo: drawdown_events - episodios de protección de capital (niveles 1 a 4).
Un evento está activo mientras end_date es NULL.
"""

from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from models.base import MONEY, PERCENT, Base

DRAWDOWN_LEVELS = (1, 2, 3, 4)

UPDATABLE_FIELDS = (
    "end_date",
    "lowest_balance",
    "actions_taken",
    "recovery_successful",
    "notes",
)


class DrawdownEvent(Base):
    __tablename__ = "drawdown_events"

    __table_args__ = (
        sa.CheckConstraint("level BETWEEN 1 AND 4", name="ck_drawdown_events_level"),
        sa.Index("ix_drawdown_events_end_date_level", "end_date", "level"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    level: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    start_date: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )
    end_date: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    initial_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    lowest_balance: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    drawdown_percentage: Mapped[Decimal] = mapped_column(PERCENT, nullable=False)
    actions_taken: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    recovery_successful: Mapped[bool | None] = mapped_column(sa.Boolean, nullable=True)
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
