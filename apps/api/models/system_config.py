"""
Modelo: system_config - parámetros de distribución y drawdown (la última fila manda).
"""

from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from models.base import PERCENT, Base, TimestampMixin

CONFIG_FIELDS = (
    "paxg_min_percentage",
    "eth_max_percentage",
    "altcoin_max_percentage",
    "max_drawdown_allowed",
)


class SystemConfig(TimestampMixin, Base):
    __tablename__ = "system_config"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    paxg_min_percentage: Mapped[Decimal] = mapped_column(PERCENT, nullable=False, default=Decimal("40"))
    eth_max_percentage: Mapped[Decimal] = mapped_column(PERCENT, nullable=False, default=Decimal("40"))
    altcoin_max_percentage: Mapped[Decimal] = mapped_column(PERCENT, nullable=False, default=Decimal("20"))
    max_drawdown_allowed: Mapped[Decimal] = mapped_column(PERCENT, nullable=False, default=Decimal("25"))
