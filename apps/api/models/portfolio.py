"""
Modelo: portfolio - balance total y reparto por bucket (la última fila es el estado actual).
"""

from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from models.base import MONEY, Base, TimestampMixin

BALANCE_FIELDS = (
    "total_balance",
    "paxg_balance",
    "eth_balance",
    "altcoin_balance",
    "premercado_balance",
)


class Portfolio(TimestampMixin, Base):
    __tablename__ = "portfolio"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    total_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    paxg_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    eth_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    altcoin_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    premercado_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
