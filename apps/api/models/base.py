"""
Base declarativa de SQLAlchemy. Todos los modelos heredan de aquí.
"""

from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# NUMERIC(20,8) para importes y precios; NUMERIC(9,4) para porcentajes
MONEY = sa.NUMERIC(20, 8)
PERCENT = sa.NUMERIC(9, 4)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """Añade created_at / updated_at con valor por defecto al momento de inserción."""

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
