"""
Dependencias inyectables de FastAPI.
Uso: añadir como parámetro en la firma del endpoint con Depends().
"""

from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.database import Database

# ---------------------------------------------------------------------------
# Sesión de base de datos
# ---------------------------------------------------------------------------


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Proporciona una sesión SQLAlchemy async del Database adjunto a la app."""
    database: Database = request.app.state.database
    async with database.sessionmaker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# ---------------------------------------------------------------------------
# Configuración activa
# ---------------------------------------------------------------------------


def get_app_settings(request: Request) -> Settings:
    """Settings con los que se construyó la app (los tests inyectan los suyos)."""
    return request.app.state.settings
