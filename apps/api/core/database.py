"""
Manejador de la base de datos: motor SQLAlchemy async y fábrica de sesiones.
Se construye explícitamente en el lifespan de la app (sin conexión global perezosa).
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from models.base import Base
from models.system_config import SystemConfig

logger = structlog.get_logger(__name__)


class Database:
    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def init_schema(self) -> None:
        """
        Crea las tablas si no existen y siembra la configuración por defecto.
        Idempotente: se puede llamar en cada arranque.
        """
        import models  # noqa: F401  registra todos los modelos en Base.metadata

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with self.sessionmaker() as session, session.begin():
            existing = (await session.execute(select(SystemConfig.id).limit(1))).scalar_one_or_none()
            if existing is None:
                session.add(SystemConfig())
                logger.info("db.system_config_seeded")

    async def dispose(self) -> None:
        await self.engine.dispose()
