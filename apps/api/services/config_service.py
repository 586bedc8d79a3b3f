"""
Configuración del sistema (porcentajes objetivo y drawdown máximo).
La fila más reciente manda; nunca se borra.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import BusinessRuleError, NotFoundError
from models.base import utcnow
from models.system_config import CONFIG_FIELDS, SystemConfig

logger = structlog.get_logger(__name__)


class ConfigService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_current(self) -> SystemConfig | None:
        result = await self.db.execute(select(SystemConfig).order_by(SystemConfig.id.desc()).limit(1))
        return result.scalar_one_or_none()

    async def require_current(self) -> SystemConfig:
        config = await self.get_current()
        if config is None:
            raise NotFoundError("No se encontró configuración del sistema")
        return config

    async def update_config(self, data: dict) -> SystemConfig:
        changes = {name: data[name] for name in CONFIG_FIELDS if data.get(name) is not None}
        if not changes:
            raise BusinessRuleError("No hay datos para actualizar")

        config = await self.get_current()
        if config is None:
            raise NotFoundError("No se encontró configuración del sistema para actualizar")

        for name, value in changes.items():
            setattr(config, name, value)
        config.updated_at = utcnow()

        await self.db.commit()
        await self.db.refresh(config)
        logger.info("system_config.updated", fields=sorted(changes))
        return config
