"""
Eventos de drawdown (protección de capital, niveles 1 a 4).
No se abre un evento de nivel L mientras haya uno activo de nivel >= L.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ActiveDrawdownExistsError, BusinessRuleError, NotFoundError
from core.responses import to_dict
from models.drawdown_event import UPDATABLE_FIELDS, DrawdownEvent

logger = structlog.get_logger(__name__)


class DrawdownService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_events(self, active: bool = False, limit: int = 10) -> list[DrawdownEvent]:
        query = select(DrawdownEvent)
        if active:
            query = query.where(DrawdownEvent.end_date.is_(None))
        query = query.order_by(DrawdownEvent.start_date.desc(), DrawdownEvent.id.desc()).limit(limit)
        return list((await self.db.execute(query)).scalars().all())

    async def get_blocking_event(self, level: int) -> DrawdownEvent | None:
        """Evento activo de nivel igual o superior (el de mayor nivel)."""
        result = await self.db.execute(
            select(DrawdownEvent)
            .where(DrawdownEvent.end_date.is_(None), DrawdownEvent.level >= level)
            .order_by(DrawdownEvent.level.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_event(self, data: dict) -> DrawdownEvent:
        blocking = await self.get_blocking_event(data["level"])
        if blocking is not None:
            logger.warning("drawdown.blocked", requested_level=data["level"], active_event_id=blocking.id)
            raise ActiveDrawdownExistsError(to_dict(blocking))

        event = DrawdownEvent(
            level=data["level"],
            initial_balance=data["initial_balance"],
            lowest_balance=data.get("lowest_balance"),
            drawdown_percentage=data["drawdown_percentage"],
            actions_taken=data.get("actions_taken"),
            notes=data.get("notes"),
        )
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)
        logger.info("drawdown.created", event_id=event.id, level=event.level)
        return event

    async def update_event(self, event_id: int, data: dict) -> DrawdownEvent:
        """Normalmente para cerrarlo: end_date, lowest_balance, recovery_successful..."""
        event = await self.db.get(DrawdownEvent, event_id)
        if event is None:
            raise NotFoundError("Evento de drawdown no encontrado")

        changes = {name: data[name] for name in UPDATABLE_FIELDS if name in data}
        if not changes:
            raise BusinessRuleError("No hay datos para actualizar")

        for name, value in changes.items():
            setattr(event, name, value)

        await self.db.commit()
        await self.db.refresh(event)
        logger.info("drawdown.updated", event_id=event.id, fields=sorted(changes))
        return event
