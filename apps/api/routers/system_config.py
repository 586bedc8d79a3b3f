"""
Router: /api/system-config
GET   → configuración vigente
PATCH → actualización parcial de porcentajes
"""

from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_db
from core.responses import ok, to_dict
from services.config_service import ConfigService

router = APIRouter()


class SystemConfigUpdate(BaseModel):
    paxg_min_percentage: Decimal | None = Field(None, ge=0, le=100)
    eth_max_percentage: Decimal | None = Field(None, ge=0, le=100)
    altcoin_max_percentage: Decimal | None = Field(None, ge=0, le=100)
    max_drawdown_allowed: Decimal | None = Field(None, ge=0, le=100)


@router.get("")
async def get_system_config(db: AsyncSession = Depends(get_db)) -> dict:
    config = await ConfigService(db).require_current()
    return ok(data=to_dict(config))


@router.patch("")
async def update_system_config(
    body: SystemConfigUpdate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    config = await ConfigService(db).update_config(body.model_dump(exclude_none=True))
    return ok(data=to_dict(config))
