"""
Router: /api/drawdown
GET   /       → eventos (active=true para solo los abiertos)
POST  /       → nuevo evento; 400 si hay uno activo de nivel >= al pedido
PATCH /       → actualización con el id en el body
PATCH /{id}   → actualización / cierre de un evento
"""

from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_db
from core.responses import ok, to_dict
from services.drawdown_service import DrawdownService

router = APIRouter()


class DrawdownCreate(BaseModel):
    level: int = Field(ge=1, le=4)
    initial_balance: Decimal = Field(gt=0)
    drawdown_percentage: Decimal = Field(gt=0, le=100)
    lowest_balance: Decimal | None = None
    actions_taken: str | None = None
    notes: str | None = None


class DrawdownUpdate(BaseModel):
    end_date: datetime | None = None
    lowest_balance: Decimal | None = None
    actions_taken: str | None = None
    recovery_successful: bool | None = None
    notes: str | None = None


class DrawdownPatch(DrawdownUpdate):
    id: int


@router.get("")
async def list_drawdown_events(
    active: bool = Query(False),
    limit: int = Query(10, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> dict:
    events = await DrawdownService(db).list_events(active=active, limit=limit)
    return ok(data=[to_dict(e) for e in events], meta={"active": active, "limit": limit})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_drawdown_event(
    body: DrawdownCreate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    event = await DrawdownService(db).create_event(body.model_dump())
    return ok(data=to_dict(event))


@router.patch("")
async def patch_drawdown_event_by_body(
    body: DrawdownPatch,
    db: AsyncSession = Depends(get_db),
) -> dict:
    data = body.model_dump(exclude_unset=True)
    event_id = data.pop("id")
    event = await DrawdownService(db).update_event(event_id, data)
    return ok(data=to_dict(event))


@router.patch("/{event_id}")
async def update_drawdown_event(
    event_id: int,
    body: DrawdownUpdate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    event = await DrawdownService(db).update_event(event_id, body.model_dump(exclude_unset=True))
    return ok(data=to_dict(event))
