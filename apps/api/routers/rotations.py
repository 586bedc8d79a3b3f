"""
Router: /api/rotations
GET  /          → historial de rotaciones (más recientes primero)
POST /          → registra una rotación y mueve los balances
GET  /rules     → reglas de rotación predefinidas
POST /preview   → distribución resultante sin persistir
"""

from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_db
from core.responses import ok, to_dict
from services.portfolio_service import PortfolioService
from services.rotation_service import ROTATION_RULES, RotationService, preview_rotation

router = APIRouter()

FromStrategy = Literal["PAXG", "ETH", "ALTCOIN"]
ToStrategy = Literal["PAXG", "ETH", "ALTCOIN", "ETH/PAXG"]


class RotationPreview(BaseModel):
    from_strategy: FromStrategy
    to_strategy: ToStrategy
    percentage_of_origin: Decimal = Field(gt=0, le=100)


class RotationCreate(RotationPreview):
    # Si no viene, se calcula sobre el balance actual de origen
    amount: Decimal | None = Field(None, gt=0)
    trigger_condition: str | None = None
    notes: str | None = None


@router.get("")
async def list_rotations(
    limit: int = Query(10, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> dict:
    rotations = await RotationService(db).list_rotations(limit=limit)
    return ok(data=[to_dict(r) for r in rotations], meta={"limit": limit})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_rotation(
    body: RotationCreate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    rotation, portfolio = await RotationService(db).create_rotation(body.model_dump())
    return ok(data=to_dict(rotation), meta={"portfolio": to_dict(portfolio)})


@router.get("/rules")
async def list_rotation_rules() -> dict:
    return ok(
        data=[
            {
                "id": rule.id,
                "condition": rule.condition,
                "from_strategy": rule.from_strategy,
                "to_strategy": rule.to_strategy,
                "percentage": str(rule.percentage),
                "description": rule.description,
            }
            for rule in ROTATION_RULES
        ]
    )


@router.post("/preview")
async def preview(
    body: RotationPreview,
    db: AsyncSession = Depends(get_db),
) -> dict:
    portfolio = await PortfolioService(db).require_current()
    result = preview_rotation(portfolio, body.from_strategy, body.to_strategy, body.percentage_of_origin)
    return ok(
        data={
            "amount": str(result["amount"]),
            "resulting_balances": {k: str(v) for k, v in result["resulting_balances"].items()},
        }
    )
