"""
Router: /api/portfolio
GET   /      → portfolio actual con distribución porcentual
POST  /init  → inicializa el portfolio (solo si no existe); POST / es alias
PATCH /      → actualización manual de balances
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.dependencies import get_app_settings, get_db
from core.responses import ok, to_dict
from models.portfolio import Portfolio
from services.portfolio_service import PortfolioService, bucket_sum_drift, compute_distribution

router = APIRouter()


class PortfolioBalances(BaseModel):
    total_balance: Decimal | None = Field(None, ge=0)
    paxg_balance: Decimal | None = Field(None, ge=0)
    eth_balance: Decimal | None = Field(None, ge=0)
    altcoin_balance: Decimal | None = Field(None, ge=0)
    premercado_balance: Decimal | None = Field(None, ge=0)


def portfolio_payload(portfolio: Portfolio) -> dict:
    return {
        **to_dict(portfolio),
        "distribution": [
            {"name": item.name, "value": str(item.value), "percentage": item.percentage}
            for item in compute_distribution(portfolio)
        ],
    }


@router.get("")
async def get_portfolio(db: AsyncSession = Depends(get_db)) -> dict:
    """Portfolio más reciente + distribución. 404 si aún no se ha inicializado."""
    portfolio = await PortfolioService(db).require_current()
    return ok(
        data=portfolio_payload(portfolio),
        meta={"bucket_drift": str(bucket_sum_drift(portfolio))},
    )


@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/init", status_code=status.HTTP_201_CREATED)
async def init_portfolio(
    body: PortfolioBalances | None = None,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """Crea el portfolio inicial. 400 si ya existe uno."""
    data = body.model_dump(exclude_none=True) if body else {}
    portfolio = await PortfolioService(db, settings).init_portfolio(data)
    return ok(data=portfolio_payload(portfolio))


@router.patch("")
async def update_portfolio(
    body: PortfolioBalances,
    db: AsyncSession = Depends(get_db),
) -> dict:
    portfolio = await PortfolioService(db).update_portfolio(body.model_dump(exclude_none=True))
    return ok(
        data=portfolio_payload(portfolio),
        meta={"bucket_drift": str(bucket_sum_drift(portfolio))},
    )
