"""
Router: /api/dashboard
GET / → vista agregada: portfolio + distribución, operaciones abiertas,
        drawdowns activos, configuración y salud de la distribución
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.dependencies import get_app_settings, get_db
from core.responses import ok, to_dict
from routers.portfolio import portfolio_payload
from services.config_service import ConfigService
from services.drawdown_service import DrawdownService
from services.operation_service import OperationService
from services.portfolio_service import PortfolioService
from services.risk_service import check_allocation

router = APIRouter()


@router.get("")
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """
    Sistema "sano" = distribución dentro de los parámetros de SystemConfig
    y ningún evento de drawdown activo. Sin portfolio, portfolio es null.
    """
    portfolio = await PortfolioService(db).get_current()
    config = await ConfigService(db).get_current()
    open_operations = await OperationService(db, settings).list_operations(status="OPEN")
    active_drawdowns = await DrawdownService(db).list_events(active=True)

    allocation_issues = check_allocation(portfolio, config) if portfolio and config else []

    return ok(
        data={
            "portfolio": portfolio_payload(portfolio) if portfolio else None,
            "system_config": to_dict(config) if config else None,
            "open_operations": [to_dict(op) for op in open_operations],
            "active_drawdowns": [to_dict(e) for e in active_drawdowns],
            "health": {
                "healthy": not allocation_issues and not active_drawdowns,
                "allocation_issues": [
                    {
                        "bucket": issue.bucket,
                        "percentage": str(issue.percentage),
                        "limit": str(issue.limit),
                        "message": issue.message,
                    }
                    for issue in allocation_issues
                ],
            },
        }
    )
