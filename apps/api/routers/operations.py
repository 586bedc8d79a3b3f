"""
Router: /api/operations
GET   /            → listado con filtros (status, strategy_type) y orden (sortBy, sortDir)
POST  /            → nueva operación OPEN (+ evaluación de riesgo en meta)
PATCH /            → actualización con el id en el body
GET   /export      → descarga CSV del listado filtrado
GET   /stats       → estadísticas de operaciones cerradas
POST  /validate    → evalúa las reglas de riesgo sin escribir
GET   /{id}        → una operación
PATCH /{id}        → actualización / cierre
"""

import csv
import io
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.dependencies import get_app_settings, get_db
from core.responses import ok, to_dict
from services.operation_service import OperationService, compute_operation_stats

router = APIRouter()

StrategyType = Literal["ETH", "ALTCOIN"]
OperationStatus = Literal["OPEN", "CLOSED", "CANCELLED"]


class OperationProposal(BaseModel):
    strategy_type: StrategyType
    entry_price: Decimal = Field(gt=0)
    amount: Decimal = Field(gt=0)
    stop_loss: Decimal | None = Field(None, gt=0)
    take_profit_1: Decimal | None = Field(None, gt=0)
    take_profit_2: Decimal | None = Field(None, gt=0)
    take_profit_3: Decimal | None = Field(None, gt=0)


class OperationCreate(OperationProposal):
    asset_name: str = Field(min_length=1, max_length=50)
    operation_type: Literal["BUY", "SELL"] = "BUY"
    # Si no viene, se calcula como entry_price * amount
    position_size: Decimal | None = Field(None, gt=0)
    entry_reason: str | None = None
    entry_date: datetime | None = None
    notes: str | None = None


class OperationUpdate(BaseModel):
    exit_price: Decimal | None = None
    status: OperationStatus | None = None
    exit_reason: str | None = None
    profit_loss: Decimal | None = None
    profit_loss_percentage: Decimal | None = None
    exit_date: datetime | None = None
    notes: str | None = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v: str | None) -> str:
        # Omitir status es válido; enviarlo a null no
        if v is None:
            raise ValueError("status no puede ser null")
        return v


class OperationPatch(OperationUpdate):
    id: int


@router.get("")
async def list_operations(
    status_filter: OperationStatus | None = Query(None, alias="status"),
    strategy_type: StrategyType | None = Query(None),
    sort_by: str = Query("entry_date", alias="sortBy"),
    sort_dir: Literal["asc", "desc"] = Query("desc", alias="sortDir"),
    limit: int | None = Query(None, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    operations = await OperationService(db, settings).list_operations(
        status=status_filter,
        strategy_type=strategy_type,
        sort_by=sort_by,
        sort_dir=sort_dir,
        limit=limit,
    )
    return ok(
        data=[to_dict(op) for op in operations],
        meta={"count": len(operations), "sortBy": sort_by, "sortDir": sort_dir},
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_operation(
    body: OperationCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """
    Registra una operación OPEN.
    La validación de riesgo es informativa salvo con ENFORCE_RISK_RULES.
    """
    operation, validation = await OperationService(db, settings).create_operation(body.model_dump())
    return ok(data=to_dict(operation), meta={"validation": validation.as_dict()})


@router.patch("")
async def patch_operation_by_body(
    body: OperationPatch,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    data = body.model_dump(exclude_unset=True)
    operation_id = data.pop("id")
    operation = await OperationService(db, settings).update_operation(operation_id, data)
    return ok(data=to_dict(operation))


EXPORT_HEADERS = [
    "ID", "Activo", "Estrategia", "Entrada", "Salida", "Cantidad",
    "Tamaño", "SL", "TP1", "Estado", "Fecha Entrada", "Fecha Salida",
    "P&L", "P&L %", "Razón Entrada", "Razón Salida",
]


def _csv_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


@router.get("/export")
async def export_operations(
    status_filter: OperationStatus | None = Query(None, alias="status"),
    strategy_type: StrategyType | None = Query(None),
    sort_by: str = Query("entry_date", alias="sortBy"),
    sort_dir: Literal["asc", "desc"] = Query("desc", alias="sortDir"),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> StreamingResponse:
    """Mismos filtros y orden que GET /, como CSV."""
    operations = await OperationService(db, settings).list_operations(
        status=status_filter,
        strategy_type=strategy_type,
        sort_by=sort_by,
        sort_dir=sort_dir,
    )

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_HEADERS)
    for op in operations:
        writer.writerow([
            _csv_value(v)
            for v in (
                op.id, op.asset_name, op.strategy_type, op.entry_price, op.exit_price, op.amount,
                op.position_size, op.stop_loss, op.take_profit_1, op.status, op.entry_date, op.exit_date,
                op.profit_loss, op.profit_loss_percentage, op.entry_reason, op.exit_reason,
            )
        ])

    output.seek(0)
    filename = f"trading_operations_{date.today()}.csv"
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/stats")
async def get_operation_stats(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    operations = await OperationService(db, settings).list_operations()
    stats = compute_operation_stats(operations)
    return ok(
        data={
            "total_operations": stats.total_operations,
            "open_operations": stats.open_operations,
            "closed_operations": stats.closed_operations,
            "win_rate": str(stats.win_rate),
            "avg_profit_loss_pct": str(stats.avg_profit_loss_pct),
            "best_trade_pct": str(stats.best_trade_pct),
            "worst_trade_pct": str(stats.worst_trade_pct),
            "total_profit_loss": str(stats.total_profit_loss),
        }
    )


@router.post("/validate")
async def validate_operation(
    body: OperationProposal,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    validation = await OperationService(db, settings).evaluate(body.model_dump())
    return ok(data=validation.as_dict())


@router.get("/{operation_id}")
async def get_operation(
    operation_id: int,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    operation = await OperationService(db, settings).get(operation_id)
    return ok(data=to_dict(operation))


@router.patch("/{operation_id}")
async def update_operation(
    operation_id: int,
    body: OperationUpdate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """Solo los campos enviados se modifican. Cerrar abona el resultado al bucket."""
    operation = await OperationService(db, settings).update_operation(
        operation_id, body.model_dump(exclude_unset=True)
    )
    return ok(data=to_dict(operation))
