"""
Ciclo de vida de las operaciones de trading.

Estados: OPEN → CLOSED | CANCELLED. CLOSED y CANCELLED son terminales.
- Crear: status OPEN; opcionalmente descuenta position_size del bucket
- Cerrar (solo desde OPEN): abona position_size + profit_loss al bucket
- Cancelar (solo desde OPEN): devuelve position_size si se descontó al crear
Cada caso de uso hace un único commit: fila y balance cambian juntos o no cambian.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.errors import BusinessRuleError, NotFoundError
from models.base import utcnow
from models.operation import TERMINAL_STATUSES, UPDATABLE_FIELDS, Operation
from services.portfolio_service import ADD, SUBTRACT, PortfolioService
from services.risk_service import RiskLimits, ValidationResult, validate_operation

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
PCT_PRECISION = Decimal("0.01")

SORTABLE_COLUMNS = (
    "id",
    "entry_date",
    "exit_date",
    "asset_name",
    "strategy_type",
    "status",
    "position_size",
    "profit_loss",
    "profit_loss_percentage",
)


# ---------------------------------------------------------------------------
# Estadísticas (pura)
# ---------------------------------------------------------------------------


@dataclass
class OperationStats:
    total_operations: int
    open_operations: int
    closed_operations: int
    win_rate: Decimal                 # % de cerradas con profit_loss_percentage > 0
    avg_profit_loss_pct: Decimal
    best_trade_pct: Decimal
    worst_trade_pct: Decimal
    total_profit_loss: Decimal


def compute_operation_stats(operations: list[Operation]) -> OperationStats:
    closed = [op for op in operations if op.status == "CLOSED"]
    pcts = [op.profit_loss_percentage or ZERO for op in closed]
    wins = sum(1 for p in pcts if p > ZERO)

    if closed:
        win_rate = (Decimal(wins) / Decimal(len(closed)) * Decimal("100")).quantize(PCT_PRECISION, ROUND_HALF_UP)
        avg = (sum(pcts, ZERO) / Decimal(len(pcts))).quantize(PCT_PRECISION, ROUND_HALF_UP)
    else:
        win_rate = avg = ZERO

    return OperationStats(
        total_operations=len(operations),
        open_operations=sum(1 for op in operations if op.status == "OPEN"),
        closed_operations=len(closed),
        win_rate=win_rate,
        avg_profit_loss_pct=avg,
        best_trade_pct=max(pcts, default=ZERO),
        worst_trade_pct=min(pcts, default=ZERO),
        total_profit_loss=sum((op.profit_loss or ZERO for op in closed), ZERO),
    )


def _take_profits(data: dict) -> list[Decimal | None]:
    return [data.get("take_profit_1"), data.get("take_profit_2"), data.get("take_profit_3")]


# ---------------------------------------------------------------------------
# Servicio con acceso a BD
# ---------------------------------------------------------------------------


class OperationService:
    def __init__(self, db: AsyncSession, settings: Settings) -> None:
        self.db = db
        self.settings = settings
        self.portfolio = PortfolioService(db, settings)

    @property
    def limits(self) -> RiskLimits:
        return RiskLimits(
            max_risk_pct=self.settings.MAX_RISK_PCT,
            min_reward_ratio=self.settings.MIN_REWARD_RATIO,
            altcoin_max_position_pct=self.settings.ALTCOIN_MAX_POSITION_PCT,
        )

    async def get(self, operation_id: int) -> Operation:
        operation = await self.db.get(Operation, operation_id)
        if operation is None:
            raise NotFoundError("Operación no encontrada")
        return operation

    async def list_operations(
        self,
        status: str | None = None,
        strategy_type: str | None = None,
        sort_by: str = "entry_date",
        sort_dir: str = "desc",
        limit: int | None = None,
    ) -> list[Operation]:
        if sort_by not in SORTABLE_COLUMNS:
            raise BusinessRuleError(f"sortBy no válido: {sort_by}")

        query = select(Operation)
        if status:
            query = query.where(Operation.status == status)
        if strategy_type:
            query = query.where(Operation.strategy_type == strategy_type)

        column = getattr(Operation, sort_by)
        query = query.order_by(column.asc() if sort_dir == "asc" else column.desc(), Operation.id.desc())
        if limit:
            query = query.limit(limit)

        return list((await self.db.execute(query)).scalars().all())

    async def evaluate(self, data: dict) -> ValidationResult:
        """Reglas de riesgo sobre una operación propuesta (no escribe nada)."""
        portfolio = await self.portfolio.get_current()
        return validate_operation(
            strategy_type=data["strategy_type"],
            entry_price=data["entry_price"],
            amount=data["amount"],
            stop_loss=data.get("stop_loss"),
            take_profits=_take_profits(data),
            portfolio=portfolio,
            limits=self.limits,
        )

    async def create_operation(self, data: dict) -> tuple[Operation, ValidationResult]:
        validation = await self.evaluate(data)
        if self.settings.ENFORCE_RISK_RULES and not validation.is_valid:
            raise BusinessRuleError(
                "La operación no cumple las reglas de riesgo",
                meta={"validation": validation.as_dict()},
            )

        position_size = data.get("position_size") or validation.metrics.position_size

        operation = Operation(
            strategy_type=data["strategy_type"],
            asset_name=data["asset_name"],
            operation_type=data.get("operation_type") or "BUY",
            entry_price=data["entry_price"],
            amount=data["amount"],
            position_size=position_size,
            stop_loss=data.get("stop_loss"),
            take_profit_1=data.get("take_profit_1"),
            take_profit_2=data.get("take_profit_2"),
            take_profit_3=data.get("take_profit_3"),
            status="OPEN",
            entry_reason=data.get("entry_reason"),
            entry_date=data.get("entry_date") or utcnow(),
            notes=data.get("notes"),
        )
        self.db.add(operation)
        await self.db.flush()

        if self.settings.DEBIT_ON_OPERATION_CREATE:
            await self.portfolio.apply_balance_delta(operation.strategy_type, position_size, SUBTRACT)

        await self.db.commit()
        await self.db.refresh(operation)
        logger.info(
            "operation.created",
            operation_id=operation.id,
            strategy=operation.strategy_type,
            asset=operation.asset_name,
            position_size=str(position_size),
            risk_valid=validation.is_valid,
        )
        return operation, validation

    async def update_operation(self, operation_id: int, data: dict) -> Operation:
        """
        Actualización parcial. Solo se aceptan UPDATABLE_FIELDS.
        Cerrar exige status OPEN; los estados terminales no cambian de status.
        """
        operation = await self.get(operation_id)
        new_status = data.get("status")

        if new_status == "CLOSED" and operation.status != "OPEN":
            raise BusinessRuleError("Solo se pueden cerrar operaciones abiertas")
        if new_status is not None and operation.status in TERMINAL_STATUSES and new_status != operation.status:
            raise BusinessRuleError(f"Una operación {operation.status} no puede cambiar de estado")

        changes = {name: data[name] for name in UPDATABLE_FIELDS if name in data}
        # status es NOT NULL: un null explícito no cambia nada
        if changes.get("status", "") is None:
            del changes["status"]
        if not changes:
            raise BusinessRuleError("No hay datos para actualizar")

        closing = new_status == "CLOSED" and operation.status == "OPEN"
        cancelling = new_status == "CANCELLED" and operation.status == "OPEN"
        if (closing or cancelling) and changes.get("exit_date") is None:
            changes["exit_date"] = utcnow()

        for name, value in changes.items():
            setattr(operation, name, value)
        await self.db.flush()

        if closing:
            final_result = operation.position_size + (operation.profit_loss or ZERO)
            await self.portfolio.apply_balance_delta(operation.strategy_type, final_result, ADD)
        elif cancelling and self.settings.DEBIT_ON_OPERATION_CREATE:
            await self.portfolio.apply_balance_delta(operation.strategy_type, operation.position_size, ADD)

        await self.db.commit()
        await self.db.refresh(operation)
        logger.info("operation.updated", operation_id=operation.id, fields=sorted(changes), status=operation.status)
        return operation
