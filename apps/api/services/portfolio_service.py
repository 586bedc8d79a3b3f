"""
Servicio del portfolio: balances por bucket y su actualización.

Reglas críticas:
- NUNCA float para datos de negocio: siempre Decimal
- Los cambios de balance son incrementos atómicos en SQL (x = x + delta),
  nunca "leer, calcular en Python, escribir valor absoluto"
- total_balance se mueve con el mismo delta que el bucket; no se recalcula
  sumando buckets, por eso se expone la deriva (bucket_sum_drift)
- Los métodos internos no hacen commit: el caso de uso que los orquesta decide
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.errors import BusinessRuleError, NotFoundError
from models.base import utcnow
from models.portfolio import BALANCE_FIELDS, Portfolio

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

ADD = "add"
SUBTRACT = "subtract"

# Estrategia → columna del bucket
_BALANCE_FIELD_BY_STRATEGY = {
    "PAXG": "paxg_balance",
    "ETH": "eth_balance",
    "ALTCOIN": "altcoin_balance",
}

# Buckets que financian operaciones
OPERATION_STRATEGIES = frozenset({"ETH", "ALTCOIN"})


# ---------------------------------------------------------------------------
# Tipos de retorno
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DistributionItem:
    name: str
    value: Decimal
    percentage: int     # redondeado al entero más cercano


# ---------------------------------------------------------------------------
# Funciones puras
# ---------------------------------------------------------------------------


def strategy_balance_field(strategy: str) -> str | None:
    """Columna del bucket de una estrategia, o None si no existe."""
    return _BALANCE_FIELD_BY_STRATEGY.get(strategy)


def _rounded_pct(value: Decimal, total: Decimal) -> int:
    if total == ZERO:
        return 0
    return int((value / total * HUNDRED).quantize(Decimal("1"), ROUND_HALF_UP))


def compute_distribution(portfolio: Portfolio) -> list[DistributionItem]:
    """
    Reparto porcentual del balance total por bucket.
    Premercado solo aparece si tiene saldo.
    """
    total = portfolio.total_balance
    items = [
        DistributionItem("PAXG", portfolio.paxg_balance, _rounded_pct(portfolio.paxg_balance, total)),
        DistributionItem("ETH", portfolio.eth_balance, _rounded_pct(portfolio.eth_balance, total)),
        DistributionItem("Altcoins", portfolio.altcoin_balance, _rounded_pct(portfolio.altcoin_balance, total)),
    ]
    if portfolio.premercado_balance > ZERO:
        items.append(
            DistributionItem(
                "Premercado",
                portfolio.premercado_balance,
                _rounded_pct(portfolio.premercado_balance, total),
            )
        )
    return items


def bucket_sum_drift(portfolio: Portfolio) -> Decimal:
    """total_balance - suma de buckets. 0 cuando el portfolio es coherente."""
    buckets = (
        portfolio.paxg_balance
        + portfolio.eth_balance
        + portfolio.altcoin_balance
        + portfolio.premercado_balance
    )
    return portfolio.total_balance - buckets


# ---------------------------------------------------------------------------
# Servicio con acceso a BD
# ---------------------------------------------------------------------------


class PortfolioService:
    def __init__(self, db: AsyncSession, settings: Settings | None = None) -> None:
        self.db = db
        self.settings = settings

    async def get_current(self) -> Portfolio | None:
        """La fila más reciente representa el estado actual."""
        result = await self.db.execute(select(Portfolio).order_by(Portfolio.id.desc()).limit(1))
        return result.scalar_one_or_none()

    async def require_current(self) -> Portfolio:
        portfolio = await self.get_current()
        if portfolio is None:
            raise NotFoundError("No se encontró información del portfolio")
        return portfolio

    async def init_portfolio(self, data: dict) -> Portfolio:
        """
        Crea el portfolio inicial. Falla si ya existe uno (el existente no se toca).
        Los campos ausentes toman los defaults de Settings.
        """
        if await self.get_current() is not None:
            raise BusinessRuleError("Ya existe un portfolio inicializado")

        defaults = {
            "total_balance": self.settings.DEFAULT_TOTAL_BALANCE,
            "paxg_balance": self.settings.DEFAULT_PAXG_BALANCE,
            "eth_balance": self.settings.DEFAULT_ETH_BALANCE,
            "altcoin_balance": self.settings.DEFAULT_ALTCOIN_BALANCE,
            "premercado_balance": ZERO,
        }
        values = {name: data.get(name) if data.get(name) is not None else default for name, default in defaults.items()}

        portfolio = Portfolio(**values)
        self.db.add(portfolio)
        await self.db.commit()
        await self.db.refresh(portfolio)
        logger.info("portfolio.initialized", portfolio_id=portfolio.id, total=str(portfolio.total_balance))
        return portfolio

    async def update_portfolio(self, data: dict) -> Portfolio:
        """Actualización manual parcial de balances."""
        changes = {name: data[name] for name in BALANCE_FIELDS if data.get(name) is not None}
        if not changes:
            raise BusinessRuleError("No hay datos para actualizar")

        portfolio = await self.get_current()
        if portfolio is None:
            raise NotFoundError("No se encontró un portfolio para actualizar")

        for name, value in changes.items():
            setattr(portfolio, name, value)
        portfolio.updated_at = utcnow()

        await self.db.commit()
        await self.db.refresh(portfolio)
        logger.info("portfolio.updated", portfolio_id=portfolio.id, fields=sorted(changes))
        return portfolio

    async def apply_deltas(self, portfolio: Portfolio, deltas: dict[str, Decimal]) -> None:
        """
        Aplica varios incrementos de columna en UNA sentencia UPDATE.
        deltas: {"eth_balance": Decimal("-10"), "paxg_balance": Decimal("10"), ...}
        """
        values = {name: getattr(Portfolio, name) + delta for name, delta in deltas.items()}
        values["updated_at"] = utcnow()
        await self.db.execute(
            update(Portfolio)
            .where(Portfolio.id == portfolio.id)
            .values(values)
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(portfolio)

    async def apply_balance_delta(self, strategy: str, amount: Decimal, action: str) -> bool:
        """
        Suma o resta amount al bucket de la estrategia y al total_balance.
        Estrategia o acción desconocida, o sin portfolio: no-op con log de error.
        Retorna True si se aplicó el cambio.
        """
        if action not in (ADD, SUBTRACT):
            logger.error("balance.unknown_action", strategy=strategy, action=action)
            return False

        portfolio = await self.get_current()
        if portfolio is None:
            logger.error("balance.no_portfolio", strategy=strategy)
            return False

        field = strategy_balance_field(strategy) if strategy in OPERATION_STRATEGIES else None
        if field is None:
            logger.error("balance.unknown_strategy", strategy=strategy)
            return False

        signed = amount if action == ADD else -amount
        await self.apply_deltas(portfolio, {field: signed, "total_balance": signed})
        logger.info("balance.updated", strategy=strategy, action=action, amount=str(amount))
        return True
