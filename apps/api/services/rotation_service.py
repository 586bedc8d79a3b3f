"""
Rotaciones de capital entre buckets del portfolio.

- El importe es un % del balance de origen: amount = balance_origen * pct / 100
- Destino ETH/PAXG: se reparte 50/50 entre eth_balance y paxg_balance
- No se valida saldo suficiente en origen: un bucket puede quedar negativo
- La fila de rotación y el movimiento de balances van en la MISMA transacción
"""

from dataclasses import dataclass
from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import BusinessRuleError
from models.portfolio import Portfolio
from models.rotation import ROTATION_STRATEGIES, SPLIT_TARGET, Rotation
from services.portfolio_service import PortfolioService, strategy_balance_field

logger = structlog.get_logger(__name__)

HUNDRED = Decimal("100")
TWO = Decimal("2")


@dataclass(frozen=True)
class RotationRule:
    id: int
    condition: str
    from_strategy: str
    to_strategy: str
    percentage: Decimal
    description: str


# Reglas predefinidas de la pantalla de rotación
ROTATION_RULES: tuple[RotationRule, ...] = (
    RotationRule(
        1, "ETH rompe resistencia clave con volumen", "PAXG", "ETH", Decimal("10"),
        "Incrementar exposición en ETH cuando muestra fuerza técnica.",
    ),
    RotationRule(
        2, "ETH rechaza soporte clave 2 veces", "ETH", "PAXG", Decimal("15"),
        "Proteger capital reduciendo exposición en ETH cuando hay debilidad.",
    ),
    RotationRule(
        3, "Altcoin genera +25%", "ALTCOIN", SPLIT_TARGET, Decimal("8"),
        "Tomar ganancias y distribuir entre ETH y PAXG.",
    ),
    RotationRule(
        4, "Mercado general en tendencia bajista (ETH -15% semanal)", "ETH", "PAXG", Decimal("20"),
        "Incrementar protección en PAXG durante mercados bajistas.",
    ),
    RotationRule(
        5, "Setup premium en altcoin con catalizador", "PAXG", "ALTCOIN", Decimal("5"),
        "Tomar riesgo calculado en altcoin con catalizador específico.",
    ),
    RotationRule(
        6, "PAXG sube +3% vs USD", "PAXG", "ETH", Decimal("8"),
        "Aprovechar ganancias en PAXG para rotar a ETH.",
    ),
)


# ---------------------------------------------------------------------------
# Funciones puras
# ---------------------------------------------------------------------------


def compute_rotation_amount(from_balance: Decimal, percentage: Decimal) -> Decimal:
    return from_balance * percentage / HUNDRED


def plan_rotation(from_strategy: str, to_strategy: str, amount: Decimal) -> dict[str, Decimal]:
    """
    Traduce una rotación a incrementos por columna.
    La suma de los incrementos es siempre 0 (total_balance no cambia).
    """
    if from_strategy not in ROTATION_STRATEGIES:
        raise BusinessRuleError(f"Estrategia de origen no válida: {from_strategy}")
    if to_strategy != SPLIT_TARGET and to_strategy not in ROTATION_STRATEGIES:
        raise BusinessRuleError(f"Estrategia de destino no válida: {to_strategy}")
    if from_strategy == to_strategy:
        raise BusinessRuleError("El origen y el destino de la rotación deben ser distintos")

    from_field = strategy_balance_field(from_strategy)
    deltas: dict[str, Decimal] = {from_field: -amount}

    if to_strategy == SPLIT_TARGET:
        half = amount / TWO
        # Con origen ETH o PAXG, el bucket de origen recibe su propia mitad de vuelta
        deltas["eth_balance"] = deltas.get("eth_balance", Decimal("0")) + half
        deltas["paxg_balance"] = deltas.get("paxg_balance", Decimal("0")) + (amount - half)
    else:
        deltas[strategy_balance_field(to_strategy)] = amount

    return deltas


def preview_rotation(portfolio: Portfolio, from_strategy: str, to_strategy: str, percentage: Decimal) -> dict:
    """Balances resultantes de una rotación, sin persistir nada."""
    from_balance = getattr(portfolio, strategy_balance_field(from_strategy) or "", None)
    if from_balance is None:
        raise BusinessRuleError(f"Estrategia de origen no válida: {from_strategy}")

    amount = compute_rotation_amount(from_balance, percentage)
    deltas = plan_rotation(from_strategy, to_strategy, amount)

    balances = {
        "paxg_balance": portfolio.paxg_balance,
        "eth_balance": portfolio.eth_balance,
        "altcoin_balance": portfolio.altcoin_balance,
    }
    for name, delta in deltas.items():
        balances[name] += delta

    return {"amount": amount, "resulting_balances": balances}


# ---------------------------------------------------------------------------
# Servicio con acceso a BD
# ---------------------------------------------------------------------------


class RotationService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.portfolio = PortfolioService(db)

    async def list_rotations(self, limit: int = 10) -> list[Rotation]:
        result = await self.db.execute(
            select(Rotation).order_by(Rotation.rotation_date.desc(), Rotation.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def create_rotation(self, data: dict) -> tuple[Rotation, Portfolio]:
        """
        Registra la rotación y mueve los balances en una única transacción.
        Si amount no viene, se calcula a partir del balance actual de origen.
        """
        from_strategy = data["from_strategy"]
        to_strategy = data["to_strategy"]
        percentage = data["percentage_of_origin"]

        portfolio = await self.portfolio.require_current()

        amount = data.get("amount")
        if amount is None:
            from_field = strategy_balance_field(from_strategy)
            if from_field is None:
                raise BusinessRuleError(f"Estrategia de origen no válida: {from_strategy}")
            amount = compute_rotation_amount(getattr(portfolio, from_field), percentage)

        deltas = plan_rotation(from_strategy, to_strategy, amount)

        rotation = Rotation(
            from_strategy=from_strategy,
            to_strategy=to_strategy,
            amount=amount,
            percentage_of_origin=percentage,
            trigger_condition=data.get("trigger_condition") or "",
            notes=data.get("notes"),
        )
        self.db.add(rotation)
        await self.db.flush()

        await self.portfolio.apply_deltas(portfolio, deltas)

        await self.db.commit()
        await self.db.refresh(rotation)
        logger.info(
            "rotation.created",
            rotation_id=rotation.id,
            from_strategy=from_strategy,
            to_strategy=to_strategy,
            amount=str(amount),
        )
        return rotation, portfolio
