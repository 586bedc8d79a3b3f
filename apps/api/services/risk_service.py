"""
Reglas de riesgo y de distribución de capital.

Funciones puras (sin BD, sin IO, 100% testables):
- Métricas de riesgo de una operación propuesta: tamaño, riesgo, ratios R/R
- Validación contra el balance de la estrategia y los umbrales configurados
- Salud de la distribución del portfolio frente a SystemConfig

Todo con Decimal: una frontera exacta (riesgo = 5%) no debe disparar "> 5%".
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")
RATIO_PRECISION = Decimal("0.0001")

WARNING = "warning"
ERROR = "error"


# ---------------------------------------------------------------------------
# Tipos de retorno
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskLimits:
    max_risk_pct: Decimal = Decimal("5")
    min_reward_ratio: Decimal = Decimal("2")
    altcoin_max_position_pct: Decimal = Decimal("10")


@dataclass
class RiskMetrics:
    position_size: Decimal
    risk_amount: Decimal
    risk_percentage: Decimal
    reward_ratios: list[Decimal]   # uno por take profit (0 si no está definido), sin redondear

    @property
    def reward_ratio_1(self) -> Decimal:
        return self.reward_ratios[0] if self.reward_ratios else ZERO

    def as_dict(self) -> dict:
        data = {
            "position_size": str(self.position_size),
            "risk_amount": str(self.risk_amount),
            "risk_percentage": str(self.risk_percentage),
        }
        for i, ratio in enumerate(self.reward_ratios, start=1):
            data[f"reward_ratio_{i}"] = str(ratio.quantize(RATIO_PRECISION, ROUND_HALF_UP))
        return data


@dataclass(frozen=True)
class ValidationMessage:
    type: str      # warning | error
    message: str


@dataclass
class ValidationResult:
    metrics: RiskMetrics
    messages: list[ValidationMessage] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.messages

    def as_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "messages": [{"type": m.type, "message": m.message} for m in self.messages],
            "metrics": self.metrics.as_dict(),
        }


@dataclass(frozen=True)
class AllocationCheck:
    bucket: str
    percentage: Decimal
    limit: Decimal
    message: str


# ---------------------------------------------------------------------------
# Métricas de riesgo
# ---------------------------------------------------------------------------


def _reward_ratio(take_profit: Decimal | None, entry_price: Decimal, stop_distance: Decimal) -> Decimal:
    if take_profit is None or stop_distance == ZERO:
        return ZERO
    return abs(take_profit - entry_price) / stop_distance


def compute_risk_metrics(
    entry_price: Decimal,
    amount: Decimal,
    stop_loss: Decimal | None,
    take_profits: list[Decimal | None] | None = None,
) -> RiskMetrics:
    """
    position_size   = entry_price * amount
    risk_amount     = |entry_price - stop_loss| * amount
    risk_percentage = risk_amount / position_size * 100
    reward_ratio_i  = |take_profit_i - entry_price| / |entry_price - stop_loss|

    Sin stop_loss no hay riesgo calculable: riesgo y ratios quedan a 0.
    """
    position_size = entry_price * amount
    stop_distance = abs(entry_price - stop_loss) if stop_loss is not None else ZERO

    risk_amount = stop_distance * amount
    if position_size == ZERO:
        risk_percentage = ZERO
    else:
        risk_percentage = risk_amount / position_size * HUNDRED

    return RiskMetrics(
        position_size=position_size,
        risk_amount=risk_amount,
        risk_percentage=risk_percentage,
        reward_ratios=[_reward_ratio(tp, entry_price, stop_distance) for tp in (take_profits or [])],
    )


# ---------------------------------------------------------------------------
# Validación de una operación propuesta
# ---------------------------------------------------------------------------


def strategy_balance(portfolio, strategy_type: str) -> Decimal:
    if strategy_type == "ETH":
        return portfolio.eth_balance
    if strategy_type == "ALTCOIN":
        return portfolio.altcoin_balance
    return ZERO


def validate_operation(
    strategy_type: str,
    entry_price: Decimal,
    amount: Decimal,
    stop_loss: Decimal | None,
    take_profits: list[Decimal | None],
    portfolio,
    limits: RiskLimits | None = None,
) -> ValidationResult:
    """
    Evalúa las reglas del sistema sobre una operación propuesta.
    portfolio: objeto con eth_balance, altcoin_balance y total_balance (o None).

    Reglas:
    - riesgo > max_risk_pct                          → warning
    - position_size > balance del bucket             → error
    - TP1 definido y ratio R/R < min_reward_ratio    → warning
    - ALTCOIN y position_size / total > max altcoin  → warning
    """
    limits = limits or RiskLimits()
    metrics = compute_risk_metrics(entry_price, amount, stop_loss, take_profits)
    result = ValidationResult(metrics=metrics)

    if metrics.risk_percentage > limits.max_risk_pct:
        result.messages.append(
            ValidationMessage(WARNING, f"El riesgo por operación supera el {limits.max_risk_pct}% recomendado")
        )

    if portfolio is not None and metrics.position_size > strategy_balance(portfolio, strategy_type):
        label = "ETH" if strategy_type == "ETH" else "Altcoins"
        result.messages.append(
            ValidationMessage(ERROR, f"El tamaño de posición supera el balance disponible para {label}")
        )

    tp1 = take_profits[0] if take_profits else None
    if tp1 is not None and metrics.reward_ratio_1 < limits.min_reward_ratio:
        result.messages.append(
            ValidationMessage(WARNING, f"La relación riesgo/recompensa (TP1) es menor a {limits.min_reward_ratio}:1")
        )

    if strategy_type == "ALTCOIN" and portfolio is not None and portfolio.total_balance > ZERO:
        share = metrics.position_size / portfolio.total_balance * HUNDRED
        if share > limits.altcoin_max_position_pct:
            result.messages.append(
                ValidationMessage(
                    WARNING,
                    f"Esta operación representa más del {limits.altcoin_max_position_pct}% "
                    "del capital total en una altcoin",
                )
            )

    return result


# ---------------------------------------------------------------------------
# Salud de la distribución
# ---------------------------------------------------------------------------


def _share(value: Decimal, total: Decimal) -> Decimal:
    if total == ZERO:
        return ZERO
    return (value / total * HUNDRED).quantize(Decimal("0.01"), ROUND_HALF_UP)


def check_allocation(portfolio, config) -> list[AllocationCheck]:
    """
    Compara el reparto actual con SystemConfig:
    PAXG por debajo del mínimo, ETH o ALTCOIN por encima del máximo.
    Lista vacía = distribución dentro de los parámetros.
    """
    total = portfolio.total_balance
    paxg = _share(portfolio.paxg_balance, total)
    eth = _share(portfolio.eth_balance, total)
    altcoin = _share(portfolio.altcoin_balance, total)

    issues: list[AllocationCheck] = []
    if paxg < config.paxg_min_percentage:
        issues.append(AllocationCheck("PAXG", paxg, config.paxg_min_percentage, "PAXG por debajo del mínimo"))
    if eth > config.eth_max_percentage:
        issues.append(AllocationCheck("ETH", eth, config.eth_max_percentage, "ETH por encima del máximo"))
    if altcoin > config.altcoin_max_percentage:
        issues.append(
            AllocationCheck("ALTCOIN", altcoin, config.altcoin_max_percentage, "Altcoins por encima del máximo")
        )
    return issues
