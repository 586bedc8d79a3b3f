"""
Tests del servicio de portfolio.
- Funciones puras (distribución, deriva): sin base de datos
- Movimientos de balance: contra SQLite temporal
Todas las aserciones usan Decimal para evitar errores de precisión.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from core.errors import BusinessRuleError, NotFoundError
from models.portfolio import Portfolio
from services.portfolio_service import (
    ADD,
    SUBTRACT,
    PortfolioService,
    bucket_sum_drift,
    compute_distribution,
    strategy_balance_field,
)

# ---------------------------------------------------------------------------
# Helpers de fixtures
# ---------------------------------------------------------------------------


def make_portfolio(
    total: str = "93",
    paxg: str = "42",
    eth: str = "33",
    altcoin: str = "18",
    premercado: str = "0",
):
    """Portfolio mínimo para tests (no necesita SQLAlchemy)."""
    p = MagicMock(spec=Portfolio)
    p.total_balance = Decimal(total)
    p.paxg_balance = Decimal(paxg)
    p.eth_balance = Decimal(eth)
    p.altcoin_balance = Decimal(altcoin)
    p.premercado_balance = Decimal(premercado)
    return p


# ===========================================================================
# Tests: compute_distribution
# ===========================================================================


class TestComputeDistribution:
    def test_default_portfolio_rounds_to_integers(self):
        items = compute_distribution(make_portfolio())

        assert [(i.name, i.percentage) for i in items] == [
            ("PAXG", 45),
            ("ETH", 35),
            ("Altcoins", 19),
        ]
        assert items[0].value == Decimal("42")

    def test_premercado_only_listed_when_positive(self):
        items = compute_distribution(make_portfolio(total="100", paxg="40", eth="30", altcoin="20", premercado="10"))
        assert [i.name for i in items] == ["PAXG", "ETH", "Altcoins", "Premercado"]
        assert items[-1].percentage == 10

    def test_half_rounds_up(self):
        items = compute_distribution(make_portfolio(total="200", paxg="91", eth="109", altcoin="0"))
        # 45.5 → 46, 54.5 → 55
        assert [i.percentage for i in items] == [46, 55, 0]

    def test_zero_total_gives_zero_percentages(self):
        items = compute_distribution(make_portfolio(total="0", paxg="0", eth="0", altcoin="0"))
        assert all(i.percentage == 0 for i in items)


class TestBucketSumDrift:
    def test_consistent_portfolio_has_no_drift(self):
        assert bucket_sum_drift(make_portfolio()) == Decimal("0")

    def test_drift_is_total_minus_buckets(self):
        assert bucket_sum_drift(make_portfolio(total="100")) == Decimal("7")


def test_strategy_balance_field():
    assert strategy_balance_field("PAXG") == "paxg_balance"
    assert strategy_balance_field("ETH") == "eth_balance"
    assert strategy_balance_field("ALTCOIN") == "altcoin_balance"
    assert strategy_balance_field("BTC") is None


# ===========================================================================
# Tests con base de datos
# ===========================================================================


async def test_init_uses_settings_defaults(session, test_settings):
    portfolio = await PortfolioService(session, test_settings).init_portfolio({})

    assert portfolio.total_balance == Decimal("93")
    assert portfolio.paxg_balance == Decimal("42")
    assert portfolio.eth_balance == Decimal("33")
    assert portfolio.altcoin_balance == Decimal("18")
    assert portfolio.premercado_balance == Decimal("0")


async def test_init_twice_keeps_first_portfolio(session, test_settings):
    service = PortfolioService(session, test_settings)
    first = await service.init_portfolio({"total_balance": Decimal("100")})

    with pytest.raises(BusinessRuleError):
        await service.init_portfolio({"total_balance": Decimal("500")})

    current = await service.get_current()
    assert current.id == first.id
    assert current.total_balance == Decimal("100")


async def test_update_requires_fields(session, test_settings):
    service = PortfolioService(session, test_settings)
    await service.init_portfolio({})

    with pytest.raises(BusinessRuleError):
        await service.update_portfolio({})


async def test_update_without_portfolio_is_not_found(session, test_settings):
    with pytest.raises(NotFoundError):
        await PortfolioService(session, test_settings).update_portfolio({"eth_balance": Decimal("1")})


async def test_update_only_touches_given_fields(session, test_settings):
    service = PortfolioService(session, test_settings)
    await service.init_portfolio({})

    portfolio = await service.update_portfolio({"eth_balance": Decimal("50"), "premercado_balance": None})

    assert portfolio.eth_balance == Decimal("50")
    assert portfolio.paxg_balance == Decimal("42")
    assert portfolio.premercado_balance == Decimal("0")


class TestApplyBalanceDelta:
    async def test_subtract_moves_bucket_and_total(self, session, test_settings):
        service = PortfolioService(session, test_settings)
        await service.init_portfolio({})

        applied = await service.apply_balance_delta("ETH", Decimal("10.5"), SUBTRACT)
        await session.commit()

        portfolio = await service.get_current()
        assert applied is True
        assert portfolio.eth_balance == Decimal("22.5")
        assert portfolio.total_balance == Decimal("82.5")
        assert portfolio.paxg_balance == Decimal("42")

    async def test_add_then_subtract_restores_balances(self, session, test_settings):
        service = PortfolioService(session, test_settings)
        await service.init_portfolio({})

        await service.apply_balance_delta("ALTCOIN", Decimal("3.25"), ADD)
        await service.apply_balance_delta("ALTCOIN", Decimal("3.25"), SUBTRACT)
        await session.commit()

        portfolio = await service.get_current()
        assert portfolio.altcoin_balance == Decimal("18")
        assert portfolio.total_balance == Decimal("93")
        assert bucket_sum_drift(portfolio) == Decimal("0")

    async def test_unknown_strategy_is_noop(self, session, test_settings):
        service = PortfolioService(session, test_settings)
        await service.init_portfolio({})

        assert await service.apply_balance_delta("PAXG", Decimal("5"), ADD) is False
        assert await service.apply_balance_delta("BTC", Decimal("5"), ADD) is False

        portfolio = await service.get_current()
        assert portfolio.paxg_balance == Decimal("42")
        assert portfolio.total_balance == Decimal("93")

    async def test_unknown_action_is_noop(self, session, test_settings):
        service = PortfolioService(session, test_settings)
        await service.init_portfolio({})

        assert await service.apply_balance_delta("ETH", Decimal("5"), "withdraw") is False

        portfolio = await service.get_current()
        assert portfolio.eth_balance == Decimal("33")
        assert portfolio.total_balance == Decimal("93")

    async def test_without_portfolio_is_noop(self, session, test_settings):
        service = PortfolioService(session, test_settings)
        assert await service.apply_balance_delta("ETH", Decimal("5"), ADD) is False
