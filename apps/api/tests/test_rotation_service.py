"""
Tests de rotaciones de capital.
Las rotaciones mueven dinero entre buckets: total_balance nunca cambia.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select

from core.errors import BusinessRuleError, NotFoundError
from models.portfolio import Portfolio
from models.rotation import Rotation
from services.portfolio_service import PortfolioService
from services.rotation_service import (
    ROTATION_RULES,
    RotationService,
    compute_rotation_amount,
    plan_rotation,
    preview_rotation,
)


def make_portfolio(paxg: str = "42", eth: str = "33", altcoin: str = "18"):
    p = MagicMock(spec=Portfolio)
    p.paxg_balance = Decimal(paxg)
    p.eth_balance = Decimal(eth)
    p.altcoin_balance = Decimal(altcoin)
    return p


# ===========================================================================
# Tests: funciones puras
# ===========================================================================


def test_rotation_amount_is_percentage_of_origin():
    assert compute_rotation_amount(Decimal("42"), Decimal("10")) == Decimal("4.2")


class TestPlanRotation:
    def test_simple_transfer(self):
        deltas = plan_rotation("PAXG", "ETH", Decimal("4.2"))
        assert deltas == {"paxg_balance": Decimal("-4.2"), "eth_balance": Decimal("4.2")}

    def test_split_target_credits_half_to_each(self):
        deltas = plan_rotation("ALTCOIN", "ETH/PAXG", Decimal("1.44"))
        assert deltas == {
            "altcoin_balance": Decimal("-1.44"),
            "eth_balance": Decimal("0.72"),
            "paxg_balance": Decimal("0.72"),
        }

    def test_split_from_eth_keeps_own_half(self):
        deltas = plan_rotation("ETH", "ETH/PAXG", Decimal("10"))
        assert deltas == {"eth_balance": Decimal("-5"), "paxg_balance": Decimal("5")}

    @pytest.mark.parametrize("amount", ["1", "0.00000001", "33.33"])
    def test_deltas_always_sum_to_zero(self, amount):
        deltas = plan_rotation("ALTCOIN", "ETH/PAXG", Decimal(amount))
        assert sum(deltas.values(), Decimal("0")) == Decimal("0")

    def test_same_origin_and_target_rejected(self):
        with pytest.raises(BusinessRuleError):
            plan_rotation("ETH", "ETH", Decimal("1"))

    def test_unknown_strategies_rejected(self):
        with pytest.raises(BusinessRuleError):
            plan_rotation("BTC", "ETH", Decimal("1"))
        with pytest.raises(BusinessRuleError):
            plan_rotation("ETH", "BTC", Decimal("1"))
        with pytest.raises(BusinessRuleError):
            plan_rotation("ETH/PAXG", "ALTCOIN", Decimal("1"))


def test_preview_does_not_modify_portfolio():
    portfolio = make_portfolio()
    result = preview_rotation(portfolio, "ALTCOIN", "ETH/PAXG", Decimal("8"))

    assert result["amount"] == Decimal("1.44")
    assert result["resulting_balances"] == {
        "paxg_balance": Decimal("42.72"),
        "eth_balance": Decimal("33.72"),
        "altcoin_balance": Decimal("16.56"),
    }
    assert portfolio.altcoin_balance == Decimal("18")


def test_rules_catalog_uses_valid_strategies():
    assert len(ROTATION_RULES) == 6
    for rule in ROTATION_RULES:
        plan_rotation(rule.from_strategy, rule.to_strategy, Decimal("1"))


# ===========================================================================
# Tests con base de datos
# ===========================================================================


async def test_create_rotation_moves_balances(session, test_settings):
    await PortfolioService(session, test_settings).init_portfolio({})

    rotation, portfolio = await RotationService(session).create_rotation(
        {"from_strategy": "PAXG", "to_strategy": "ETH", "percentage_of_origin": Decimal("10")}
    )

    assert rotation.id is not None
    assert rotation.amount == Decimal("4.2")
    assert rotation.trigger_condition == ""
    assert portfolio.paxg_balance == Decimal("37.8")
    assert portfolio.eth_balance == Decimal("37.2")
    assert portfolio.total_balance == Decimal("93")


async def test_create_rotation_with_explicit_amount(session, test_settings):
    await PortfolioService(session, test_settings).init_portfolio({})

    rotation, portfolio = await RotationService(session).create_rotation(
        {
            "from_strategy": "ETH",
            "to_strategy": "ETH/PAXG",
            "percentage_of_origin": Decimal("10"),
            "amount": Decimal("6"),
            "trigger_condition": "ETH rechaza soporte",
        }
    )

    assert rotation.to_strategy == "ETH/PAXG"
    assert portfolio.eth_balance == Decimal("30")
    assert portfolio.paxg_balance == Decimal("45")
    assert portfolio.total_balance == Decimal("93")


async def test_create_rotation_without_portfolio(session):
    with pytest.raises(NotFoundError):
        await RotationService(session).create_rotation(
            {"from_strategy": "PAXG", "to_strategy": "ETH", "percentage_of_origin": Decimal("10")}
        )


async def test_failed_balance_update_leaves_no_rotation(database, test_settings, monkeypatch):
    async with database.sessionmaker() as s:
        await PortfolioService(s, test_settings).init_portfolio({})

    async def broken_apply_deltas(self, portfolio, deltas):
        raise RuntimeError("fallo de escritura")

    monkeypatch.setattr(PortfolioService, "apply_deltas", broken_apply_deltas)

    async with database.sessionmaker() as s:
        with pytest.raises(RuntimeError):
            await RotationService(s).create_rotation(
                {"from_strategy": "PAXG", "to_strategy": "ETH", "percentage_of_origin": Decimal("10")}
            )
        await s.rollback()

    async with database.sessionmaker() as s:
        count = (await s.execute(select(func.count()).select_from(Rotation))).scalar_one()
        portfolio = await PortfolioService(s).get_current()

    assert count == 0
    assert portfolio.paxg_balance == Decimal("42")
    assert portfolio.eth_balance == Decimal("33")


async def test_list_rotations_newest_first(session, test_settings):
    await PortfolioService(session, test_settings).init_portfolio({})
    service = RotationService(session)
    first, _ = await service.create_rotation(
        {"from_strategy": "PAXG", "to_strategy": "ETH", "percentage_of_origin": Decimal("10")}
    )
    second, _ = await service.create_rotation(
        {"from_strategy": "ETH", "to_strategy": "PAXG", "percentage_of_origin": Decimal("15")}
    )

    rotations = await service.list_rotations(limit=1)
    assert [r.id for r in rotations] == [second.id]
    assert len(await service.list_rotations()) == 2
    assert first.id < second.id
