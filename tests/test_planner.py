import logging

import pytest

from pancake_sdk.chain_client import ChainClient
from pancake_sdk.config import ConfigError
from pancake_sdk.liquidity import (
    InsufficientBalanceError,
    LiquidityCalculator,
    NoLiquidityError,
    PairMismatchError,
)
from pancake_sdk.planner import LiquidityPlanner
from pancake_sdk.pool_types import AddLiquidityRequest, RemoveLiquidityRequest

from conftest import OWNER, PAIR, TOKEN

OTHER = "0x9999999999999999999999999999999999999999"


def _planner(testnet, w3, slippage_bps=500):
    return LiquidityPlanner(ChainClient(testnet, w3=w3), LiquidityCalculator(slippage_bps),
                            clock=lambda: 1_700_000_000.5)


def test_plan_add_from_live_balances(testnet, make_w3):
    w3 = make_w3(token_balance=1_000_000, bnb_balance=2 * 10 ** 18)
    request = AddLiquidityRequest.from_dict({
        "tokenAddress": TOKEN,
        "bnbAmount": "1",
        "tokenPercentage": "10",
        "network": "bscTestnet",
    })

    plan = _planner(testnet, w3).plan_add(request, OWNER)

    assert plan.token_amount == 100_000
    assert plan.token_min == 95_000
    assert plan.base_amount == 10 ** 18
    assert plan.base_min == 95 * 10 ** 16


def test_plan_add_insufficient_bnb(testnet, make_w3):
    w3 = make_w3(token_balance=1_000_000, bnb_balance=10 ** 17)
    request = AddLiquidityRequest(token_address=TOKEN, base_amount=10 ** 18, percent="10")

    with pytest.raises(InsufficientBalanceError):
        _planner(testnet, w3).plan_add(request, OWNER)


def test_plan_remove_token_as_reserve0(testnet, make_w3):
    w3 = make_w3(pair_values={
        "token0": TOKEN,
        "token1": testnet.wrapped_native,
        "getReserves": (10_000, 20, 0),
        "totalSupply": 1_000,
        "balanceOf": 500,
    })

    plan = _planner(testnet, w3).plan_remove(RemoveLiquidityRequest(TOKEN), OWNER)

    assert plan.liquidity == 500
    assert (plan.expected_token, plan.expected_base) == (5000, 10)
    assert (plan.token_min, plan.base_min) == (4750, 9)


def test_plan_remove_token_as_reserve1(testnet, make_w3):
    w3 = make_w3(pair_values={
        "token0": testnet.wrapped_native,
        "token1": TOKEN,
        "getReserves": (20, 10_000, 0),
        "totalSupply": 1_000,
        "balanceOf": 500,
    })

    plan = _planner(testnet, w3).plan_remove(RemoveLiquidityRequest(TOKEN), OWNER)

    assert (plan.expected_token, plan.expected_base) == (5000, 10)


def test_plan_remove_without_lp_tokens(testnet, make_w3):
    w3 = make_w3(pair_values={
        "token0": TOKEN,
        "token1": testnet.wrapped_native,
        "getReserves": (10_000, 20, 0),
        "totalSupply": 1_000,
        "balanceOf": 0,
    })

    with pytest.raises(NoLiquidityError):
        _planner(testnet, w3).plan_remove(RemoveLiquidityRequest(TOKEN), OWNER)


def test_plan_remove_foreign_pair(testnet, make_w3):
    w3 = make_w3(pair_values={
        "token0": TOKEN,
        "token1": OTHER,
        "getReserves": (10_000, 20, 0),
        "totalSupply": 1_000,
        "balanceOf": 500,
    })

    with pytest.raises(PairMismatchError):
        _planner(testnet, w3).plan_remove(RemoveLiquidityRequest(TOKEN), OWNER)


def test_plan_remove_uses_request_slippage(testnet, make_w3):
    w3 = make_w3(pair_values={
        "token0": TOKEN,
        "token1": testnet.wrapped_native,
        "getReserves": (10_000, 20, 0),
        "totalSupply": 1_000,
        "balanceOf": 500,
    })
    request = RemoveLiquidityRequest(TOKEN, slippage_bps=100)

    plan = _planner(testnet, w3).plan_remove(request, OWNER)

    assert plan.token_min == 4950
    assert plan.slippage_bps == 100
    assert w3.eth.contract(PAIR, None).calls


def _healthy_pair(testnet):
    return {
        "token0": TOKEN,
        "token1": testnet.wrapped_native,
        "getReserves": (10_000, 20, 0),
        "totalSupply": 1_000,
        "balanceOf": 500,
    }


def test_plans_carry_router_deadline(testnet, make_w3):
    w3 = make_w3(token_balance=1_000_000, bnb_balance=10 ** 18,
                 pair_values=_healthy_pair(testnet))
    planner = LiquidityPlanner(ChainClient(testnet, w3=w3), deadline_seconds=60,
                               clock=lambda: 1_700_000_000.5)

    add = planner.plan_add(AddLiquidityRequest(TOKEN, 10 ** 17, "10"), OWNER)
    remove = planner.plan_remove(RemoveLiquidityRequest(TOKEN), OWNER)

    assert add.deadline == 1_700_000_060
    assert remove.deadline == 1_700_000_060
    assert remove.to_dict()["deadline"] == 1_700_000_060


def test_default_deadline_window(testnet, make_w3):
    w3 = make_w3(pair_values=_healthy_pair(testnet))
    plan = _planner(testnet, w3).plan_remove(RemoveLiquidityRequest(TOKEN), OWNER)
    assert plan.deadline == 1_700_001_200


def test_plan_remove_rejects_router_with_other_weth(testnet, make_w3):
    w3 = make_w3(pair_values=_healthy_pair(testnet), router_weth=OTHER)
    with pytest.raises(ConfigError):
        _planner(testnet, w3).plan_remove(RemoveLiquidityRequest(TOKEN), OWNER)


def test_logs_token_amounts_with_token_decimals(testnet, make_w3, caplog):
    w3 = make_w3(token_balance=1_500_000, bnb_balance=10 ** 18, token_decimals=6)
    request = AddLiquidityRequest(TOKEN, 10 ** 17, "100")

    with caplog.at_level(logging.INFO, logger="pancake_sdk.planner"):
        _planner(testnet, w3).plan_add(request, OWNER)

    assert "Token balance: 1.5 |" in caplog.text
    assert "Add plan: 1.5 tokens" in caplog.text
