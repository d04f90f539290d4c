"""
PancakeSwap Liquidity SDK - Liquidity Planner

Feeds chain reads into the LiquidityCalculator for one owner address.
The planner never prompts and never signs; the owner address comes from the
credential unlocked at startup.
"""

import dataclasses
import logging
import time
from typing import Callable, Optional

from .chain_client import ChainClient
from .config import ConfigError
from .liquidity import (
    DEFAULT_DEADLINE_SECONDS,
    LiquidityCalculator,
    format_units,
    transaction_deadline,
)
from .pool_types import (
    AddLiquidityPlan,
    AddLiquidityRequest,
    RemoveLiquidityPlan,
    RemoveLiquidityRequest,
)

log = logging.getLogger(__name__)


class LiquidityPlanner:
    """
    Sizes add/remove liquidity requests against live chain state.

    Usage:
        planner = LiquidityPlanner(ChainClient(network))
        plan = planner.plan_add(AddLiquidityRequest.from_dict(payload), owner)
    """

    def __init__(self, client: ChainClient,
                 calculator: Optional[LiquidityCalculator] = None,
                 deadline_seconds: int = DEFAULT_DEADLINE_SECONDS,
                 clock: Callable[[], float] = time.time):
        """
        Initialize planner.

        Args:
            client: Chain client for the request's network
            calculator: Sizing calculator (default slippage 500 bps)
            deadline_seconds: Router deadline window stamped on every plan
            clock: Current unix time source
        """
        self.client = client
        self.calculator = calculator or LiquidityCalculator()
        self.deadline_seconds = deadline_seconds
        self._clock = clock

    def _stamp(self, plan):
        return dataclasses.replace(
            plan, deadline=transaction_deadline(self._clock(), self.deadline_seconds)
        )

    def _wrapped_native(self) -> str:
        """Configured WBNB, checked against the router's WETH()."""
        configured = self.client.network.wrapped_native
        reported = self.client.wrapped_native()
        if reported.lower() != configured.lower():
            raise ConfigError(
                f"Router WETH {reported} does not match configured WBNB {configured} "
                f"on {self.client.network.key}"
            )
        return configured

    def plan_add(self, request: AddLiquidityRequest, owner: str) -> AddLiquidityPlan:
        """
        Size addLiquidityETH for owner.

        Token and BNB balances are read at the same block.
        """
        decimals = self.client.token_decimals(request.token_address)
        token_balance, bnb_balance, block = self.client.add_liquidity_balances(
            request.token_address, owner
        )
        log.info(f"Token balance: {format_units(token_balance, decimals)} | "
                 f"BNB balance: {format_units(bnb_balance)} (block {block})")

        plan = self.calculator.size_add(
            token_balance,
            request.percent,
            request.base_amount,
            slippage_bps=request.slippage_bps,
            base_balance=bnb_balance,
        )
        log.info(f"Add plan: {format_units(plan.token_amount, decimals)} tokens "
                 f"(min {format_units(plan.token_min, decimals)}) + "
                 f"{format_units(plan.base_amount)} BNB (min {format_units(plan.base_min)})")
        return self._stamp(plan)

    def plan_remove(self, request: RemoveLiquidityRequest, owner: str) -> RemoveLiquidityPlan:
        """
        Size removeLiquidityETH for owner's full LP balance.

        Reserves, LP supply and the LP balance come from one snapshot.
        """
        wbnb = self._wrapped_native()
        decimals = self.client.token_decimals(request.token_address)
        pair = self.client.pair_address(request.token_address)
        snapshot = self.client.pair_snapshot(pair, owner)
        reserves, token_is_reserve0 = snapshot.to_reserves(request.token_address, wbnb)

        # LP tokens of a V2 pair always have 18 decimals
        log.info(f"Pair {pair} @ block {snapshot.block_number}: "
                 f"LP balance {format_units(snapshot.share_balance)}")

        plan = self.calculator.size_remove(
            snapshot.share_balance,
            reserves,
            token_is_reserve0,
            slippage_bps=request.slippage_bps,
            token_address=request.token_address,
            base_address=wbnb,
        )
        log.info(f"Remove plan: expect {format_units(plan.expected_token, decimals)} tokens "
                 f"(min {format_units(plan.token_min, decimals)}) + "
                 f"{format_units(plan.expected_base)} BNB (min {format_units(plan.base_min)})")
        return self._stamp(plan)
