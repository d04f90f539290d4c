"""
PancakeSwap Liquidity SDK - Data Types

Pool snapshots, sizing requests and sizing plans. Every on-chain amount is an
integer in the token's smallest unit (wei for BNB).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple
import json


class LiquidityDirection(Enum):
    """Which router call a plan is sized for"""
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class PoolReserves:
    """
    Reserve snapshot of a token/WBNB pair, already oriented.

    token0/token1 are the pair's asset identities as reported by the pair
    contract. They are optional; when present, size_remove() checks the
    requested token against them.
    """
    reserve_token: int
    reserve_base: int
    total_supply: int
    token0: str = ""
    token1: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "reserve_token": str(self.reserve_token),
            "reserve_base": str(self.reserve_base),
            "total_supply": str(self.total_supply),
            "token0": self.token0,
            "token1": self.token1,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PoolReserves":
        """Create PoolReserves from dictionary."""
        return cls(
            reserve_token=int(data["reserve_token"]),
            reserve_base=int(data["reserve_base"]),
            total_supply=int(data["total_supply"]),
            token0=data.get("token0", ""),
            token1=data.get("token1", ""),
        )


@dataclass(frozen=True)
class PairSnapshot:
    """
    Raw pair state read at a single block.

    Reserves, LP total supply and the owner's LP balance all come from the same
    block_number, so the pro-rata share computed from them is consistent.
    """
    pair: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    total_supply: int
    share_balance: int
    block_number: int

    def to_reserves(self, token_address: str, base_address: str) -> Tuple[PoolReserves, bool]:
        """
        Orient the snapshot around token_address.

        Returns:
            (reserves, token_is_reserve0)

        Raises:
            PairMismatchError: If the pair is not token/base.
        """
        from .liquidity import resolve_token_order

        token_is_reserve0 = resolve_token_order(
            self.token0, self.token1, token_address, base_address
        )
        if token_is_reserve0:
            reserve_token, reserve_base = self.reserve0, self.reserve1
        else:
            reserve_token, reserve_base = self.reserve1, self.reserve0
        reserves = PoolReserves(
            reserve_token=reserve_token,
            reserve_base=reserve_base,
            total_supply=self.total_supply,
            token0=self.token0,
            token1=self.token1,
        )
        return reserves, token_is_reserve0

    def to_dict(self) -> dict:
        return {
            "pair": self.pair,
            "token0": self.token0,
            "token1": self.token1,
            "reserve0": str(self.reserve0),
            "reserve1": str(self.reserve1),
            "total_supply": str(self.total_supply),
            "share_balance": str(self.share_balance),
            "block_number": self.block_number,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# SIZING REQUESTS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AddLiquidityRequest:
    """
    Add liquidity intent: N% of the token balance plus a fixed BNB amount.

    base_amount is in wei. percent is kept as given (string or number) and is
    converted to basis points by the calculator.
    """
    token_address: str
    base_amount: int
    percent: object
    network: str = "bscTestnet"
    slippage_bps: int = 500

    @classmethod
    def from_dict(cls, data: dict) -> "AddLiquidityRequest":
        """
        Build from the form payload {tokenAddress, bnbAmount, tokenPercentage, network}.

        bnbAmount is a decimal BNB amount ("0.5") and is converted to wei exactly.
        """
        from .liquidity import parse_units, DEFAULT_SLIPPAGE_BPS

        missing = [k for k in ("tokenAddress", "bnbAmount", "tokenPercentage", "network")
                   if not data.get(k)]
        if missing:
            raise ValueError(f"Missing parameters: {', '.join(missing)}")
        return cls(
            token_address=data["tokenAddress"],
            base_amount=parse_units(data["bnbAmount"]),
            percent=str(data["tokenPercentage"]),
            network=data["network"],
            slippage_bps=int(data.get("slippageBps", DEFAULT_SLIPPAGE_BPS)),
        )


@dataclass(frozen=True)
class RemoveLiquidityRequest:
    """Remove liquidity intent: burn the full LP balance held by the owner."""
    token_address: str
    network: str = "bscTestnet"
    slippage_bps: int = 500

    @classmethod
    def from_dict(cls, data: dict) -> "RemoveLiquidityRequest":
        """Build from the form payload {tokenAddress, network}."""
        from .liquidity import DEFAULT_SLIPPAGE_BPS

        missing = [k for k in ("tokenAddress", "network") if not data.get(k)]
        if missing:
            raise ValueError(f"Missing parameters: {', '.join(missing)}")
        return cls(
            token_address=data["tokenAddress"],
            network=data["network"],
            slippage_bps=int(data.get("slippageBps", DEFAULT_SLIPPAGE_BPS)),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# SIZING PLANS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AddLiquidityPlan:
    """
    Arguments for addLiquidityETH (amountTokenDesired, amountTokenMin, amountETHMin, deadline).

    deadline is unix seconds, 0 when the plan was sized offline.
    """
    token_amount: int
    token_min: int
    base_amount: int
    base_min: int
    percent_bps: int
    slippage_bps: int
    deadline: int = 0
    direction: LiquidityDirection = field(default=LiquidityDirection.ADD, init=False)

    def to_dict(self) -> dict:
        """Convert to dictionary; amounts as strings so uint256 values survive JSON."""
        return {
            "direction": self.direction.value,
            "token_amount": str(self.token_amount),
            "token_min": str(self.token_min),
            "base_amount": str(self.base_amount),
            "base_min": str(self.base_min),
            "percent_bps": self.percent_bps,
            "slippage_bps": self.slippage_bps,
            "deadline": self.deadline,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


@dataclass(frozen=True)
class RemoveLiquidityPlan:
    """Arguments for removeLiquidityETH (liquidity, amountTokenMin, amountETHMin, deadline)"""
    liquidity: int
    expected_token: int
    expected_base: int
    token_min: int
    base_min: int
    slippage_bps: int
    deadline: int = 0
    direction: LiquidityDirection = field(default=LiquidityDirection.REMOVE, init=False)

    def to_dict(self) -> dict:
        """Convert to dictionary; amounts as strings so uint256 values survive JSON."""
        return {
            "direction": self.direction.value,
            "liquidity": str(self.liquidity),
            "expected_token": str(self.expected_token),
            "expected_base": str(self.expected_base),
            "token_min": str(self.token_min),
            "base_min": str(self.base_min),
            "slippage_bps": self.slippage_bps,
            "deadline": self.deadline,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
