"""
PancakeSwap Liquidity SDK

Deployer key vault and exact liquidity sizing for token/WBNB pairs on
PancakeSwap V2 (BNB Smart Chain).

Architecture:
  - SecretVault keeps the deployer key encrypted at rest (PBKDF2 + AES-256-GCM)
  - LiquidityCalculator sizes addLiquidityETH / removeLiquidityETH in uint256 ints
  - ChainClient reads balances and pair state pinned to one block
  - Signing and broadcasting stay with the caller's wallet client

Usage:
    from pancake_sdk import SecretVault, LiquidityCalculator, PoolReserves

    # Protect once, store the string as PRIVATE_KEY
    encoded = SecretVault().protect(private_key, password).encode()

    # Startup: unlock once, pass the handle explicitly
    credential = unlock_signing_key()

    # Size a removal from a pair snapshot
    calc = LiquidityCalculator()
    plan = calc.size_remove(500, PoolReserves(10000, 20, 1000))
    # plan.token_min == 4750, plan.base_min == 9
"""

from .pool_types import (
    PoolReserves,
    PairSnapshot,
    AddLiquidityRequest,
    RemoveLiquidityRequest,
    AddLiquidityPlan,
    RemoveLiquidityPlan,
    LiquidityDirection,
)
from .liquidity import (
    LiquidityCalculator,
    LiquidityError,
    ZeroAmountError,
    InsufficientBalanceError,
    NoLiquidityError,
    PairMismatchError,
    BPS_DENOMINATOR,
    DEFAULT_SLIPPAGE_BPS,
    UINT256_MAX,
    percent_to_bps,
    apply_slippage,
    has_sufficient_balance,
    ensure_sufficient_balance,
    resolve_token_order,
    size_add,
    size_remove,
    parse_units,
    format_units,
    transaction_deadline,
)
from .vault import (
    SecretVault,
    EncryptedSecret,
    UnlockedCredential,
    VaultError,
    AuthenticationError,
    VaultFormatError,
)
from .config import NETWORKS, NetworkConfig, ConfigError, get_network, load_config
from .chain_client import ChainClient, ChainError, signer_address
from .planner import LiquidityPlanner
from .startup import unlock_signing_key

__version__ = "0.2.0"
__all__ = [
    # Types
    "PoolReserves", "PairSnapshot", "AddLiquidityRequest", "RemoveLiquidityRequest",
    "AddLiquidityPlan", "RemoveLiquidityPlan", "LiquidityDirection",
    # Liquidity math
    "LiquidityCalculator", "BPS_DENOMINATOR", "DEFAULT_SLIPPAGE_BPS", "UINT256_MAX",
    "percent_to_bps", "apply_slippage", "has_sufficient_balance",
    "ensure_sufficient_balance", "resolve_token_order", "size_add", "size_remove",
    "parse_units", "format_units", "transaction_deadline",
    # Vault
    "SecretVault", "EncryptedSecret", "UnlockedCredential",
    # Chain & config
    "ChainClient", "LiquidityPlanner", "signer_address", "unlock_signing_key",
    "NETWORKS", "NetworkConfig", "get_network", "load_config",
    # Errors
    "LiquidityError", "ZeroAmountError", "InsufficientBalanceError",
    "NoLiquidityError", "PairMismatchError", "VaultError", "AuthenticationError",
    "VaultFormatError", "ConfigError", "ChainError",
]
