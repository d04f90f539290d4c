"""
PancakeSwap Liquidity SDK - Chain Client

Read-only web3 access to the token, the router and the token/WBNB pair.
Nothing here signs or sends transactions.
"""

import logging
from typing import Any, Optional, Tuple, Union

import requests
from eth_account import Account
from web3 import Web3
from web3.exceptions import Web3Exception

from .config import NetworkConfig
from .liquidity import NoLiquidityError
from .pool_types import PairSnapshot
from .vault import UnlockedCredential

log = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

BlockId = Union[int, str]

# =============================================================================
# MINIMAL ABIs
# =============================================================================

ERC20_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}]
    },
    {
        "name": "decimals",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}]
    },
]

ROUTER_ABI = [
    {
        "name": "WETH",
        "type": "function",
        "stateMutability": "pure",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}]
    },
    {
        "name": "factory",
        "type": "function",
        "stateMutability": "pure",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}]
    },
]

FACTORY_ABI = [
    {
        "name": "getPair",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"}
        ],
        "outputs": [{"name": "pair", "type": "address"}]
    },
]

PAIR_ABI = ERC20_ABI + [
    {
        "name": "getReserves",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"}
        ]
    },
    {
        "name": "token0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}]
    },
    {
        "name": "token1",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}]
    },
    {
        "name": "totalSupply",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}]
    },
]


class ChainError(Exception):
    """Chain query failed."""
    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"Chain Error {code}: {message}")


def signer_address(credential: UnlockedCredential) -> str:
    """Address of the account behind an unlocked private key."""
    try:
        return Account.from_key(credential.value).address
    except Exception as e:
        # Never echo the key itself
        raise ChainError(-2, "Unlocked credential is not a valid private key") from e


class ChainClient:
    """
    Read-only PancakeSwap V2 client for one network.

    Usage:
        client = ChainClient(get_network("bscTestnet"))
        pair = client.pair_address(token)
        snap = client.pair_snapshot(pair, owner)   # all reads at one block
    """

    def __init__(self, network: NetworkConfig, w3: Optional[Any] = None,
                 timeout: int = 30):
        """
        Initialize client.

        Args:
            network: Network addresses and RPC URL
            w3: Preconfigured Web3 instance (default: HTTPProvider on network.rpc_url)
            timeout: HTTP timeout in seconds
        """
        self.network = network
        self.w3 = w3 or Web3(Web3.HTTPProvider(
            network.rpc_url, request_kwargs={"timeout": timeout}
        ))
        self.router = self.w3.eth.contract(
            address=Web3.to_checksum_address(network.router),
            abi=ROUTER_ABI
        )

    def _call(self, what: str, fn, *args, **kwargs) -> Any:
        """Run a web3 call, wrapping transport and contract errors."""
        try:
            return fn(*args, **kwargs)
        except requests.exceptions.RequestException as e:
            raise ChainError(-1, f"Connection failed during {what}: {e}") from e
        except Web3Exception as e:
            raise ChainError(-3, f"{what} failed: {e}") from e

    def _erc20(self, address: str):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=ERC20_ABI)

    def _pair(self, address: str):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=PAIR_ABI)

    # ═══════════════════════════════════════════════════════════════════════
    # BASIC READS
    # ═══════════════════════════════════════════════════════════════════════

    def block_number(self) -> int:
        """Get current block height."""
        return self._call("block_number", lambda: self.w3.eth.block_number)

    def native_balance(self, address: str, block: BlockId = "latest") -> int:
        """BNB balance in wei."""
        return self._call(
            "get_balance", self.w3.eth.get_balance,
            Web3.to_checksum_address(address), block_identifier=block
        )

    def token_balance(self, token: str, owner: str, block: BlockId = "latest") -> int:
        """ERC20 balance in the token's smallest unit."""
        fn = self._erc20(token).functions.balanceOf(Web3.to_checksum_address(owner))
        return self._call("balanceOf", fn.call, block_identifier=block)

    def token_decimals(self, token: str) -> int:
        """ERC20 decimals()."""
        return int(self._call("decimals", self._erc20(token).functions.decimals().call))

    def wrapped_native(self) -> str:
        """WBNB address as reported by the router."""
        return self._call("WETH", self.router.functions.WETH().call)

    def pair_address(self, token: str) -> str:
        """
        token/WBNB pair address from the router's factory.

        Raises:
            NoLiquidityError: Pair was never created
        """
        factory_addr = self._call("factory", self.router.functions.factory().call)
        factory = self.w3.eth.contract(
            address=Web3.to_checksum_address(factory_addr), abi=FACTORY_ABI
        )
        pair = self._call(
            "getPair",
            factory.functions.getPair(
                Web3.to_checksum_address(token),
                Web3.to_checksum_address(self.network.wrapped_native)
            ).call
        )
        if not pair or pair.lower() == ZERO_ADDRESS:
            raise NoLiquidityError(f"No token/WBNB pair exists for {token}")
        return pair

    # ═══════════════════════════════════════════════════════════════════════
    # CONSISTENT SNAPSHOTS
    # ═══════════════════════════════════════════════════════════════════════

    def pair_snapshot(self, pair: str, owner: str) -> PairSnapshot:
        """
        Read reserves, LP supply and the owner's LP balance at one block.

        Every call is pinned to the same block_identifier, so the pro-rata
        share derived from the snapshot matches what burn() would pay at
        that block.
        """
        block = self.block_number()
        contract = self._pair(pair)
        fns = contract.functions

        token0 = self._call("token0", fns.token0().call, block_identifier=block)
        token1 = self._call("token1", fns.token1().call, block_identifier=block)
        reserve0, reserve1, _ = self._call("getReserves", fns.getReserves().call,
                                           block_identifier=block)
        total_supply = self._call("totalSupply", fns.totalSupply().call,
                                  block_identifier=block)
        share_balance = self._call(
            "balanceOf", fns.balanceOf(Web3.to_checksum_address(owner)).call,
            block_identifier=block
        )

        snapshot = PairSnapshot(
            pair=pair,
            token0=token0,
            token1=token1,
            reserve0=int(reserve0),
            reserve1=int(reserve1),
            total_supply=int(total_supply),
            share_balance=int(share_balance),
            block_number=block,
        )
        log.debug(f"Pair snapshot: {snapshot.to_dict()}")
        return snapshot

    def add_liquidity_balances(self, token: str, owner: str) -> Tuple[int, int, int]:
        """
        Token and BNB balances of owner read at one block.

        Returns:
            (token_balance, native_balance, block_number)
        """
        block = self.block_number()
        token_balance = self.token_balance(token, owner, block)
        native_balance = self.native_balance(owner, block)
        return int(token_balance), int(native_balance), block

    def test_connection(self) -> bool:
        """Test if the RPC endpoint answers."""
        try:
            self.block_number()
            return True
        except ChainError as e:
            log.warning(f"RPC connection test failed: {e}")
            return False
