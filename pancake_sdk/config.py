"""
PancakeSwap Liquidity SDK - Configuration

Network table, defaults and config file loading.
"""

import copy
import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

# =============================================================================
# ENVIRONMENT
# =============================================================================

# Holds the EncryptedSecret string (salt:nonce:ciphertext) of the deployer key
ENCRYPTED_KEY_ENV = "PRIVATE_KEY"

# Optional path to a JSON config file
CONFIG_PATH_ENV = "PANCAKE_SDK_CONFIG"


class ConfigError(Exception):
    """Configuration is missing or invalid."""


# =============================================================================
# NETWORKS
# =============================================================================

@dataclass(frozen=True)
class NetworkConfig:
    """Chain and PancakeSwap V2 addresses for one network"""
    key: str
    name: str
    rpc_url: str
    chain_id: int
    router: str
    wrapped_native: str
    explorer: str

    def address_url(self, address: str) -> str:
        return f"{self.explorer}/address/{address}"


NETWORKS: Dict[str, NetworkConfig] = {
    "bscTestnet": NetworkConfig(
        key="bscTestnet",
        name="BSC Testnet",
        rpc_url="https://data-seed-prebsc-1-s1.binance.org:8545/",
        chain_id=97,
        router="0xD99D1c33F9fC3444f8101754aBC46c52416550D1",
        wrapped_native="0xae13d989daC2f0dEbFf460aC112a837C89BAa7cd",
        explorer="https://testnet.bscscan.com",
    ),
    "bscMainnet": NetworkConfig(
        key="bscMainnet",
        name="BSC Mainnet",
        rpc_url="https://bsc-dataseed.binance.org/",
        chain_id=56,
        router="0x10ED43C718714eb63d5aA57B78B54704E256024E",
        wrapped_native="0xbb4CdB9CBd36B01bD8cBaEBF2De08d9173bc095C",
        explorer="https://bscscan.com",
    ),
}

DEFAULT_NETWORK = "bscTestnet"

# Default configuration
DEFAULT_CONFIG = {
    "network": DEFAULT_NETWORK,
    "rpc_urls": {},            # {"bscMainnet": "https://..."} overrides
    "slippage_bps": 500,       # 5%
    "deadline_seconds": 1200,  # 20 minutes
    "rpc_timeout": 30,         # seconds
    "log_level": "INFO",
}

# Expected type of each config value
CONFIG_TYPES = {
    "network": str,
    "rpc_urls": dict,
    "slippage_bps": int,
    "deadline_seconds": int,
    "rpc_timeout": (int, float),
    "log_level": str,
}


def get_network(name: str, config: Optional[dict] = None) -> NetworkConfig:
    """
    Resolve a network by key, applying any rpc_urls override from config.

    Raises:
        ConfigError: Unknown network
    """
    network = NETWORKS.get(name)
    if network is None:
        raise ConfigError(f"Invalid network: {name!r} (expected one of {', '.join(NETWORKS)})")
    override = (config or {}).get("rpc_urls", {}).get(name)
    if override:
        network = replace(network, rpc_url=override)
    return network


# =============================================================================
# LOADING
# =============================================================================

def load_config(path: Optional[str] = None) -> dict:
    """
    Load configuration: DEFAULT_CONFIG updated with a JSON file if one is given
    (or named by $PANCAKE_SDK_CONFIG).

    Raises:
        ConfigError: File missing or unreadable, not a JSON object, or bad values
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    path = path or os.environ.get(CONFIG_PATH_ENV)
    if not path:
        return config

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")

    unknown = set(data) - set(DEFAULT_CONFIG)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    _validate(data)
    config.update(data)
    return config


def _validate(data: dict) -> None:
    for key, value in data.items():
        expected = CONFIG_TYPES[key]
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(f"Config key {key!r} has the wrong type: {value!r}")

    for name, url in data.get("rpc_urls", {}).items():
        if not isinstance(url, str):
            raise ConfigError(f"rpc_urls[{name!r}] must be a string, got {url!r}")
    if not 0 <= data.get("slippage_bps", 0) <= 10000:
        raise ConfigError(f"slippage_bps must be within [0, 10000], got {data['slippage_bps']}")
    for key in ("deadline_seconds", "rpc_timeout"):
        if key in data and data[key] <= 0:
            raise ConfigError(f"{key} must be positive, got {data[key]}")


def load_environment(dotenv_path: Optional[str] = None) -> None:
    """Load .env into os.environ; variables already set are kept."""
    load_dotenv(dotenv_path=dotenv_path, override=False)


def read_encrypted_key(environ: Optional[dict] = None,
                       env_var: str = ENCRYPTED_KEY_ENV) -> str:
    """
    Read the encoded signing key from the environment.

    Raises:
        ConfigError: Variable missing or empty
    """
    environ = os.environ if environ is None else environ
    value = environ.get(env_var, "").strip()
    if not value:
        raise ConfigError(
            f"{env_var} is not set. Run 'pancake-sdk protect' and store the result in .env"
        )
    return value
