#!/usr/bin/env python3
"""
pancake-sdk - Liquidity sizing and key vault for PancakeSwap V2 tokens

Usage:
    # Encrypt the deployer key once, store the output as PRIVATE_KEY in .env
    pancake-sdk protect

    # Check the password and show the deployer address
    pancake-sdk unlock

    # Offline sizing (no network, no key)
    pancake-sdk size-add --token-balance 1000000 --percent 10 --bnb-amount 0.5
    pancake-sdk size-remove --shares 500 --reserve-token 10000 --reserve-base 20 --total-supply 1000

    # Live sizing against the chain (unlocks the key first)
    pancake-sdk quote-add --token 0x... --bnb-amount 1 --percent 10 --network bscTestnet
    pancake-sdk quote-remove --token 0x... --network bscMainnet

Requirements:
    pip install web3 cryptography python-dotenv
"""

import argparse
import getpass
import json
import logging
import sys
from typing import List, Optional

from .chain_client import ChainClient, ChainError, signer_address
from .config import NETWORKS, ConfigError, get_network, load_config
from .liquidity import LiquidityCalculator, LiquidityError, parse_units
from .planner import LiquidityPlanner
from .pool_types import AddLiquidityRequest, PoolReserves, RemoveLiquidityRequest
from .startup import unlock_signing_key
from .vault import SecretVault, VaultError

log = logging.getLogger("pancake_sdk")


def _print_json(data: dict):
    print(json.dumps(data, indent=2))


def _slippage(args, config: dict) -> int:
    return config["slippage_bps"] if args.slippage_bps is None else args.slippage_bps


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_protect(args, config: dict) -> int:
    """Encrypt a private key under a new password."""
    secret = getpass.getpass("Private key to protect: ").strip()
    if not secret:
        log.error("Nothing to protect")
        return 1
    password = getpass.getpass("New password: ")
    confirm = getpass.getpass("Repeat password: ")
    if not password:
        log.error("Password must not be empty")
        return 1
    if password != confirm:
        log.error("Passwords do not match")
        return 1

    encoded = SecretVault().protect(secret, password).encode()
    print(f"PRIVATE_KEY={encoded}" if args.env_line else encoded)
    return 0


def cmd_unlock(args, config: dict) -> int:
    """Reveal PRIVATE_KEY and print the deployer address."""
    credential = unlock_signing_key(dotenv_path=args.env_file)
    print(signer_address(credential))
    return 0


def cmd_size_add(args, config: dict) -> int:
    calculator = LiquidityCalculator(_slippage(args, config))
    base_balance = parse_units(args.bnb_balance) if args.bnb_balance else None
    plan = calculator.size_add(
        args.token_balance,
        args.percent,
        parse_units(args.bnb_amount),
        base_balance=base_balance,
    )
    _print_json(plan.to_dict())
    return 0


def cmd_size_remove(args, config: dict) -> int:
    calculator = LiquidityCalculator(_slippage(args, config))
    reserves = PoolReserves(
        reserve_token=args.reserve_token,
        reserve_base=args.reserve_base,
        total_supply=args.total_supply,
    )
    plan = calculator.size_remove(args.shares, reserves,
                                  token_is_reserve0=not args.token_is_reserve1)
    _print_json(plan.to_dict())
    return 0


def _live_planner(args, config: dict):
    """Unlock first, then connect: the prompt always precedes network access."""
    credential = unlock_signing_key(dotenv_path=args.env_file)
    owner = signer_address(credential)
    network = get_network(args.network or config["network"], config)
    log.info(f"Network: {network.name} (chain {network.chain_id}) | "
             f"Owner: {network.address_url(owner)}")

    client = ChainClient(network, timeout=config["rpc_timeout"])
    if not client.test_connection():
        raise ChainError(-1, f"Cannot reach {network.name} RPC at {network.rpc_url}")
    planner = LiquidityPlanner(client, LiquidityCalculator(config["slippage_bps"]),
                               deadline_seconds=config["deadline_seconds"])
    return planner, owner, network


def cmd_quote_add(args, config: dict) -> int:
    planner, owner, network = _live_planner(args, config)
    request = AddLiquidityRequest.from_dict({
        "tokenAddress": args.token,
        "bnbAmount": args.bnb_amount,
        "tokenPercentage": args.percent,
        "network": network.key,
        "slippageBps": _slippage(args, config),
    })
    plan = planner.plan_add(request, owner)
    _print_json(plan.to_dict())
    return 0


def cmd_quote_remove(args, config: dict) -> int:
    planner, owner, network = _live_planner(args, config)
    request = RemoveLiquidityRequest.from_dict({
        "tokenAddress": args.token,
        "network": network.key,
        "slippageBps": _slippage(args, config),
    })
    plan = planner.plan_remove(request, owner)
    _print_json(plan.to_dict())
    return 0


def cmd_networks(args, config: dict) -> int:
    for key in NETWORKS:
        network = get_network(key, config)
        print(f"{key:<12} chain={network.chain_id:<4} router={network.router} "
              f"wbnb={network.wrapped_native} rpc={network.rpc_url}")
    return 0


# =============================================================================
# ENTRY POINT
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pancake-sdk",
        description="PancakeSwap V2 liquidity sizing and deployer key vault"
    )
    parser.add_argument("--config", "-c", help="JSON config file")
    parser.add_argument("--env-file", help=".env file to load (default: search from cwd)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("protect", help="Encrypt a private key with a password")
    p.add_argument("--env-line", action="store_true", help="Print as PRIVATE_KEY=...")
    p.set_defaults(func=cmd_protect)

    p = sub.add_parser("unlock", help="Decrypt PRIVATE_KEY and print the address")
    p.set_defaults(func=cmd_unlock)

    p = sub.add_parser("size-add", help="Size addLiquidityETH offline")
    p.add_argument("--token-balance", type=int, required=True, help="Token balance (smallest unit)")
    p.add_argument("--percent", required=True, help="Percent of token balance, e.g. 12.5")
    p.add_argument("--bnb-amount", required=True, help="BNB to add, e.g. 0.5")
    p.add_argument("--bnb-balance", help="Available BNB, checked when given")
    p.add_argument("--slippage-bps", type=int, help="Slippage in basis points (default 500)")
    p.set_defaults(func=cmd_size_add)

    p = sub.add_parser("size-remove", help="Size removeLiquidityETH offline")
    p.add_argument("--shares", type=int, required=True, help="LP tokens to burn")
    p.add_argument("--reserve-token", type=int, required=True)
    p.add_argument("--reserve-base", type=int, required=True)
    p.add_argument("--total-supply", type=int, required=True, help="LP total supply")
    p.add_argument("--token-is-reserve1", action="store_true",
                   help="Token sits at reserve1 (default reserve0)")
    p.add_argument("--slippage-bps", type=int, help="Slippage in basis points (default 500)")
    p.set_defaults(func=cmd_size_remove)

    p = sub.add_parser("quote-add", help="Size addLiquidityETH from live balances")
    p.add_argument("--token", required=True, help="Token address")
    p.add_argument("--bnb-amount", required=True, help="BNB to add, e.g. 0.5")
    p.add_argument("--percent", required=True, help="Percent of token balance")
    p.add_argument("--network", choices=list(NETWORKS))
    p.add_argument("--slippage-bps", type=int)
    p.set_defaults(func=cmd_quote_add)

    p = sub.add_parser("quote-remove", help="Size removeLiquidityETH from live reserves")
    p.add_argument("--token", required=True, help="Token address")
    p.add_argument("--network", choices=list(NETWORKS))
    p.add_argument("--slippage-bps", type=int)
    p.set_defaults(func=cmd_quote_remove)

    p = sub.add_parser("networks", help="List configured networks")
    p.set_defaults(func=cmd_networks)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(message)s')
        log.error(f"error: {e}")
        return 1

    level = logging.DEBUG if args.verbose else getattr(logging, str(config["log_level"]).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    try:
        return args.func(args, config)
    except (VaultError, LiquidityError, ChainError, ConfigError, ValueError) as e:
        log.error(f"error: {e}")
        return 1
    except KeyboardInterrupt:
        log.info("Aborted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
