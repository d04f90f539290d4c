"""
PancakeSwap Liquidity SDK - Liquidity Sizing

Turns operator intent ("add N% of my tokens with X BNB", "remove all my
liquidity") into exact uint256 arguments for the PancakeSwap V2 router.

Numeric rules:
    - Every on-chain amount is a Python int in [0, 2**256 - 1]
    - Percentages become integer basis points before touching an amount
    - Division always floors
    - No binary float on the money path (Decimal for parsing only)

Add liquidity (addLiquidityETH):
    token_amount = token_balance * percent_bps // 10000
    token_min    = token_amount * (10000 - slippage_bps) // 10000
    base_min     = base_amount  * (10000 - slippage_bps) // 10000

Remove liquidity (removeLiquidityETH):
    expected_token = share_balance * reserve_token // total_supply
    expected_base  = share_balance * reserve_base  // total_supply
    (the same pro-rata formula the pair uses in burn())

Every function in this module is pure: no I/O, no logging, no state.
"""

from decimal import Decimal, DecimalException
from typing import Optional, Tuple

from .pool_types import AddLiquidityPlan, PoolReserves, RemoveLiquidityPlan

# ═══════════════════════════════════════════════════════════════════════════════
# CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════════

BPS_DENOMINATOR = 10000
DEFAULT_SLIPPAGE_BPS = 500  # 5%
UINT256_MAX = 2 ** 256 - 1

# Router deadline window (20 minutes)
DEFAULT_DEADLINE_SECONDS = 60 * 20

ETHER_DECIMALS = 18


# ═══════════════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

class LiquidityError(Exception):
    """Liquidity sizing failed."""


class ZeroAmountError(LiquidityError):
    """Computed transferable amount rounds down to zero."""


class InsufficientBalanceError(LiquidityError):
    """Requested amount exceeds the available balance."""
    def __init__(self, asset: str, required: int, available: int):
        self.asset = asset
        self.required = required
        self.available = available
        super().__init__(f"Insufficient {asset} balance: need {required}, have {available}")


class NoLiquidityError(LiquidityError):
    """Nothing to withdraw."""


class PairMismatchError(LiquidityError):
    """Pair assets do not match the expected token/base pair."""


# ═══════════════════════════════════════════════════════════════════════════════
# VALIDATION
# ═══════════════════════════════════════════════════════════════════════════════

def _check_uint256(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{name} out of uint256 range: {value}")
    return value


def _check_bps(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= BPS_DENOMINATOR:
        raise ValueError(f"{name} must be within [0, {BPS_DENOMINATOR}], got {value}")
    return value


def _to_decimal(name: str, value) -> Decimal:
    if isinstance(value, bool):
        raise TypeError(f"{name} must be a number, got bool")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        # str() first so 0.29 stays 0.29 instead of its binary expansion
        try:
            result = Decimal(str(value).strip())
        except DecimalException as e:
            raise ValueError(f"{name} is not a number: {value!r}") from e
    else:
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"{name} must be finite, got {value!r}")
    return result


def _floor_shifted(value: Decimal, places: int) -> Tuple[int, bool]:
    """
    floor(value * 10**places) in exact integer arithmetic.

    value must be finite, non-negative and already bounded by the caller.

    Returns:
        (result, exact) where exact is False if digits were dropped
    """
    _, digits, exponent = value.as_tuple()
    coefficient = int("".join(map(str, digits)))
    if coefficient == 0:
        return 0, True
    shift = exponent + places
    if shift >= 0:
        return coefficient * 10 ** shift, True
    if -shift > len(digits):
        return 0, False
    whole, rest = divmod(coefficient, 10 ** -shift)
    return whole, rest == 0


def _check_magnitude(name: str, value: Decimal, places: int, original) -> None:
    # 10**78 > UINT256_MAX, so anything at or above it cannot fit
    if value and value.adjusted() + places >= 78:
        raise ValueError(f"{name} out of uint256 range: {original!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# PRIMITIVES
# ═══════════════════════════════════════════════════════════════════════════════

def percent_to_bps(percent) -> int:
    """
    Convert a percentage to integer basis points, flooring.

    Args:
        percent: int, str, Decimal or float ("12.5", 10, Decimal("0.29"))

    Returns:
        floor(percent * 100)

    Examples:
        >>> percent_to_bps(10)
        1000
        >>> percent_to_bps("0.29")
        29
        >>> percent_to_bps("12.345")
        1234
    """
    value = _to_decimal("percent", percent)
    if value < 0:
        raise ValueError(f"percent must not be negative, got {percent!r}")
    _check_magnitude("percent", value, 2, percent)
    bps, _ = _floor_shifted(value, 2)
    return _check_uint256("percent_bps", bps)


def apply_slippage(amount: int, slippage_bps: int = DEFAULT_SLIPPAGE_BPS) -> int:
    """Minimum acceptable amount after slippage_bps of adverse movement."""
    _check_uint256("amount", amount)
    _check_bps("slippage_bps", slippage_bps)
    return amount * (BPS_DENOMINATOR - slippage_bps) // BPS_DENOMINATOR


def has_sufficient_balance(required: int, available: int) -> bool:
    """Check that available covers required."""
    _check_uint256("required", required)
    _check_uint256("available", available)
    return available >= required


def ensure_sufficient_balance(required: int, available: int, asset: str = "token") -> None:
    """Raise InsufficientBalanceError unless available covers required."""
    if not has_sufficient_balance(required, available):
        raise InsufficientBalanceError(asset, required, available)


def resolve_token_order(token0: str, token1: str,
                        token_address: str, base_address: str) -> bool:
    """
    Find the token's position in a pair.

    Addresses are compared case-insensitively (checksum vs lowercase).

    Returns:
        True if token is token0 (and base is token1), False if token is token1
        (and base is token0).

    Raises:
        PairMismatchError: If the pair is not exactly token/base.
    """
    t0, t1 = token0.lower(), token1.lower()
    token, base = token_address.lower(), base_address.lower()

    if t0 == token:
        if t1 != base:
            raise PairMismatchError(f"Pair is not token/WBNB: token1 is {token1}")
        return True
    if t1 == token:
        if t0 != base:
            raise PairMismatchError(f"Pair is not token/WBNB: token0 is {token0}")
        return False
    raise PairMismatchError(
        f"Token {token_address} is not part of pair ({token0}, {token1})"
    )


# ═══════════════════════════════════════════════════════════════════════════════
# SIZING
# ═══════════════════════════════════════════════════════════════════════════════

def size_add(token_balance: int, percent, base_amount: int,
             slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
             base_balance: Optional[int] = None) -> AddLiquidityPlan:
    """
    Size an addLiquidityETH call.

    Args:
        token_balance: Owner's token balance (smallest unit)
        percent: Percentage of token_balance to contribute (0-100, may be fractional)
        base_amount: BNB to contribute, in wei
        slippage_bps: Slippage tolerance (default 500 = 5%)
        base_balance: Owner's BNB balance in wei; checked when given

    Returns:
        AddLiquidityPlan

    Raises:
        ZeroAmountError: token_amount floors to zero
        InsufficientBalanceError: not enough BNB, or percent above 100
        ValueError: percent negative, malformed or beyond uint256

    Example:
        >>> size_add(1_000_000, 10, 1).token_min
        95000
    """
    _check_uint256("token_balance", token_balance)
    _check_uint256("base_amount", base_amount)
    _check_bps("slippage_bps", slippage_bps)

    percent_bps = percent_to_bps(percent)
    token_amount = token_balance * percent_bps // BPS_DENOMINATOR

    # Balances first, then the zero check
    if base_balance is not None:
        ensure_sufficient_balance(base_amount, base_balance, "BNB")
    if token_amount > token_balance:
        raise InsufficientBalanceError("token", token_amount, token_balance)
    if token_amount == 0:
        raise ZeroAmountError("Token amount is zero. Check your token percentage setting.")

    return AddLiquidityPlan(
        token_amount=token_amount,
        token_min=apply_slippage(token_amount, slippage_bps),
        base_amount=base_amount,
        base_min=apply_slippage(base_amount, slippage_bps),
        percent_bps=percent_bps,
        slippage_bps=slippage_bps,
    )


def size_remove(share_balance: int, reserves: PoolReserves,
                token_is_reserve0: bool = True,
                slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
                token_address: str = "",
                base_address: str = "") -> RemoveLiquidityPlan:
    """
    Size a removeLiquidityETH call that burns share_balance LP tokens.

    Args:
        share_balance: LP tokens to burn (by convention the full balance)
        reserves: Oriented reserve snapshot read at the same block as share_balance
        token_is_reserve0: Orientation the caller used to build reserves
        slippage_bps: Slippage tolerance (default 500 = 5%)
        token_address: Expected token; enables the pair check when reserves carry
            token0/token1
        base_address: Expected base asset (WBNB); required with token_address

    Returns:
        RemoveLiquidityPlan

    Raises:
        NoLiquidityError: share_balance is zero or the pair has no supply
        ValueError: Only one of token_address/base_address given
        PairMismatchError: Pair assets disagree with token_address/base_address
            or with token_is_reserve0

    Example:
        >>> plan = size_remove(500, PoolReserves(10000, 20, 1000))
        >>> (plan.expected_token, plan.expected_base, plan.token_min, plan.base_min)
        (5000, 10, 4750, 9)
    """
    _check_uint256("share_balance", share_balance)
    _check_uint256("reserve_token", reserves.reserve_token)
    _check_uint256("reserve_base", reserves.reserve_base)
    _check_uint256("total_supply", reserves.total_supply)
    _check_bps("slippage_bps", slippage_bps)
    if bool(token_address) != bool(base_address):
        raise ValueError("token_address and base_address must be given together")

    if share_balance == 0:
        raise NoLiquidityError("No LP tokens found. Nothing to remove.")
    if reserves.total_supply == 0:
        raise NoLiquidityError("Pair has no liquidity supply")
    if share_balance > reserves.total_supply:
        raise ValueError(
            f"share_balance {share_balance} exceeds total supply {reserves.total_supply}"
        )

    if token_address and reserves.token0 and reserves.token1:
        actual = resolve_token_order(reserves.token0, reserves.token1,
                                     token_address, base_address)
        if actual != token_is_reserve0:
            raise PairMismatchError(
                f"Reserve ordering mismatch: token is reserve{0 if actual else 1}"
            )

    expected_token = share_balance * reserves.reserve_token // reserves.total_supply
    expected_base = share_balance * reserves.reserve_base // reserves.total_supply

    return RemoveLiquidityPlan(
        liquidity=share_balance,
        expected_token=expected_token,
        expected_base=expected_base,
        token_min=apply_slippage(expected_token, slippage_bps),
        base_min=apply_slippage(expected_base, slippage_bps),
        slippage_bps=slippage_bps,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# UNITS & DEADLINES
# ═══════════════════════════════════════════════════════════════════════════════

def parse_units(value, decimals: int = ETHER_DECIMALS) -> int:
    """
    Convert a decimal amount ("1.5") to integer base units, exactly.

    Examples:
        >>> parse_units("1.5")
        1500000000000000000
        >>> parse_units("0.000001", 6)
        1

    Raises:
        ValueError: Negative, or more fractional digits than decimals
    """
    amount = _to_decimal("amount", value)
    if amount < 0:
        raise ValueError(f"amount must not be negative, got {value!r}")
    _check_magnitude("amount", amount, decimals, value)
    whole, exact = _floor_shifted(amount, decimals)
    if not exact:
        raise ValueError(f"amount {value!r} has more than {decimals} decimal places")
    return _check_uint256("amount", whole)


def format_units(amount: int, decimals: int = ETHER_DECIMALS) -> str:
    """
    Format integer base units for display.

    Examples:
        >>> format_units(1500000000000000000)
        '1.5'
        >>> format_units(0)
        '0'
    """
    _check_uint256("amount", amount)
    whole, frac = divmod(amount, 10 ** decimals)
    if not frac:
        return str(whole)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_str}"


def transaction_deadline(now: float, window: int = DEFAULT_DEADLINE_SECONDS) -> int:
    """Router deadline (unix seconds) for a transaction built at now."""
    return int(now) + window


# ═══════════════════════════════════════════════════════════════════════════════
# CALCULATOR
# ═══════════════════════════════════════════════════════════════════════════════

class LiquidityCalculator:
    """
    Stateless sizing front end with a configured default slippage.

    Usage:
        calc = LiquidityCalculator(slippage_bps=300)

        plan = calc.size_add(token_balance, "12.5", parse_units("0.5"),
                             base_balance=bnb_balance)

        reserves, token_is_reserve0 = snapshot.to_reserves(token, wbnb)
        plan = calc.size_remove(snapshot.share_balance, reserves, token_is_reserve0)
    """

    def __init__(self, slippage_bps: int = DEFAULT_SLIPPAGE_BPS):
        self.slippage_bps = _check_bps("slippage_bps", slippage_bps)

    def size_add(self, token_balance: int, percent, base_amount: int,
                 slippage_bps: Optional[int] = None,
                 base_balance: Optional[int] = None) -> AddLiquidityPlan:
        """See size_add()."""
        if slippage_bps is None:
            slippage_bps = self.slippage_bps
        return size_add(token_balance, percent, base_amount, slippage_bps, base_balance)

    def size_remove(self, share_balance: int, reserves: PoolReserves,
                    token_is_reserve0: bool = True,
                    slippage_bps: Optional[int] = None,
                    token_address: str = "",
                    base_address: str = "") -> RemoveLiquidityPlan:
        """See size_remove()."""
        if slippage_bps is None:
            slippage_bps = self.slippage_bps
        return size_remove(share_balance, reserves, token_is_reserve0, slippage_bps,
                           token_address, base_address)

    @staticmethod
    def has_sufficient_balance(required: int, available: int) -> bool:
        return has_sufficient_balance(required, available)
