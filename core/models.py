# PATH: core/models.py
"""
core/models.py - Core data models.

All amounts are in smallest units (int, uint256). NO FLOATS.
Every model is transient: built per flash swap, never persisted.
"""

from dataclasses import dataclass, field
from typing import Any

from core.constants import SETTLEMENT_EVENT
from core.math import require_uint24, require_uint256
from core.validators import normalize_address, require_exactly_one_nonzero, same_address
from core.exceptions import ValidationError


# =============================================================================
# POOL IDENTITY
# =============================================================================

@dataclass(frozen=True)
class PoolKey:
    """
    Identity of a V3-style pool: sorted token pair plus fee tier.

    token0 < token1 by address value, as the factory sorts them.
    """

    token0: str
    token1: str
    fee: int

    def __post_init__(self):
        token0 = normalize_address(self.token0, "token0")
        token1 = normalize_address(self.token1, "token1")
        if int(token0, 16) >= int(token1, 16):
            raise ValidationError(
                "PoolKey tokens must be sorted and distinct",
                {"token0": token0, "token1": token1},
            )
        require_uint24(self.fee, "fee")
        object.__setattr__(self, "token0", token0)
        object.__setattr__(self, "token1", token1)

    @classmethod
    def from_tokens(cls, token_a: str, token_b: str, fee: int) -> "PoolKey":
        a = normalize_address(token_a, "token_a")
        b = normalize_address(token_b, "token_b")
        if int(a, 16) > int(b, 16):
            a, b = b, a
        return cls(a, b, fee)

    def contains(self, token: str) -> bool:
        return same_address(token, self.token0) or same_address(token, self.token1)

    def other(self, token: str) -> str:
        """Return the counter asset of token in this pool."""
        if same_address(token, self.token0):
            return self.token1
        if same_address(token, self.token1):
            return self.token0
        raise ValidationError(
            "Token not in pool",
            {"token": token, "token0": self.token0, "token1": self.token1},
        )


@dataclass(frozen=True)
class PoolRef:
    """A pool address together with the key it was derived from."""

    address: str
    key: PoolKey

    def __post_init__(self):
        object.__setattr__(self, "address", normalize_address(self.address, "pool"))


# =============================================================================
# REQUEST / PARAMS
# =============================================================================

@dataclass(frozen=True)
class FlashLoanRequest:
    """A single-asset flash loan request against one lending pool."""

    lending_pool: PoolRef
    borrow_amount0: int
    borrow_amount1: int
    callback_params: bytes

    def __post_init__(self):
        require_uint256(self.borrow_amount0, "amount0")
        require_uint256(self.borrow_amount1, "amount1")
        require_exactly_one_nonzero(self.borrow_amount0, self.borrow_amount1)
        if not isinstance(self.callback_params, (bytes, bytearray)):
            raise ValidationError(
                "params must be bytes",
                {"type": type(self.callback_params).__name__},
            )

    @property
    def borrows_token0(self) -> bool:
        return self.borrow_amount0 > 0

    @property
    def borrowed_amount(self) -> int:
        return self.borrow_amount0 if self.borrows_token0 else self.borrow_amount1

    @property
    def borrowed_asset(self) -> str:
        key = self.lending_pool.key
        return key.token0 if self.borrows_token0 else key.token1

    @property
    def counter_asset(self) -> str:
        key = self.lending_pool.key
        return key.token1 if self.borrows_token0 else key.token0


@dataclass(frozen=True)
class ArbitrageParams:
    """
    Decoded callback params.

    The slippage floors have no defaults: callers must state them,
    even if the value they choose is 0.
    """

    intermediate_asset: str
    pool_a: str
    pool_b: str
    fee_tier_a: int
    fee_tier_b: int
    min_out_leg1: int
    min_out_leg2: int

    def __post_init__(self):
        object.__setattr__(
            self, "intermediate_asset",
            normalize_address(self.intermediate_asset, "intermediate_asset"),
        )
        object.__setattr__(self, "pool_a", normalize_address(self.pool_a, "pool_a"))
        object.__setattr__(self, "pool_b", normalize_address(self.pool_b, "pool_b"))
        require_uint24(self.fee_tier_a, "fee_tier_a")
        require_uint24(self.fee_tier_b, "fee_tier_b")
        require_uint256(self.min_out_leg1, "min_out_leg1")
        require_uint256(self.min_out_leg2, "min_out_leg2")

    def encode(self) -> bytes:
        from core.abi import encode_arbitrage_params

        return encode_arbitrage_params(self)

    @classmethod
    def decode(cls, data: bytes) -> "ArbitrageParams":
        from core.abi import decode_arbitrage_params

        return decode_arbitrage_params(data)


@dataclass(frozen=True)
class CallbackContext:
    """Fees reported by the lending pool plus the in-flight borrow amounts."""

    sender: str
    fee0: int
    fee1: int
    amount0: int
    amount1: int

    @property
    def borrows_token0(self) -> bool:
        return self.amount0 > 0

    @property
    def borrowed_amount(self) -> int:
        return self.amount0 if self.borrows_token0 else self.amount1

    @property
    def reported_fee(self) -> int:
        return self.fee0 if self.borrows_token0 else self.fee1


# =============================================================================
# OUTCOME
# =============================================================================

@dataclass(frozen=True)
class SettlementOutcome:
    """Result of one committed flash swap. profit is signed."""

    owed: int
    realized: int
    profit: int
    committed: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "owed": str(self.owed),
            "realized": str(self.realized),
            "profit": str(self.profit),
            "committed": self.committed,
        }


@dataclass(frozen=True)
class Event:
    """A log entry emitted by a contract on the host chain."""

    name: str
    emitter: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SettlementEvent:
    """Observable outcome of a committed flash swap."""

    emitter: str
    pool: str
    asset: str
    owed: int
    realized: int
    profit: int
    name: str = SETTLEMENT_EVENT

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "emitter": self.emitter,
            "pool": self.pool,
            "asset": self.asset,
            "owed": str(self.owed),
            "realized": str(self.realized),
            "profit": str(self.profit),
        }


@dataclass(frozen=True)
class Token:
    """ERC20 token identity."""

    symbol: str
    address: str
    decimals: int = 18

    def __post_init__(self):
        object.__setattr__(self, "address", normalize_address(self.address, self.symbol))
        if not isinstance(self.decimals, int) or not 0 <= self.decimals <= 36:
            raise ValidationError(
                f"Invalid decimals for {self.symbol}",
                {"decimals": self.decimals},
            )
