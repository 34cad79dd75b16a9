# PATH: core/constants.py
"""
core/constants.py - Constants for the flash-swap engine.

Contains enums, numeric bounds and protocol constants.
"""

from enum import Enum
from typing import Final, List

# =============================================================================
# NUMERIC BOUNDS
# =============================================================================

UINT256_MAX: Final[int] = 2**256 - 1
UINT24_MAX: Final[int] = 2**24 - 1
INT256_MAX: Final[int] = 2**255 - 1
INT256_MIN: Final[int] = -(2**255)

# V3 fees are expressed in hundredths of a bip (1e6 = 100%)
FEE_DENOMINATOR: Final[int] = 1_000_000

# V3 fee tiers (in hundredths of a bip)
V3_FEE_TIERS: List[int] = [100, 500, 3000, 10000]

DEFAULT_TOKEN_DECIMALS: Final[int] = 18

# =============================================================================
# ABI / REVERT DATA
# =============================================================================

# keccak256("Error(string)")[:4]
ERROR_SELECTOR: Final[bytes] = bytes.fromhex("08c379a0")
# keccak256("Panic(uint256)")[:4]
PANIC_SELECTOR: Final[bytes] = bytes.fromhex("4e487b71")

# Solidity panic code for checked arithmetic over/underflow
PANIC_ARITHMETIC: Final[int] = 0x11

# Params wire format version (see core/abi.py)
PARAMS_SCHEMA_VERSION: Final[int] = 1

# =============================================================================
# EVENTS
# =============================================================================

SETTLEMENT_EVENT: Final[str] = "FlashSwapSettled"
FLASH_EVENT: Final[str] = "Flash"
SWAP_EVENT: Final[str] = "Swap"


class PoolKind(str, Enum):
    """Simulated pool pricing models."""
    CONSTANT_PRODUCT = "CONSTANT_PRODUCT"
    FIXED_RATE = "FIXED_RATE"


class ErrorCode(str, Enum):
    """
    Error codes for every abort kind the engine can surface.

    The value doubles as the machine-readable kind; the human revert
    reason lives on the exception.
    """
    # Abort kinds
    UNAUTHORIZED_CALLBACK = "UNAUTHORIZED_CALLBACK"
    SLIPPAGE_VIOLATION = "SLIPPAGE_VIOLATION"
    INSUFFICIENT_REPAYMENT = "INSUFFICIENT_REPAYMENT"
    ARITHMETIC_OVERFLOW = "ARITHMETIC_OVERFLOW"
    EXTERNAL_CALL_FAILED = "EXTERNAL_CALL_FAILED"
    MALFORMED_PARAMS = "MALFORMED_PARAMS"

    # Caller / environment errors
    INVALID_INPUT = "INVALID_INPUT"
    UNKNOWN_POOL = "UNKNOWN_POOL"
    UNKNOWN_CONTRACT = "UNKNOWN_CONTRACT"
    REENTRANT_CALL = "REENTRANT_CALL"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"

    # Config
    CONFIG_INVALID = "CONFIG_INVALID"

    UNKNOWN = "UNKNOWN"
