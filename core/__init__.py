# PATH: core/__init__.py
"""
core - Core utilities and models for the flash swap engine.

This package contains:
- models.py: Data models (PoolKey, ArbitrageParams, SettlementOutcome)
- constants.py: Enums and constants
- exceptions.py: Typed exceptions with error codes and revert reasons
- math.py: Checked uint256 arithmetic (no float)
- abi.py: Params and revert-reason codecs
- logging.py: Structured JSON logging
"""

from core.constants import (
    ErrorCode,
    PoolKind,
    V3_FEE_TIERS,
)
from core.exceptions import (
    ArithmeticOverflowError,
    ConfigError,
    ExternalCallError,
    FlashSwapError,
    InsufficientRepaymentError,
    InvariantViolationError,
    MalformedParamsError,
    ReentrancyError,
    SlippageError,
    UnauthorizedCallbackError,
    UnknownContractError,
    UnknownPoolError,
    ValidationError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    ArbitrageParams,
    CallbackContext,
    Event,
    FlashLoanRequest,
    PoolKey,
    PoolRef,
    SettlementEvent,
    SettlementOutcome,
    Token,
)

__all__ = [
    # Constants
    "ErrorCode",
    "PoolKind",
    "V3_FEE_TIERS",
    # Exceptions
    "ArithmeticOverflowError",
    "ConfigError",
    "ExternalCallError",
    "FlashSwapError",
    "InsufficientRepaymentError",
    "InvariantViolationError",
    "MalformedParamsError",
    "ReentrancyError",
    "SlippageError",
    "UnauthorizedCallbackError",
    "UnknownContractError",
    "UnknownPoolError",
    "ValidationError",
    # Models
    "ArbitrageParams",
    "CallbackContext",
    "Event",
    "FlashLoanRequest",
    "PoolKey",
    "PoolRef",
    "SettlementEvent",
    "SettlementOutcome",
    "Token",
    # Logging
    "get_logger",
    "setup_logging",
]
