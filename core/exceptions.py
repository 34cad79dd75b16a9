# PATH: core/exceptions.py
"""
core/exceptions.py - Typed exceptions for the flash-swap engine.

Every abort carries an ErrorCode (the kind) and a revert reason string
(what the caller sees, unchanged, at the top of the call tree).
"""

from typing import Any, Optional

from core.constants import ErrorCode, PANIC_ARITHMETIC


class FlashSwapError(Exception):
    """Base exception for the flash-swap engine."""

    default_code = ErrorCode.UNKNOWN
    default_reason = "FlashSwap: Unknown error"

    # True only for aborts that are the normal "no opportunity" outcome
    is_expected = False

    def __init__(
        self,
        message: str = "",
        code: Optional[ErrorCode] = None,
        reason: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code or self.default_code
        self.reason = reason or self.default_reason
        self.message = message or self.reason
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        return f"[{self.code.value}] {self.message}"

    def revert_data(self) -> bytes:
        """ABI-encoded revert payload for this error."""
        from core.abi import encode_revert_reason

        return encode_revert_reason(self.reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.code.value,
            "reason": self.reason,
            "message": self.message,
            "details": self.details,
        }


class UnauthorizedCallbackError(FlashSwapError):
    """Callback invoked by anyone other than the expected lending pool."""

    default_code = ErrorCode.UNAUTHORIZED_CALLBACK
    default_reason = "FlashSwap: Unauthorized callback"


class SlippageError(FlashSwapError):
    """Swap output below its configured minimum."""

    default_code = ErrorCode.SLIPPAGE_VIOLATION
    default_reason = "FlashSwap: Swap output below minimum"


class InsufficientRepaymentError(FlashSwapError):
    """Post-swap balance cannot cover the amount owed."""

    default_code = ErrorCode.INSUFFICIENT_REPAYMENT
    default_reason = "FlashSwap: Insufficient funds to repay loan"
    is_expected = True


class ArithmeticOverflowError(FlashSwapError):
    """Checked arithmetic left the uint256 range."""

    default_code = ErrorCode.ARITHMETIC_OVERFLOW
    default_reason = f"Panic(0x{PANIC_ARITHMETIC:x})"

    def revert_data(self) -> bytes:
        from core.abi import encode_panic

        return encode_panic(PANIC_ARITHMETIC)


class ExternalCallError(FlashSwapError):
    """
    An external primitive (pool, router, token) reported failure.

    The underlying reason is kept verbatim so callers can tell
    "LOK" from "Too little received".
    """

    default_code = ErrorCode.EXTERNAL_CALL_FAILED

    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=reason, reason=reason, details=details)


class MalformedParamsError(FlashSwapError):
    """Callback params could not be decoded or are inconsistent."""

    default_code = ErrorCode.MALFORMED_PARAMS
    default_reason = "FlashSwap: Malformed params"


class ValidationError(FlashSwapError):
    """Invalid caller input."""

    default_code = ErrorCode.INVALID_INPUT
    default_reason = "FlashSwap: Invalid input"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, details=details)


class UnknownPoolError(FlashSwapError):
    """Pool address does not resolve to a correctly-derived pool."""

    default_code = ErrorCode.UNKNOWN_POOL
    default_reason = "FlashSwap: Unknown pool"


class UnknownContractError(FlashSwapError):
    """No contract registered at an address."""

    default_code = ErrorCode.UNKNOWN_CONTRACT
    default_reason = "Call to non-contract"


class ReentrancyError(FlashSwapError):
    """A flash swap was initiated while another is in flight."""

    default_code = ErrorCode.REENTRANT_CALL
    default_reason = "FlashSwap: Reentrant call"


class InvariantViolationError(FlashSwapError):
    """Internal state machine or bookkeeping invariant broken."""

    default_code = ErrorCode.INVARIANT_VIOLATION
    default_reason = "FlashSwap: Invariant violation"


class ConfigError(FlashSwapError):
    """Deployment configuration is missing or invalid."""

    default_code = ErrorCode.CONFIG_INVALID
    default_reason = "FlashSwap: Invalid config"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, details=details)
