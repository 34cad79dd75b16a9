# PATH: core/abi.py
"""
core/abi.py - ABI codec for callback params and revert payloads.

Params wire format (version 1), a static tuple of seven words:

    (address intermediateAsset, address poolA, address poolB,
     uint24 feeTierA, uint24 feeTierB,
     uint256 minOutLeg1, uint256 minOutLeg2)

Anything that does not decode to exactly that layout is rejected with
MalformedParamsError; nothing is guessed or truncated.
"""

from typing import Optional

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError

from core.constants import ERROR_SELECTOR, PANIC_SELECTOR, PARAMS_SCHEMA_VERSION
from core.exceptions import FlashSwapError, MalformedParamsError, ValidationError
from core.logging import get_logger
from core.models import ArbitrageParams

logger = get_logger(__name__)


PARAMS_ABI_TYPES: dict[int, tuple[str, ...]] = {
    1: (
        "address",
        "address",
        "address",
        "uint24",
        "uint24",
        "uint256",
        "uint256",
    ),
}


def _abi_types(version: int) -> tuple[str, ...]:
    if version not in PARAMS_ABI_TYPES:
        raise MalformedParamsError(
            f"Unsupported params version: {version}",
            details={"version": version, "supported": sorted(PARAMS_ABI_TYPES)},
        )
    return PARAMS_ABI_TYPES[version]


# =============================================================================
# ARBITRAGE PARAMS
# =============================================================================

def encode_arbitrage_params(
    params: ArbitrageParams,
    version: int = PARAMS_SCHEMA_VERSION,
) -> bytes:
    """Encode params into the callback byte blob."""
    types = _abi_types(version)
    try:
        return encode(
            list(types),
            [
                params.intermediate_asset,
                params.pool_a,
                params.pool_b,
                params.fee_tier_a,
                params.fee_tier_b,
                params.min_out_leg1,
                params.min_out_leg2,
            ],
        )
    except EncodingError as e:
        raise ValidationError(
            f"Cannot encode params: {e}",
            {"params": repr(params)},
        ) from e


def decode_arbitrage_params(
    data: bytes,
    version: int = PARAMS_SCHEMA_VERSION,
) -> ArbitrageParams:
    """
    Decode the callback byte blob.

    Raises:
        MalformedParamsError: wrong type, length, padding or field values
    """
    types = _abi_types(version)

    if not isinstance(data, (bytes, bytearray)):
        raise MalformedParamsError(
            "Params must be bytes",
            details={"type": type(data).__name__},
        )

    expected_length = 32 * len(types)
    if len(data) != expected_length:
        raise MalformedParamsError(
            f"Params length {len(data)} != {expected_length}",
            details={"length": len(data), "expected": expected_length},
        )

    try:
        values = decode(list(types), bytes(data))
    except DecodingError as e:
        raise MalformedParamsError(
            f"Params decode failed: {e}",
            details={"error": type(e).__name__},
        ) from e

    try:
        return ArbitrageParams(*values)
    except FlashSwapError as e:
        raise MalformedParamsError(
            f"Params out of range: {e.message}",
            details=e.details,
        ) from e


# =============================================================================
# REVERT PAYLOADS
# =============================================================================

def encode_revert_reason(reason: str) -> bytes:
    """Error(string) revert payload."""
    return ERROR_SELECTOR + encode(["string"], [reason])


def encode_panic(code: int) -> bytes:
    """Panic(uint256) revert payload."""
    return PANIC_SELECTOR + encode(["uint256"], [code])


def decode_revert_reason(data: bytes | str | None) -> Optional[str]:
    """
    Decode a revert payload into a readable reason.

    Returns:
        The Error(string) message, "Panic(0x..)" for panics, or None when
        the payload is empty or not a recognised error.
    """
    if data is None:
        return None

    if isinstance(data, str):
        hex_data = data[2:] if data.startswith("0x") else data
        try:
            data = bytes.fromhex(hex_data)
        except ValueError:
            logger.debug("Revert data is not hex", extra={"context": {"data": data[:66]}})
            return None

    if len(data) < 4:
        return None

    selector, payload = bytes(data[:4]), bytes(data[4:])
    try:
        if selector == ERROR_SELECTOR:
            return decode(["string"], payload)[0]
        if selector == PANIC_SELECTOR:
            (code,) = decode(["uint256"], payload)
            return f"Panic(0x{code:x})"
    except (DecodingError, UnicodeDecodeError) as e:
        logger.debug(
            "Decoding revert reason failed",
            extra={"context": {"selector": selector.hex(), "error": str(e)}},
        )
    return None
