# PATH: core/validators.py
"""
core/validators.py - Input validators.

CONTRACTS:
- normalize_address(): always returns an EIP-55 checksummed address or raises
- same_address(): case-insensitive address comparison
- require_exactly_one_nonzero(): single-asset borrow rule
"""

from typing import Any

from eth_utils import is_address, to_checksum_address

from core.exceptions import ValidationError


def normalize_address(value: Any, name: str = "address") -> str:
    """
    Normalize an address to checksummed form.

    Accepts hex strings (any case) and 20-byte values.
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise ValidationError(
                f"{name} must be 20 bytes",
                {"name": name, "length": len(value)},
            )
        return to_checksum_address("0x" + bytes(value).hex())

    if not isinstance(value, str) or not is_address(value.lower()):
        raise ValidationError(
            f"{name} is not a valid address",
            {"name": name, "value": repr(value)},
        )
    return to_checksum_address(value.lower())


def same_address(a: str, b: str) -> bool:
    """Compare two addresses ignoring checksum case."""
    return a.lower() == b.lower()


def require_exactly_one_nonzero(amount0: int, amount1: int) -> None:
    """Exactly one of the borrow amounts must be nonzero."""
    if (amount0 == 0) == (amount1 == 0):
        raise ValidationError(
            "Exactly one of amount0/amount1 must be nonzero",
            {"amount0": str(amount0), "amount1": str(amount1)},
        )
