# PATH: core/math.py
"""
core/math.py - Checked integer math.

CRITICAL: No float allowed in amounts, fees or PnL.
All on-chain amounts are uint256 ints; every operation is range-checked
and raises ArithmeticOverflowError instead of wrapping or clamping.
"""

from decimal import Decimal, ROUND_DOWN, InvalidOperation

from core.constants import INT256_MAX, INT256_MIN, UINT24_MAX, UINT256_MAX
from core.exceptions import ArithmeticOverflowError, ValidationError


# =============================================================================
# RANGE CHECKS
# =============================================================================

def require_uint256(value: int, name: str = "value") -> int:
    """Return value if it is an int in [0, 2**256), else raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{name} must be an int",
            {"name": name, "type": type(value).__name__},
        )
    if value < 0 or value > UINT256_MAX:
        raise ArithmeticOverflowError(
            f"{name} out of uint256 range",
            details={"name": name, "value": str(value)},
        )
    return value


def require_uint24(value: int, name: str = "value") -> int:
    """Return value if it is an int in [0, 2**24), else raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{name} must be an int",
            {"name": name, "type": type(value).__name__},
        )
    if value < 0 or value > UINT24_MAX:
        raise ValidationError(
            f"{name} out of uint24 range",
            {"name": name, "value": value},
        )
    return value


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================

def checked_add(a: int, b: int) -> int:
    result = a + b
    if result > UINT256_MAX:
        raise ArithmeticOverflowError(
            "uint256 addition overflow",
            details={"a": str(a), "b": str(b)},
        )
    return result


def checked_sub(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticOverflowError(
            "uint256 subtraction underflow",
            details={"a": str(a), "b": str(b)},
        )
    return a - b


def checked_mul(a: int, b: int) -> int:
    result = a * b
    if result > UINT256_MAX:
        raise ArithmeticOverflowError(
            "uint256 multiplication overflow",
            details={"a": str(a), "b": str(b)},
        )
    return result


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) with full-precision intermediate.

    Like FullMath.mulDiv the product may exceed 256 bits; only the
    result must fit.
    """
    if denominator == 0:
        raise ArithmeticOverflowError("mul_div by zero", details={"a": str(a), "b": str(b)})
    result = (a * b) // denominator
    if result > UINT256_MAX:
        raise ArithmeticOverflowError(
            "mul_div result overflow",
            details={"a": str(a), "b": str(b), "denominator": str(denominator)},
        )
    return result


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """ceil(a * b / denominator), the rounding V3 pools use for flash fees."""
    result = mul_div(a, b, denominator)
    if (a * b) % denominator:
        result = checked_add(result, 1)
    return result


def signed_diff(a: int, b: int) -> int:
    """a - b as an int256 (profit may be negative)."""
    result = a - b
    if result > INT256_MAX or result < INT256_MIN:
        raise ArithmeticOverflowError(
            "int256 difference overflow",
            details={"a": str(a), "b": str(b)},
        )
    return result


# =============================================================================
# TOKEN AMOUNT CONVERSIONS
# =============================================================================

def wei_to_human(wei: int, decimals: int) -> Decimal:
    """
    Convert wei amount to human-readable Decimal.

    Example: wei_to_human(1000000, 6) -> Decimal('1')  # 1 USDC
    """
    if decimals < 0 or decimals > 36:
        raise ValidationError(f"Invalid decimals: {decimals}")
    return Decimal(wei) / Decimal(10**decimals)


def human_to_wei(amount: Decimal | str | int, decimals: int) -> int:
    """
    Convert human-readable amount to wei (truncating dust).

    Example: human_to_wei('1.0005', 18) -> 1000500000000000000
    """
    if decimals < 0 or decimals > 36:
        raise ValidationError(f"Invalid decimals: {decimals}")
    value = safe_decimal(amount)
    return int((value * Decimal(10**decimals)).to_integral_value(rounding=ROUND_DOWN))


# =============================================================================
# SAFE CONVERSIONS (NO FLOAT)
# =============================================================================

def safe_decimal(value: int | str | Decimal) -> Decimal:
    """
    Safely convert value to Decimal.

    Raises ValidationError if float is passed or conversion fails.
    """
    if isinstance(value, float):
        raise ValidationError(
            "Float values are not allowed. Use int, str, or Decimal.",
            {"value": value, "type": type(value).__name__}
        )

    try:
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValidationError(
            f"Cannot convert to Decimal: {value}",
            {"value": value, "type": type(value).__name__, "error": str(e)}
        )
