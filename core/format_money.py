# PATH: core/format_money.py
"""
core/format_money.py - Safe money formatting.

No float money. All values are int (wei), str or Decimal; this module
only renders them for console narration and never raises.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union


def format_money(value: Union[str, Decimal, int, None], decimals: int = 6) -> str:
    """
    Safely format a money value to string with specified decimal places.

    Handles:
    - str: parse as Decimal, format
    - Decimal: format directly
    - int: convert to Decimal, format
    - bool: True=1, False=0
    - None: return "0.000000"

    Uses ROUND_HALF_UP for proper rounding (0.005 -> 0.01 with 2 decimals).

    Example:
        >>> format_money("123.45")
        '123.450000'
        >>> format_money(None)
        '0.000000'
    """
    zero = f"0.{'0' * decimals}" if decimals > 0 else "0"
    if value is None:
        return zero

    try:
        if isinstance(value, str):
            if not value.strip():
                return zero
            dec_value = Decimal(value.strip())
        elif isinstance(value, Decimal):
            dec_value = value
        elif isinstance(value, bool):
            # bool is a subclass of int
            dec_value = Decimal(1 if value else 0)
        else:
            dec_value = Decimal(str(value))

        with localcontext() as ctx:
            ctx.prec = 100
            quantize_str = "0." + "0" * decimals if decimals > 0 else "0"
            rounded = dec_value.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)

        if rounded == 0:
            rounded = abs(rounded)
        return f"{rounded:.{decimals}f}"

    except (InvalidOperation, ValueError, TypeError):
        return zero


def format_wei(amount: int, decimals: int = 18, places: int | None = None) -> str:
    """
    Format a signed wei amount in token units.

    Args:
        amount: Amount in smallest units (may be negative for PnL)
        decimals: Token decimals
        places: Decimal places to show (default: all token decimals)

    Example:
        >>> format_wei(1_000_500_000_000_000_000, 18, 4)
        '1.0005'
    """
    if places is None:
        places = decimals
    try:
        human = Decimal(int(amount)) / Decimal(10**decimals)
    except (InvalidOperation, ValueError, TypeError):
        return format_money(None, places)
    return format_money(human, places)
