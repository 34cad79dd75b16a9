# PATH: execution/repayment.py
"""
execution/repayment.py - Flash loan repayment math.

owed = borrowed + ceil(borrowed * fee / 1e6)

Rounds up, exactly like the lending pool's own fee check; rounding down
would leave the pool one unit short and the flash would revert.
"""

from core.constants import FEE_DENOMINATOR
from core.exceptions import ValidationError
from core.math import checked_add, mul_div_rounding_up, require_uint24, require_uint256


class RepaymentCalculator:
    """Pure, stateless repayment calculator."""

    @staticmethod
    def _require_fee_tier(fee_tier: int) -> int:
        require_uint24(fee_tier, "fee_tier")
        if fee_tier >= FEE_DENOMINATOR:
            raise ValidationError(
                "Fee tier must be below 100%",
                {"fee_tier": fee_tier, "denominator": FEE_DENOMINATOR},
            )
        return fee_tier

    def flash_fee(self, amount: int, fee_tier: int) -> int:
        """Fee on amount at fee_tier (hundredths of a bip), rounded up."""
        require_uint256(amount, "amount")
        self._require_fee_tier(fee_tier)
        if fee_tier == 0 or amount == 0:
            return 0
        return mul_div_rounding_up(amount, fee_tier, FEE_DENOMINATOR)

    def owed(self, borrowed: int, fee_tier: int) -> int:
        """Total owed back for borrowed at fee_tier."""
        return checked_add(borrowed, self.flash_fee(borrowed, fee_tier))

    def owed_with_reported_fee(self, borrowed: int, reported_fee: int) -> int:
        """Total owed using the fee the lending pool reported."""
        require_uint256(borrowed, "borrowed")
        require_uint256(reported_fee, "reported_fee")
        return checked_add(borrowed, reported_fee)
