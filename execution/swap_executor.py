# PATH: execution/swap_executor.py
"""
execution/swap_executor.py - Single exact-input swap leg.

Wraps the router's exactInputSingle:
- the named pool must be the pool the router resolves for the pair/fee
- min_out is a hard floor; a miss raises SlippageError, never truncates
- the leg is atomic: filled at >= min_out, or balances untouched
"""

from core.exceptions import ExternalCallError, SlippageError, ValidationError
from core.logging import get_logger
from core.math import require_uint24, require_uint256
from core.validators import normalize_address, same_address
from chains.state import ChainState
from dex.router import TOO_LITTLE_RECEIVED, SwapRouter

logger = get_logger(__name__)


class SwapExecutor:
    """
    Executes swaps on behalf of the engine's holdings.

    Usage:
        executor = SwapExecutor(chain, router, engine_address)
        out = executor.swap_exact_in(pool, 500, weth, usdc, amount, min_out)
    """

    def __init__(self, chain: ChainState, router: SwapRouter, holder: str):
        self.chain = chain
        self.router = router
        self.holder = normalize_address(holder, "holder")

    def swap_exact_in(
        self,
        pool: str,
        fee_tier: int,
        asset_in: str,
        asset_out: str,
        amount_in: int,
        min_out: int,
        leg: int = 0,
    ) -> int:
        """
        Swap exactly amount_in of asset_in for asset_out on pool.

        Args:
            pool: Pool the trade must execute against
            fee_tier: Pool fee tier (hundredths of a bip)
            asset_in: Token sold
            asset_out: Token bought
            amount_in: Exact input, > 0
            min_out: Output floor (0 accepts any output)
            leg: Leg number, only used in reasons and logs

        Returns:
            Output amount received by the holder

        Raises:
            ValidationError: bad amounts or pool mismatch
            SlippageError: output below min_out
            ExternalCallError: router/pool failure, reason unchanged
        """
        require_uint256(amount_in, "amount_in")
        require_uint256(min_out, "min_out")
        require_uint24(fee_tier, "fee_tier")
        if amount_in == 0:
            raise ValidationError("amount_in must be > 0", {"leg": leg})

        resolved = self.router.pool_for(asset_in, asset_out, fee_tier)
        if resolved is None or not same_address(resolved, pool):
            raise ValidationError(
                "Pool mismatch",
                {
                    "leg": leg,
                    "pool": pool,
                    "resolved": resolved,
                    "fee_tier": fee_tier,
                },
            )

        slippage_reason = f"FlashSwap: Swap {leg} output below minimum"
        with self.chain.atomic():
            try:
                amount_out = self.router.exact_input_single(
                    sender=self.holder,
                    token_in=asset_in,
                    token_out=asset_out,
                    fee=fee_tier,
                    recipient=self.holder,
                    amount_in=amount_in,
                    amount_out_minimum=min_out,
                )
            except ExternalCallError as e:
                if e.reason != TOO_LITTLE_RECEIVED:
                    raise
                raise SlippageError(
                    slippage_reason,
                    reason=slippage_reason,
                    details={"leg": leg, **e.details},
                ) from e

            if amount_out < min_out:
                raise SlippageError(
                    slippage_reason,
                    reason=slippage_reason,
                    details={"leg": leg, "amount_out": str(amount_out), "min_out": str(min_out)},
                )

        logger.debug(
            f"Swap leg {leg} filled",
            extra={
                "context": {
                    "pool": pool,
                    "asset_in": asset_in,
                    "asset_out": asset_out,
                    "amount_in": str(amount_in),
                    "amount_out": str(amount_out),
                    "min_out": str(min_out),
                }
            },
        )
        return amount_out
