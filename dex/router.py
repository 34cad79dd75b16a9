# PATH: dex/router.py
"""
dex/router.py - Simulated exact-input swap router.

Mirrors ISwapRouter.exactInputSingle: resolve the pool for
(tokenIn, tokenOut, fee) through the factory, pay from the caller,
enforce amountOutMinimum.
"""

from typing import Optional

from core.exceptions import ExternalCallError
from core.math import require_uint24, require_uint256
from chains.state import ChainState
from dex.factory import PoolFactory

# Revert reason used by the router when the output floor is missed
TOO_LITTLE_RECEIVED = "Too little received"


class SwapRouter:
    """Exact-input single-pool router."""

    def __init__(self, chain: ChainState, address: str, factory: PoolFactory):
        self.chain = chain
        self.address = chain.register(address, self)
        self.factory = factory

    def pool_for(self, token_in: str, token_out: str, fee: int) -> Optional[str]:
        return self.factory.get_pool(token_in, token_out, fee)

    def exact_input_single(
        self,
        sender: str,
        token_in: str,
        token_out: str,
        fee: int,
        recipient: str,
        amount_in: int,
        amount_out_minimum: int,
    ) -> int:
        """
        Swap exactly amount_in of token_in for token_out.

        Raises:
            ExternalCallError: no pool for the fee tier, pool failure,
                or output below amount_out_minimum ("Too little received")
        """
        require_uint24(fee, "fee")
        require_uint256(amount_in, "amount_in")
        require_uint256(amount_out_minimum, "amount_out_minimum")

        pool_address = self.pool_for(token_in, token_out, fee)
        if pool_address is None:
            raise ExternalCallError(
                "Invalid pool",
                details={"token_in": token_in, "token_out": token_out, "fee": fee},
            )
        pool = self.chain.get_contract(pool_address)

        with self.chain.atomic():
            amount_out = pool.swap(
                payer=sender,
                recipient=recipient,
                token_in=token_in,
                amount_in=amount_in,
            )
            if amount_out < amount_out_minimum:
                raise ExternalCallError(
                    TOO_LITTLE_RECEIVED,
                    details={
                        "pool": pool_address,
                        "amount_out": str(amount_out),
                        "amount_out_minimum": str(amount_out_minimum),
                    },
                )
        return amount_out
