# PATH: dex/factory.py
"""
dex/factory.py - Simulated pool factory.

Deploys pools at their CREATE2 address so pool identity can be
re-derived from (factory, init code hash, key) alone.
"""

from typing import Any, Optional

from core.constants import PoolKind, V3_FEE_TIERS
from core.exceptions import ExternalCallError, ValidationError
from core.logging import get_logger
from core.math import require_uint24
from core.models import PoolKey
from core.validators import normalize_address
from chains.state import ChainState
from dex.pool_address import POOL_INIT_CODE_HASH, compute_pool_address
from dex.pools import POOL_CLASSES, SimulatedPool

logger = get_logger(__name__)


class PoolFactory:
    """
    Usage:
        factory = PoolFactory(chain, factory_address)
        pool = factory.create_pool(weth, usdc, 500)
    """

    def __init__(
        self,
        chain: ChainState,
        address: str,
        init_code_hash: str = POOL_INIT_CODE_HASH,
    ):
        self.chain = chain
        self.address = chain.register(address, self)
        self.init_code_hash = init_code_hash
        self.enabled_fees: set[int] = set(V3_FEE_TIERS)
        self._pools: dict[PoolKey, str] = {}

    def enable_fee_amount(self, fee: int) -> None:
        require_uint24(fee, "fee")
        if fee >= 1_000_000:
            raise ValidationError("Fee must be below 100%", {"fee": fee})
        self.enabled_fees.add(fee)

    def create_pool(
        self,
        token_a: str,
        token_b: str,
        fee: int,
        kind: PoolKind = PoolKind.CONSTANT_PRODUCT,
        **pool_kwargs: Any,
    ) -> SimulatedPool:
        """
        Deploy a pool for (token_a, token_b, fee).

        Raises:
            ValidationError: fee tier not enabled or identical tokens
            ExternalCallError: pool already exists
        """
        if fee not in self.enabled_fees:
            raise ValidationError(
                f"Fee tier not enabled: {fee}",
                {"fee": fee, "enabled": sorted(self.enabled_fees)},
            )
        key = PoolKey.from_tokens(token_a, token_b, fee)
        if key in self._pools:
            raise ExternalCallError("Pool exists", details={"pool": self._pools[key]})

        address = compute_pool_address(self.address, key, self.init_code_hash)
        pool = POOL_CLASSES[PoolKind(kind)](self.chain, address, key, **pool_kwargs)
        self.chain.register(address, pool)
        self._pools[key] = address

        logger.debug(
            "Pool created",
            extra={"context": {"pool": address, "token0": key.token0, "token1": key.token1, "fee": fee}},
        )
        return pool

    def get_pool(self, token_a: str, token_b: str, fee: int) -> Optional[str]:
        token_a = normalize_address(token_a, "token_a")
        token_b = normalize_address(token_b, "token_b")
        if token_a == token_b:
            return None
        return self._pools.get(PoolKey.from_tokens(token_a, token_b, fee))
