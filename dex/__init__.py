# PATH: dex/__init__.py
"""
dex/ - Exchange collaborators consumed by the engine.

Modules:
- pool_address: CREATE2 pool identity
- pools: simulated V3-style pools (flash + exact-input swap)
- factory: pool deployment at derived addresses
- router: exact-input single-pool router
"""

from dex.pool_address import POOL_INIT_CODE_HASH, UNISWAP_V3_FACTORY, compute_pool_address
from dex.pools import ConstantProductPool, FixedRatePool, SimulatedPool
from dex.factory import PoolFactory
from dex.router import TOO_LITTLE_RECEIVED, SwapRouter

__all__ = [
    "POOL_INIT_CODE_HASH",
    "UNISWAP_V3_FACTORY",
    "compute_pool_address",
    "ConstantProductPool",
    "FixedRatePool",
    "SimulatedPool",
    "PoolFactory",
    "TOO_LITTLE_RECEIVED",
    "SwapRouter",
]
