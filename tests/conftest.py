# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for flash swap tests.

Fixtures deploy a fresh in-process chain per test with the mainnet
Uniswap V3 factory/router addresses, so derived pool addresses match
the real deployment.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.constants import PoolKind
from chains.state import ChainState
from dex.factory import PoolFactory
from dex.pool_address import UNISWAP_V3_FACTORY
from dex.router import SwapRouter
from execution.config import FlashSwapConfig
from execution.flash_swap import FlashSwap

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
ROUTER = "0xE592427A0AEce92De3Edee1F18E0157C05861564"
ENGINE = "0x00000000000000000000000000000000F1A5E5A0"
OUTSIDER = "0x000000000000000000000000000000000000dEaD"

ONE_WETH = 10**18
ONE_USDC = 10**6


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture
def engine_config() -> FlashSwapConfig:
    return FlashSwapConfig(
        engine_address=ENGINE,
        factory_address=UNISWAP_V3_FACTORY,
        router_address=ROUTER,
    )


@pytest.fixture
def chain() -> ChainState:
    return ChainState(chain_id=1)


@pytest.fixture
def factory(chain, engine_config) -> PoolFactory:
    return PoolFactory(chain, engine_config.factory_address, engine_config.pool_init_code_hash)


@pytest.fixture
def router(chain, engine_config, factory) -> SwapRouter:
    return SwapRouter(chain, engine_config.router_address, factory)


@pytest.fixture
def engine(chain, engine_config, router) -> FlashSwap:
    return FlashSwap(chain, engine_config, router)


@pytest.fixture
def fixed_rate_pools(chain, factory):
    """
    Pool A (0.05%) at 3000 USDC/WETH both ways; pool B (0.3%) pays
    1.01 WETH per 3000 USDC. A 1 WETH round trip realizes 1.01 WETH.
    """
    pool_a = factory.create_pool(
        WETH, USDC, 500,
        kind=PoolKind.FIXED_RATE,
        rate_0_to_1=(ONE_WETH, 3000 * ONE_USDC),
        rate_1_to_0=(3000 * ONE_USDC, ONE_WETH),
    )
    pool_b = factory.create_pool(
        USDC, WETH, 3000,
        kind=PoolKind.FIXED_RATE,
        rate_0_to_1=(101 * 10**16, 3000 * ONE_USDC),
        rate_1_to_0=(3000 * ONE_USDC, ONE_WETH),
    )
    for pool in (pool_a, pool_b):
        chain.mint(WETH, pool.address, 100 * ONE_WETH)
        chain.mint(USDC, pool.address, 300_000 * ONE_USDC)
    return pool_a, pool_b


@pytest.fixture
def balanced_pools(chain, factory):
    """Two constant-product pools at the same 3000 USDC/WETH price."""
    pool_a = factory.create_pool(WETH, USDC, 500)
    pool_b = factory.create_pool(USDC, WETH, 3000)
    for pool in (pool_a, pool_b):
        chain.mint(WETH, pool.address, 1_000 * ONE_WETH)
        chain.mint(USDC, pool.address, 3_000_000 * ONE_USDC)
    return pool_a, pool_b
