# PATH: execution/scenario.py
"""
execution/scenario.py - Local deployments built from YAML scenarios.

A scenario describes tokens, pools (pricing model, reserves) and the
flash swap to run. build_local_deployment() turns it into a fresh
ChainState with a factory, router and FlashSwap engine deployed at the
addresses in FlashSwapConfig.

Scenario amounts are human units (str or int, never float). Fixed rates
are "output per input" in human units, keyed by the input symbol, and
may be written as a quotient ("1.01/3000") to stay exact.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from core.constants import DEFAULT_TOKEN_DECIMALS, PoolKind
from core.exceptions import ConfigError, FlashSwapError
from core.logging import get_logger
from core.math import human_to_wei, safe_decimal
from core.models import ArbitrageParams, Token
from core.validators import same_address
from chains.state import ChainState
from dex.factory import PoolFactory
from dex.pools import SimulatedPool
from dex.router import SwapRouter
from execution.config import FlashSwapConfig
from execution.flash_swap import FlashSwap

logger = get_logger(__name__)


def _decimal(value: Any, where: str) -> Decimal:
    try:
        return safe_decimal(value)
    except FlashSwapError as e:
        raise ConfigError(
            f"Invalid amount in {where} (quote decimals as strings)",
            {"value": repr(value)},
        ) from e


def parse_rate(value: Any, where: str) -> tuple[int, int]:
    """
    Parse a human rate into an exact (numerator, denominator) pair.

    Examples: "3000" -> (3000, 1), "1.01/3000" -> (101, 300000)
    """
    if isinstance(value, str) and "/" in value:
        num_text, den_text = value.split("/", 1)
        num_n, num_d = _decimal(num_text.strip(), where).as_integer_ratio()
        den_n, den_d = _decimal(den_text.strip(), where).as_integer_ratio()
        numerator, denominator = num_n * den_d, num_d * den_n
    else:
        numerator, denominator = _decimal(value, where).as_integer_ratio()

    if numerator < 0 or denominator <= 0:
        raise ConfigError(f"Invalid rate in {where}", {"rate": str(value)})
    return numerator, denominator


@dataclass
class LocalDeployment:
    """Everything a local flash swap run needs, already deployed."""

    chain: ChainState
    config: FlashSwapConfig
    factory: PoolFactory
    router: SwapRouter
    engine: FlashSwap
    tokens: dict[str, Token] = field(default_factory=dict)
    pools: dict[str, SimulatedPool] = field(default_factory=dict)
    flash: dict[str, Any] = field(default_factory=dict)

    def token(self, symbol: str) -> Token:
        try:
            return self.tokens[symbol]
        except KeyError:
            raise ConfigError(f"Unknown token: {symbol}", {"known": sorted(self.tokens)}) from None

    def pool(self, name: str) -> SimulatedPool:
        try:
            return self.pools[name]
        except KeyError:
            raise ConfigError(f"Unknown pool: {name}", {"known": sorted(self.pools)}) from None

    def to_wei(self, symbol: str, amount: Any) -> int:
        return human_to_wei(_decimal(amount, symbol), self.token(symbol).decimals)

    def borrow_amounts(self, pool_name: str, symbol: str, amount: int) -> tuple[int, int]:
        """(amount0, amount1) borrowing amount of symbol from the named pool."""
        pool = self.pool(pool_name)
        token = self.token(symbol)
        if token.address == pool.token0:
            return amount, 0
        if token.address == pool.token1:
            return 0, amount
        raise ConfigError(
            f"{symbol} is not in {pool_name}",
            {"pool": pool.address, "token": token.address},
        )

    def build_params(
        self,
        lending_pool: str,
        swap_pool: str,
        borrow_symbol: str,
        min_out_leg1: int,
        min_out_leg2: int,
    ) -> ArbitrageParams:
        pool_a = self.pool(lending_pool)
        pool_b = self.pool(swap_pool)
        return ArbitrageParams(
            intermediate_asset=pool_a.key.other(self.token(borrow_symbol).address),
            pool_a=pool_a.address,
            pool_b=pool_b.address,
            fee_tier_a=pool_a.fee,
            fee_tier_b=pool_b.fee,
            min_out_leg1=min_out_leg1,
            min_out_leg2=min_out_leg2,
        )

    def engine_balances(self) -> dict[str, int]:
        return {
            symbol: self.engine.balance_of(token.address)
            for symbol, token in self.tokens.items()
        }


# =============================================================================
# BUILDER
# =============================================================================

def _section(scenario: dict[str, Any], name: str) -> dict[str, Any]:
    section = scenario.get(name)
    if not isinstance(section, dict) or not section:
        raise ConfigError(f"Scenario needs a non-empty '{name}' mapping", {"section": name})
    return section


def _build_pool(
    deployment: LocalDeployment,
    name: str,
    entry: dict[str, Any],
) -> SimulatedPool:
    symbols = entry.get("tokens")
    if not isinstance(symbols, list) or len(symbols) != 2:
        raise ConfigError(f"Pool {name} needs exactly two tokens", {"pool": name})
    token_a, token_b = (deployment.token(s) for s in symbols)

    try:
        kind = PoolKind(str(entry.get("kind", PoolKind.CONSTANT_PRODUCT.value)).upper())
    except ValueError:
        raise ConfigError(f"Unknown pool kind for {name}", {"kind": entry.get("kind")}) from None

    pool_kwargs: dict[str, Any] = {}
    if kind == PoolKind.FIXED_RATE:
        rates = entry.get("rates") or {}
        missing = [s for s in symbols if s not in rates]
        if missing:
            raise ConfigError(f"Pool {name} is missing rates for {missing}", {"pool": name})
        # Human rate -> raw units: scale by 10^(decimals_out - decimals_in)
        for token_in, token_out in ((token_a, token_b), (token_b, token_a)):
            numerator, denominator = parse_rate(rates[token_in.symbol], f"{name}.rates")
            raw = (
                numerator * 10**token_out.decimals,
                denominator * 10**token_in.decimals,
            )
            direction = "rate_0_to_1" if int(token_in.address, 16) < int(token_out.address, 16) else "rate_1_to_0"
            pool_kwargs[direction] = raw

    pool = deployment.factory.create_pool(
        token_a.address,
        token_b.address,
        entry.get("fee"),
        kind=kind,
        **pool_kwargs,
    )

    for symbol, amount in (entry.get("reserves") or {}).items():
        deployment.chain.mint(
            deployment.token(symbol).address,
            pool.address,
            deployment.to_wei(symbol, amount),
        )
    return pool


def _check_reference_pools(
    deployment: LocalDeployment,
    reference_pools: dict[str, Any],
) -> None:
    """Pools named in the reference deployment must land on its addresses."""
    for name, pool in deployment.pools.items():
        expected = (reference_pools.get(name) or {}).get("address")
        if expected is None:
            continue
        if not same_address(pool.address, expected):
            raise ConfigError(
                f"Pool {name} deployed at {pool.address}, reference deployment has {expected}",
                {"pool": name, "deployed": pool.address, "reference": expected},
            )


def build_local_deployment(
    scenario: dict[str, Any],
    config: FlashSwapConfig,
    chain: Optional[ChainState] = None,
    reference: Optional[dict[str, Any]] = None,
) -> LocalDeployment:
    """
    Deploy a scenario on a fresh (or given) chain.

    Args:
        scenario: Parsed scenario mapping (see config/scenario_local.yaml)
        config: Engine deployment addresses
        reference: Parsed deployment file. Its tokens fill in any the
            scenario does not declare, and its pool addresses are checked
            against the CREATE2 addresses the scenario pools land on.

    Returns:
        LocalDeployment with every pool funded
    """
    chain = chain or ChainState(chain_id=config.chain_id)
    factory = PoolFactory(chain, config.factory_address, config.pool_init_code_hash)
    for fee in scenario.get("extra_fee_tiers", []):
        factory.enable_fee_amount(fee)
    router = SwapRouter(chain, config.router_address, factory)
    engine = FlashSwap(chain, config, router)

    deployment = LocalDeployment(
        chain=chain,
        config=config,
        factory=factory,
        router=router,
        engine=engine,
        flash=dict(scenario.get("flash") or {}),
    )

    reference = reference or {}
    tokens = dict(reference.get("tokens") or {})
    scenario_tokens = scenario.get("tokens") or {}
    if not isinstance(scenario_tokens, dict):
        raise ConfigError("Scenario 'tokens' must be a mapping", {"section": "tokens"})
    tokens.update(scenario_tokens)
    for symbol, entry in _section({"tokens": tokens}, "tokens").items():
        if not isinstance(entry, dict) or "address" not in entry:
            raise ConfigError(f"Token {symbol} needs an address", {"token": symbol})
        deployment.tokens[symbol] = Token(
            symbol=symbol,
            address=entry["address"],
            decimals=entry.get("decimals", DEFAULT_TOKEN_DECIMALS),
        )

    for name, entry in _section(scenario, "pools").items():
        if not isinstance(entry, dict):
            raise ConfigError(f"Pool {name} must be a mapping", {"pool": name})
        deployment.pools[name] = _build_pool(deployment, name, entry)
    _check_reference_pools(deployment, reference.get("pools") or {})

    for symbol, amount in (scenario.get("engine_funding") or {}).items():
        chain.mint(deployment.token(symbol).address, engine.address, deployment.to_wei(symbol, amount))

    logger.info(
        "Local deployment ready",
        extra={
            "context": {
                "scenario": scenario.get("name", "unnamed"),
                "engine": engine.address,
                "pools": {n: p.address for n, p in deployment.pools.items()},
            }
        },
    )
    return deployment
