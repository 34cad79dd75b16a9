# PATH: execution/flash_swap.py
"""
execution/flash_swap.py - The deployed flash swap engine.

Registers itself on the chain at config.engine_address and exposes the
two entry points: initiate_flash_swap (external caller) and
uniswap_v3_flash_callback (lending pool).
"""

from core.models import SettlementOutcome
from chains.state import ChainState
from dex.router import SwapRouter
from execution.config import FlashSwapConfig
from execution.initiator import LoanInitiator
from execution.orchestrator import ArbitrageOrchestrator
from execution.repayment import RepaymentCalculator
from execution.swap_executor import SwapExecutor


class FlashSwap:
    """
    Usage:
        engine = FlashSwap(chain, config, router)
        outcome = engine.initiate_flash_swap(pool_a, 0, 10**18, params.encode())
    """

    def __init__(self, chain: ChainState, config: FlashSwapConfig, router: SwapRouter):
        self.chain = chain
        self.config = config
        self.address = chain.register(config.engine_address, self)

        self.calculator = RepaymentCalculator()
        self.executor = SwapExecutor(chain, router, self.address)
        self.orchestrator = ArbitrageOrchestrator(chain, config, self.executor, self.calculator)
        self.initiator = LoanInitiator(chain, config, self.orchestrator)

    def initiate_flash_swap(
        self,
        pool: str,
        amount0: int,
        amount1: int,
        params: bytes,
    ) -> SettlementOutcome:
        return self.initiator.initiate(pool, amount0, amount1, params)

    def uniswap_v3_flash_callback(
        self,
        sender: str,
        fee0: int,
        fee1: int,
        data: bytes,
    ) -> SettlementOutcome:
        return self.orchestrator.on_flash_callback(sender, fee0, fee1, data)

    def balance_of(self, token: str) -> int:
        return self.chain.balance_of(token, self.address)
