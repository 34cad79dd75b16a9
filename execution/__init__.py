# PATH: execution/__init__.py
"""
Flash swap execution layer.

This package contains the settlement engine components:
- repayment: RepaymentCalculator (owed = borrowed + ceiling fee)
- swap_executor: SwapExecutor (one exact-input leg with slippage floor)
- state_machine: SettlementState transitions
- orchestrator: ArbitrageOrchestrator (flash callback handler)
- initiator: LoanInitiator (entry point)
- flash_swap: FlashSwap (deployed engine facade)
- scenario: local deployments built from YAML scenarios
"""

from execution.config import FlashSwapConfig, load_flash_swap_config
from execution.repayment import RepaymentCalculator
from execution.swap_executor import SwapExecutor
from execution.state_machine import (
    SettlementState,
    SettlementStateMachine,
    StateTransition,
    VALID_TRANSITIONS,
)
from execution.orchestrator import ArbitrageOrchestrator
from execution.initiator import LoanInitiator
from execution.flash_swap import FlashSwap
from execution.scenario import LocalDeployment, build_local_deployment, parse_rate

__all__ = [
    # Config
    "FlashSwapConfig",
    "load_flash_swap_config",
    # Components
    "RepaymentCalculator",
    "SwapExecutor",
    "ArbitrageOrchestrator",
    "LoanInitiator",
    "FlashSwap",
    # Local scenarios
    "LocalDeployment",
    "build_local_deployment",
    "parse_rate",
    # State machine
    "SettlementState",
    "SettlementStateMachine",
    "StateTransition",
    "VALID_TRANSITIONS",
]
