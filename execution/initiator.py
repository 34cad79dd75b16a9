# PATH: execution/initiator.py
"""
execution/initiator.py - Flash swap entry point.

initiate() resolves and verifies the lending pool, marks the request as
in flight on the orchestrator and calls the pool's flash primitive, all
inside one atomic scope. The pool calls back synchronously before
flash() returns, so by the time initiate() returns the swap has either
committed or been unwound completely.
"""

from core.exceptions import (
    FlashSwapError,
    InvariantViolationError,
    UnknownContractError,
    UnknownPoolError,
    ValidationError,
)
from core.logging import get_logger, log_settlement
from core.math import require_uint256
from core.models import FlashLoanRequest, PoolKey, PoolRef, SettlementOutcome
from core.validators import normalize_address, require_exactly_one_nonzero, same_address
from chains.state import ChainState
from dex.pool_address import compute_pool_address
from execution.config import FlashSwapConfig
from execution.orchestrator import ArbitrageOrchestrator

logger = get_logger(__name__)


class LoanInitiator:
    """Requests single-asset flash loans on behalf of the engine."""

    def __init__(
        self,
        chain: ChainState,
        config: FlashSwapConfig,
        orchestrator: ArbitrageOrchestrator,
    ):
        self.chain = chain
        self.config = config
        self.orchestrator = orchestrator

    def resolve_pool(self, pool_address: str) -> PoolRef:
        """
        Resolve pool_address into a verified PoolRef.

        The contract must expose token0/token1/fee and live at the address
        the configured factory would deploy that key to.
        """
        address = normalize_address(pool_address, "pool")
        try:
            pool = self.chain.get_contract(address)
        except UnknownContractError as e:
            raise UnknownPoolError(
                f"No pool at {address}",
                details={"pool": address},
            ) from e

        try:
            key = PoolKey(pool.token0, pool.token1, pool.fee)
        except (AttributeError, FlashSwapError) as e:
            raise UnknownPoolError(
                f"Contract at {address} is not a pool",
                details={"pool": address, "error": str(e)},
            ) from e

        expected = compute_pool_address(
            self.config.factory_address,
            key,
            self.config.pool_init_code_hash,
        )
        if not same_address(address, expected):
            raise UnknownPoolError(
                f"Pool {address} was not deployed by the configured factory",
                details={"pool": address, "expected": expected},
            )
        return PoolRef(address=address, key=key)

    def initiate(
        self,
        pool_address: str,
        amount0: int,
        amount1: int,
        params: bytes,
    ) -> SettlementOutcome:
        """
        Borrow amount0 of token0 or amount1 of token1 from the pool and run
        the arbitrage in its callback.

        Raises:
            Whatever the callback raised, unchanged, after every balance
            change has been unwound.
        """
        require_uint256(amount0, "amount0")
        require_uint256(amount1, "amount1")
        require_exactly_one_nonzero(amount0, amount1)
        if not isinstance(params, (bytes, bytearray)):
            raise ValidationError("params must be bytes", {"type": type(params).__name__})

        pool_ref = self.resolve_pool(pool_address)
        request = FlashLoanRequest(
            lending_pool=pool_ref,
            borrow_amount0=amount0,
            borrow_amount1=amount1,
            callback_params=bytes(params),
        )

        logger.info(
            "Initiating flash swap",
            extra={
                "context": {
                    "pool": pool_ref.address,
                    "asset": request.borrowed_asset,
                    "amount": str(request.borrowed_amount),
                }
            },
        )

        pool = self.chain.get_contract(pool_ref.address)
        with self.chain.atomic():
            with self.orchestrator.expecting(request) as outcomes:
                pool.flash(
                    sender=self.config.engine_address,
                    recipient=self.config.engine_address,
                    amount0=amount0,
                    amount1=amount1,
                    data=request.callback_params,
                )
                if len(outcomes) != 1:
                    raise InvariantViolationError(
                        "Pool returned without invoking the callback",
                        details={"pool": pool_ref.address},
                    )

        # Only now has the pool accepted repayment
        outcome = outcomes[0]
        log_settlement(
            logger,
            pool=pool_ref.address,
            asset=request.borrowed_asset,
            owed=outcome.owed,
            realized=outcome.realized,
            profit=outcome.profit,
        )
        return outcome
