# PATH: execution/orchestrator.py
"""
execution/orchestrator.py - Flash swap callback handler.

The callback is the only externally triggerable transition of the
settlement state machine, and it is reachable only while LoanInitiator
has a request in flight:

    AUTHORIZING -> LEG1_EXECUTING -> LEG2_EXECUTING -> REPAYMENT_CHECK -> COMMITTED
                                  (any error)                          -> ABORTED

Authorization does not trust the raw caller: the expected pool address
is re-derived from the in-flight request's pool key, the configured
factory and the pool init code hash, and both the caller and
params.pool_a must equal it.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from core.abi import decode_arbitrage_params
from core.exceptions import (
    FlashSwapError,
    InsufficientRepaymentError,
    MalformedParamsError,
    ReentrancyError,
    UnauthorizedCallbackError,
)
from core.logging import get_logger, log_abort
from core.math import signed_diff
from core.models import (
    ArbitrageParams,
    CallbackContext,
    FlashLoanRequest,
    SettlementEvent,
    SettlementOutcome,
)
from core.validators import normalize_address, same_address
from chains.state import ChainState
from dex.pool_address import compute_pool_address
from execution.config import FlashSwapConfig
from execution.repayment import RepaymentCalculator
from execution.state_machine import SettlementState, SettlementStateMachine
from execution.swap_executor import SwapExecutor

logger = get_logger(__name__)


class ArbitrageOrchestrator:
    """
    Drives one two-leg arbitrage inside a flash callback.

    Holds no state between executions except the in-flight marker,
    which exists only for the duration of LoanInitiator.initiate().
    """

    def __init__(
        self,
        chain: ChainState,
        config: FlashSwapConfig,
        executor: SwapExecutor,
        calculator: RepaymentCalculator,
    ):
        self.chain = chain
        self.config = config
        self.executor = executor
        self.calculator = calculator
        self._in_flight: Optional[FlashLoanRequest] = None
        self._outcomes: list[SettlementOutcome] = []
        self._handling = False
        # Last machine, for diagnostics only
        self.last_machine: Optional[SettlementStateMachine] = None

    @property
    def in_flight(self) -> Optional[FlashLoanRequest]:
        return self._in_flight

    @contextmanager
    def expecting(self, request: FlashLoanRequest) -> Iterator[list[SettlementOutcome]]:
        """
        Mark request as in flight for the duration of the block.

        Yields the list the committed outcome is appended to.
        """
        if self._in_flight is not None:
            raise ReentrancyError(
                "Flash swap already in flight",
                details={"pool": self._in_flight.lending_pool.address},
            )
        self._in_flight = request
        self._outcomes = []
        try:
            yield self._outcomes
        finally:
            self._in_flight = None
            self._outcomes = []

    # =========================================================================
    # AUTHORIZATION
    # =========================================================================

    def _authorize(self, sender: str, data: bytes) -> tuple[FlashLoanRequest, ArbitrageParams]:
        request = self._in_flight
        if request is None:
            raise UnauthorizedCallbackError(
                "Callback outside of a flash swap",
                details={"sender": str(sender)},
            )
        if self._outcomes:
            raise UnauthorizedCallbackError(
                "Callback already handled for this flash swap",
                details={"sender": str(sender)},
            )
        if self._handling:
            raise UnauthorizedCallbackError(
                "Callback re-entered while another is being handled",
                details={"sender": str(sender)},
            )

        expected = compute_pool_address(
            self.config.factory_address,
            request.lending_pool.key,
            self.config.pool_init_code_hash,
        )
        if not isinstance(sender, str) or not same_address(sender, expected):
            raise UnauthorizedCallbackError(
                "Callback sender is not the lending pool",
                details={"sender": str(sender), "expected": expected},
            )
        if not same_address(request.lending_pool.address, expected):
            raise UnauthorizedCallbackError(
                "Lending pool does not match its derived address",
                details={"pool": request.lending_pool.address, "expected": expected},
            )
        if not isinstance(data, (bytes, bytearray)) or bytes(data) != request.callback_params:
            raise UnauthorizedCallbackError(
                "Callback data does not match the request",
                details={"sender": expected},
            )

        params = decode_arbitrage_params(data)
        if not same_address(params.pool_a, expected):
            raise UnauthorizedCallbackError(
                "params.pool_a is not the lending pool",
                details={"pool_a": params.pool_a, "expected": expected},
            )

        key = request.lending_pool.key
        if params.fee_tier_a != key.fee:
            raise MalformedParamsError(
                "fee_tier_a does not match the lending pool fee",
                details={"fee_tier_a": params.fee_tier_a, "pool_fee": key.fee},
            )
        if not same_address(params.intermediate_asset, request.counter_asset):
            raise MalformedParamsError(
                "intermediate_asset is not the lending pool's counter asset",
                details={
                    "intermediate_asset": params.intermediate_asset,
                    "counter_asset": request.counter_asset,
                },
            )
        return request, params

    # =========================================================================
    # REPAYMENT
    # =========================================================================

    def _amount_owed(self, request: FlashLoanRequest, context: CallbackContext) -> int:
        owed = self.calculator.owed_with_reported_fee(context.borrowed_amount, context.reported_fee)
        estimate = self.calculator.owed(request.borrowed_amount, request.lending_pool.key.fee)
        if estimate != owed:
            logger.warning(
                "Pool-reported fee differs from local estimate",
                extra={
                    "context": {
                        "pool": request.lending_pool.address,
                        "reported_owed": str(owed),
                        "estimated_owed": str(estimate),
                    }
                },
            )
        return owed

    # =========================================================================
    # CALLBACK
    # =========================================================================

    def on_flash_callback(self, sender: str, fee0: int, fee1: int, data: bytes) -> SettlementOutcome:
        """
        Handle the lending pool's flash callback.

        Raises:
            UnauthorizedCallbackError: caller is not the in-flight lending pool
            MalformedParamsError: data does not decode to consistent params
            SlippageError: a leg missed its floor
            InsufficientRepaymentError: realized < owed
            ExternalCallError: router/pool/transfer failure
        """
        machine = SettlementStateMachine()
        self.last_machine = machine
        engine = self.config.engine_address

        owns_guard = False
        try:
            with self.chain.atomic():
                machine.transition_to(SettlementState.AUTHORIZING)
                request, params = self._authorize(sender, data)
                self._handling = owns_guard = True
                context = CallbackContext(
                    sender=normalize_address(sender, "sender"),
                    fee0=fee0,
                    fee1=fee1,
                    amount0=request.borrow_amount0,
                    amount1=request.borrow_amount1,
                )
                borrowed_asset = request.borrowed_asset

                machine.transition_to(SettlementState.LEG1_EXECUTING)
                intermediate_amount = self.executor.swap_exact_in(
                    pool=params.pool_a,
                    fee_tier=params.fee_tier_a,
                    asset_in=borrowed_asset,
                    asset_out=params.intermediate_asset,
                    amount_in=context.borrowed_amount,
                    min_out=params.min_out_leg1,
                    leg=1,
                )

                machine.transition_to(SettlementState.LEG2_EXECUTING)
                realized = self.executor.swap_exact_in(
                    pool=params.pool_b,
                    fee_tier=params.fee_tier_b,
                    asset_in=params.intermediate_asset,
                    asset_out=borrowed_asset,
                    amount_in=intermediate_amount,
                    min_out=params.min_out_leg2,
                    leg=2,
                )

                machine.transition_to(SettlementState.REPAYMENT_CHECK)
                owed = self._amount_owed(request, context)
                if realized < owed:
                    raise InsufficientRepaymentError(
                        details={
                            "asset": borrowed_asset,
                            "owed": str(owed),
                            "realized": str(realized),
                            "shortfall": str(owed - realized),
                        },
                    )

                self.chain.transfer(borrowed_asset, engine, request.lending_pool.address, owed)
                outcome = SettlementOutcome(
                    owed=owed,
                    realized=realized,
                    profit=signed_diff(realized, owed),
                    committed=True,
                )
                self.chain.emit(SettlementEvent(
                    emitter=engine,
                    pool=request.lending_pool.address,
                    asset=borrowed_asset,
                    owed=outcome.owed,
                    realized=outcome.realized,
                    profit=outcome.profit,
                ))
                machine.transition_to(SettlementState.COMMITTED)
                self._outcomes.append(outcome)

        except FlashSwapError as e:
            failed_in = machine.state.value
            machine.abort(e.reason)
            log_abort(
                logger,
                e.code.value,
                e.reason,
                expected=e.is_expected,
                failed_in=failed_in,
                details={k: str(v) for k, v in e.details.items()},
            )
            raise
        except Exception:
            machine.abort("unexpected error")
            raise
        finally:
            if owns_guard:
                self._handling = False

        return outcome
