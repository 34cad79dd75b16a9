# PATH: dex/pools.py
"""
dex/pools.py - Simulated V3-style pools.

Implements the two pool primitives the engine consumes:
- flash(): lend token0/token1, call back the recipient synchronously,
  require repayment plus the ceiling-rounded fee ("F0"/"F1")
- swap(): exact-input trade paid by the payer, output to the recipient

Pricing is pluggable: ConstantProductPool (x*y=k, fee on input) and
FixedRatePool (fixed net rate per direction, for exact-figure scenarios).
Revert reasons follow the V3 pool's short codes.
"""

from core.constants import FEE_DENOMINATOR, FLASH_EVENT, SWAP_EVENT, PoolKind
from core.exceptions import ExternalCallError, ValidationError
from core.logging import get_logger
from core.math import checked_add, mul_div, mul_div_rounding_up, require_uint256
from core.models import Event, PoolKey
from core.validators import normalize_address, same_address
from chains.state import ChainState

logger = get_logger(__name__)


class SimulatedPool:
    """
    Base simulated pool. Subclasses implement quote().

    Live balances are the pool's own token balances on the chain.
    Pricing reserves add back any flash loan still outstanding, so a
    flash never moves the price.
    """

    kind: PoolKind

    def __init__(self, chain: ChainState, address: str, key: PoolKey):
        self.chain = chain
        self.address = normalize_address(address, "pool")
        self.key = key
        self.paused = False
        self._outstanding = (0, 0)

    @property
    def token0(self) -> str:
        return self.key.token0

    @property
    def token1(self) -> str:
        return self.key.token1

    @property
    def fee(self) -> int:
        return self.key.fee

    def balances(self) -> tuple[int, int]:
        return (
            self.chain.balance_of(self.token0, self.address),
            self.chain.balance_of(self.token1, self.address),
        )

    def reserves(self) -> tuple[int, int]:
        """Pricing reserves: live balances plus outstanding flash amounts."""
        balance0, balance1 = self.balances()
        lent0, lent1 = self._outstanding
        return balance0 + lent0, balance1 + lent1

    def _require_unlocked(self) -> None:
        if self.paused:
            raise ExternalCallError("LOK", details={"pool": self.address})

    def quote(self, token_in: str, amount_in: int) -> int:
        """Output amount for an exact-input trade at current reserves."""
        raise NotImplementedError

    def _net_of_swaps(self, events_start: int) -> tuple[int, int]:
        """
        Live balances with this pool's own swaps since events_start
        backed out, so flash repayment is measured separately from
        trades settled against the same pool inside the callback.
        """
        balance0, balance1 = self.balances()
        for event in self.chain.events[events_start:]:
            if event.name != SWAP_EVENT or event.emitter != self.address:
                continue
            args = event.args
            if same_address(args["token_in"], self.token0):
                balance0 -= args["amount_in"]
                balance1 += args["amount_out"]
            else:
                balance1 -= args["amount_in"]
                balance0 += args["amount_out"]
        return balance0, balance1

    # =========================================================================
    # FLASH
    # =========================================================================

    def flash(
        self,
        sender: str,
        recipient: str,
        amount0: int,
        amount1: int,
        data: bytes,
    ) -> tuple[int, int]:
        """
        Lend amount0/amount1 to recipient for the duration of its callback.

        Returns:
            (paid0, paid1) fees actually received
        """
        self._require_unlocked()
        require_uint256(amount0, "amount0")
        require_uint256(amount1, "amount1")

        with self.chain.atomic():
            balance0_before, balance1_before = self.balances()
            if balance0_before == 0 and balance1_before == 0:
                raise ExternalCallError("L", details={"pool": self.address})

            fee0 = mul_div_rounding_up(amount0, self.fee, FEE_DENOMINATOR)
            fee1 = mul_div_rounding_up(amount1, self.fee, FEE_DENOMINATOR)

            if amount0 > 0:
                self.chain.transfer(self.token0, self.address, recipient, amount0)
            if amount1 > 0:
                self.chain.transfer(self.token1, self.address, recipient, amount1)

            events_start = len(self.chain.events)
            callee = self.chain.get_contract(recipient)
            outstanding = self._outstanding
            self._outstanding = (outstanding[0] + amount0, outstanding[1] + amount1)
            try:
                callee.uniswap_v3_flash_callback(
                    sender=self.address,
                    fee0=fee0,
                    fee1=fee1,
                    data=data,
                )
            finally:
                self._outstanding = outstanding

            balance0_after, balance1_after = self._net_of_swaps(events_start)
            if balance0_after < checked_add(balance0_before, fee0):
                raise ExternalCallError(
                    "F0",
                    details={"expected": str(balance0_before + fee0), "actual": str(balance0_after)},
                )
            if balance1_after < checked_add(balance1_before, fee1):
                raise ExternalCallError(
                    "F1",
                    details={"expected": str(balance1_before + fee1), "actual": str(balance1_after)},
                )

            paid0 = balance0_after - balance0_before
            paid1 = balance1_after - balance1_before
            self.chain.emit(Event(
                name=FLASH_EVENT,
                emitter=self.address,
                args={
                    "sender": sender,
                    "recipient": recipient,
                    "amount0": amount0,
                    "amount1": amount1,
                    "paid0": paid0,
                    "paid1": paid1,
                },
            ))

        logger.debug(
            "Flash repaid",
            extra={"context": {"pool": self.address, "paid0": str(paid0), "paid1": str(paid1)}},
        )
        return paid0, paid1

    # =========================================================================
    # SWAP
    # =========================================================================

    def swap(self, payer: str, recipient: str, token_in: str, amount_in: int) -> int:
        """
        Exact-input swap: take amount_in of token_in from payer, send the
        quoted output of the counter token to recipient.
        """
        self._require_unlocked()
        require_uint256(amount_in, "amount_in")
        if amount_in == 0:
            raise ExternalCallError("AS", details={"pool": self.address})
        if not self.key.contains(token_in):
            raise ExternalCallError("Invalid token", details={"pool": self.address, "token": token_in})

        token_out = self.key.other(token_in)
        with self.chain.atomic():
            amount_out = self.quote(token_in, amount_in)
            if amount_out > self.chain.balance_of(token_out, self.address):
                raise ExternalCallError("SPL", details={"pool": self.address})

            self.chain.transfer(token_in, payer, self.address, amount_in)
            if amount_out > 0:
                self.chain.transfer(token_out, self.address, recipient, amount_out)

            self.chain.emit(Event(
                name=SWAP_EVENT,
                emitter=self.address,
                args={
                    "payer": payer,
                    "recipient": recipient,
                    "token_in": token_in,
                    "amount_in": amount_in,
                    "amount_out": amount_out,
                },
            ))
        return amount_out

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address}, fee={self.fee})"


class ConstantProductPool(SimulatedPool):
    """x*y=k pricing with the fee tier taken from the input."""

    kind = PoolKind.CONSTANT_PRODUCT

    def quote(self, token_in: str, amount_in: int) -> int:
        reserve0, reserve1 = self.reserves()
        if same_address(token_in, self.token0):
            reserve_in, reserve_out = reserve0, reserve1
        else:
            reserve_in, reserve_out = reserve1, reserve0
        if reserve_in == 0 or reserve_out == 0:
            raise ExternalCallError("L", details={"pool": self.address})

        amount_in_with_fee = amount_in * (FEE_DENOMINATOR - self.fee)
        numerator = amount_in_with_fee * reserve_out
        denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
        return numerator // denominator


class FixedRatePool(SimulatedPool):
    """
    Fixed exchange rate per direction, net of the pool fee.

    rate_0_to_1 = (numerator, denominator): token1 out per token0 in.
    """

    kind = PoolKind.FIXED_RATE

    def __init__(
        self,
        chain: ChainState,
        address: str,
        key: PoolKey,
        rate_0_to_1: tuple[int, int],
        rate_1_to_0: tuple[int, int],
    ):
        super().__init__(chain, address, key)
        for name, (numerator, denominator) in (
            ("rate_0_to_1", rate_0_to_1),
            ("rate_1_to_0", rate_1_to_0),
        ):
            if numerator < 0 or denominator <= 0:
                raise ValidationError(
                    f"Invalid {name}",
                    {"numerator": numerator, "denominator": denominator},
                )
        self.rate_0_to_1 = rate_0_to_1
        self.rate_1_to_0 = rate_1_to_0

    def quote(self, token_in: str, amount_in: int) -> int:
        if same_address(token_in, self.token0):
            numerator, denominator = self.rate_0_to_1
        else:
            numerator, denominator = self.rate_1_to_0
        return mul_div(amount_in, numerator, denominator)


POOL_CLASSES: dict[PoolKind, type[SimulatedPool]] = {
    PoolKind.CONSTANT_PRODUCT: ConstantProductPool,
    PoolKind.FIXED_RATE: FixedRatePool,
}
