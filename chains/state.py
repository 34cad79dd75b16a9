# PATH: chains/state.py
"""
chains/state.py - In-process host chain.

Provides:
- Token balance ledger (ERC20-style transfer semantics, checked)
- Contract registry by address
- Event log
- Atomic execution scopes: any exception unwinds every balance change
  and event made inside the scope, then propagates unchanged
"""

from contextlib import contextmanager
from typing import Any, Iterator

from core.constants import UINT256_MAX
from core.exceptions import ArithmeticOverflowError, ExternalCallError, UnknownContractError
from core.logging import get_logger
from core.math import require_uint256
from core.validators import normalize_address

logger = get_logger(__name__)

BalanceKey = tuple[str, str]


class ChainState:
    """
    Single-threaded host for one or more atomic executions.

    Addresses are stored checksummed; lookups normalize their input.
    """

    def __init__(self, chain_id: int = 1):
        self.chain_id = chain_id
        self._balances: dict[BalanceKey, int] = {}
        self._contracts: dict[str, Any] = {}
        self._events: list[Any] = []
        self._depth = 0

    # =========================================================================
    # CONTRACTS
    # =========================================================================

    def register(self, address: str, contract: Any) -> str:
        address = normalize_address(address, "contract")
        self._contracts[address] = contract
        return address

    def get_contract(self, address: str) -> Any:
        address = normalize_address(address, "contract")
        try:
            return self._contracts[address]
        except KeyError:
            raise UnknownContractError(
                f"No contract at {address}",
                details={"address": address},
            ) from None

    def has_contract(self, address: str) -> bool:
        return normalize_address(address, "contract") in self._contracts

    # =========================================================================
    # BALANCES
    # =========================================================================

    def balance_of(self, token: str, holder: str) -> int:
        key = (normalize_address(token, "token"), normalize_address(holder, "holder"))
        return self._balances.get(key, 0)

    def mint(self, token: str, holder: str, amount: int) -> None:
        """Credit new units to holder (scenario funding)."""
        require_uint256(amount, "amount")
        key = (normalize_address(token, "token"), normalize_address(holder, "holder"))
        new_balance = self._balances.get(key, 0) + amount
        if new_balance > UINT256_MAX:
            raise ArithmeticOverflowError(
                "Balance overflow on mint",
                details={"token": key[0], "holder": key[1]},
            )
        self._balances[key] = new_balance

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """
        Move amount of token from sender to recipient.

        Raises:
            ExternalCallError: sender balance is too low ("STF")
        """
        require_uint256(amount, "amount")
        token = normalize_address(token, "token")
        sender = normalize_address(sender, "sender")
        recipient = normalize_address(recipient, "recipient")

        sender_balance = self._balances.get((token, sender), 0)
        if sender_balance < amount:
            raise ExternalCallError(
                "STF",
                details={
                    "token": token,
                    "sender": sender,
                    "balance": str(sender_balance),
                    "amount": str(amount),
                },
            )

        self._balances[(token, sender)] = sender_balance - amount
        recipient_balance = self._balances.get((token, recipient), 0) + amount
        if recipient_balance > UINT256_MAX:
            raise ArithmeticOverflowError(
                "Balance overflow on transfer",
                details={"token": token, "recipient": recipient},
            )
        self._balances[(token, recipient)] = recipient_balance

    def snapshot_balances(self) -> dict[BalanceKey, int]:
        """Copy of all nonzero balances, for before/after comparisons."""
        return {k: v for k, v in self._balances.items() if v}

    # =========================================================================
    # EVENTS
    # =========================================================================

    def emit(self, event: Any) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[Any]:
        return list(self._events)

    def events_named(self, name: str) -> list[Any]:
        return [e for e in self._events if getattr(e, "name", None) == name]

    # =========================================================================
    # ATOMICITY
    # =========================================================================

    @property
    def depth(self) -> int:
        """Current nesting depth of atomic scopes."""
        return self._depth

    @contextmanager
    def atomic(self) -> Iterator["ChainState"]:
        """
        Run a block as one indivisible unit.

        On any exception, balances and events are restored to their state
        at scope entry and the exception is re-raised unchanged.
        """
        balances = dict(self._balances)
        events_len = len(self._events)
        self._depth += 1
        try:
            yield self
        except BaseException as e:
            self._balances = balances
            del self._events[events_len:]
            logger.debug(
                "Atomic scope reverted",
                extra={"context": {"depth": self._depth, "error": type(e).__name__}},
            )
            raise
        finally:
            self._depth -= 1
