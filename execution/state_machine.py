# PATH: execution/state_machine.py
"""
execution/state_machine.py - Settlement state machine.

SETTLEMENT STATE CONTRACT:
==========================

States (SettlementState):
  AWAITING_CALLBACK → flash requested, callback not yet received
  AUTHORIZING       → verifying the callback caller
  LEG1_EXECUTING    → borrowed asset -> intermediate asset
  LEG2_EXECUTING    → intermediate asset -> borrowed asset
  REPAYMENT_CHECK   → comparing realized output with amount owed
  COMMITTED         → loan repaid, surplus kept
  ABORTED           → error raised, whole execution unwound

Transitions:
  AWAITING_CALLBACK → AUTHORIZING     (callback received)
  AUTHORIZING       → LEG1_EXECUTING  (caller authorized)
  LEG1_EXECUTING    → LEG2_EXECUTING  (leg 1 filled)
  LEG2_EXECUTING    → REPAYMENT_CHECK (leg 2 filled)
  REPAYMENT_CHECK   → COMMITTED       (repayment transferred)
  *                 → ABORTED         (any error)

==========================

One machine is built per callback; nothing survives the execution.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from core.exceptions import InvariantViolationError


class SettlementState(str, Enum):
    """Flash swap settlement states."""
    AWAITING_CALLBACK = "AWAITING_CALLBACK"
    AUTHORIZING = "AUTHORIZING"
    LEG1_EXECUTING = "LEG1_EXECUTING"
    LEG2_EXECUTING = "LEG2_EXECUTING"
    REPAYMENT_CHECK = "REPAYMENT_CHECK"
    COMMITTED = "COMMITTED"
    ABORTED = "ABORTED"


VALID_TRANSITIONS: Dict[SettlementState, List[SettlementState]] = {
    SettlementState.AWAITING_CALLBACK: [SettlementState.AUTHORIZING, SettlementState.ABORTED],
    SettlementState.AUTHORIZING: [SettlementState.LEG1_EXECUTING, SettlementState.ABORTED],
    SettlementState.LEG1_EXECUTING: [SettlementState.LEG2_EXECUTING, SettlementState.ABORTED],
    SettlementState.LEG2_EXECUTING: [SettlementState.REPAYMENT_CHECK, SettlementState.ABORTED],
    SettlementState.REPAYMENT_CHECK: [SettlementState.COMMITTED, SettlementState.ABORTED],
    SettlementState.COMMITTED: [],  # Terminal state
    SettlementState.ABORTED: [],  # Terminal state
}


@dataclass
class StateTransition:
    """Record of a state transition."""
    from_state: SettlementState
    to_state: SettlementState
    reason: str = ""


@dataclass
class SettlementStateMachine:
    """
    State machine for one flash swap callback.

    Tracks current state and transition history.
    """
    state: SettlementState = SettlementState.AWAITING_CALLBACK
    history: List[StateTransition] = field(default_factory=list)
    abort_reason: Optional[str] = None

    def can_transition_to(self, new_state: SettlementState) -> bool:
        return new_state in VALID_TRANSITIONS.get(self.state, [])

    def transition_to(self, new_state: SettlementState, reason: str = "") -> StateTransition:
        """
        Transition to a new state.

        Raises InvariantViolationError if transition is not valid.
        """
        if not self.can_transition_to(new_state):
            raise InvariantViolationError(
                f"Cannot transition from {self.state.value} to {new_state.value}",
                details={
                    "from": self.state.value,
                    "to": new_state.value,
                    "valid": [s.value for s in VALID_TRANSITIONS.get(self.state, [])],
                },
            )

        transition = StateTransition(from_state=self.state, to_state=new_state, reason=reason)
        self.history.append(transition)
        self.state = new_state
        return transition

    def abort(self, reason: str) -> Optional[StateTransition]:
        """Move to ABORTED from any non-terminal state; no-op if terminal."""
        if self.is_terminal:
            return None
        self.abort_reason = reason
        return self.transition_to(SettlementState.ABORTED, reason=reason)

    @property
    def is_terminal(self) -> bool:
        return len(VALID_TRANSITIONS.get(self.state, [])) == 0

    @property
    def is_committed(self) -> bool:
        return self.state == SettlementState.COMMITTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "is_terminal": self.is_terminal,
            "abort_reason": self.abort_reason,
            "history": [
                {
                    "from_state": t.from_state.value,
                    "to_state": t.to_state.value,
                    "reason": t.reason,
                }
                for t in self.history
            ],
        }
