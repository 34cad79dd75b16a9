# PATH: tests/unit/test_state_machine.py
"""
Unit tests for execution/state_machine.py
"""

import unittest

from core.exceptions import InvariantViolationError
from execution.state_machine import (
    SettlementState,
    SettlementStateMachine,
    VALID_TRANSITIONS,
)

HAPPY_PATH = [
    SettlementState.AUTHORIZING,
    SettlementState.LEG1_EXECUTING,
    SettlementState.LEG2_EXECUTING,
    SettlementState.REPAYMENT_CHECK,
    SettlementState.COMMITTED,
]


class TestSettlementStateMachine(unittest.TestCase):

    def test_initial_state(self):
        machine = SettlementStateMachine()
        self.assertEqual(machine.state, SettlementState.AWAITING_CALLBACK)
        self.assertFalse(machine.is_terminal)

    def test_happy_path(self):
        machine = SettlementStateMachine()
        for state in HAPPY_PATH:
            machine.transition_to(state)
        self.assertTrue(machine.is_committed)
        self.assertTrue(machine.is_terminal)
        self.assertEqual(len(machine.history), 5)

    def test_cannot_skip_authorization(self):
        machine = SettlementStateMachine()
        with self.assertRaises(InvariantViolationError):
            machine.transition_to(SettlementState.LEG1_EXECUTING)

    def test_cannot_commit_before_repayment_check(self):
        machine = SettlementStateMachine()
        machine.transition_to(SettlementState.AUTHORIZING)
        machine.transition_to(SettlementState.LEG1_EXECUTING)
        machine.transition_to(SettlementState.LEG2_EXECUTING)
        self.assertFalse(machine.can_transition_to(SettlementState.COMMITTED))

    def test_abort_from_every_non_terminal_state(self):
        for state, targets in VALID_TRANSITIONS.items():
            if not targets:
                continue
            machine = SettlementStateMachine(state=state)
            machine.abort("boom")
            self.assertEqual(machine.state, SettlementState.ABORTED)
            self.assertEqual(machine.abort_reason, "boom")

    def test_abort_is_noop_when_terminal(self):
        machine = SettlementStateMachine(state=SettlementState.COMMITTED)
        self.assertIsNone(machine.abort("late"))
        self.assertEqual(machine.state, SettlementState.COMMITTED)

    def test_to_dict(self):
        machine = SettlementStateMachine()
        machine.transition_to(SettlementState.AUTHORIZING)
        machine.abort("unauthorized")
        data = machine.to_dict()
        self.assertEqual(data["state"], "ABORTED")
        self.assertEqual(data["history"][-1]["reason"], "unauthorized")


if __name__ == "__main__":
    unittest.main()
