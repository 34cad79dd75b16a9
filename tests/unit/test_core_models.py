# PATH: tests/unit/test_core_models.py
"""
Unit tests for core data models.

Includes:
- FlashLoanRequest single-asset rule and derived assets
- CallbackContext fee selection
- Outcome / event serialization (amounts as strings)
"""

import unittest

from core.exceptions import ValidationError
from core.models import (
    CallbackContext,
    FlashLoanRequest,
    PoolKey,
    PoolRef,
    SettlementEvent,
    SettlementOutcome,
    Token,
)

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
POOL = "0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640"


def _pool_ref() -> PoolRef:
    return PoolRef(address=POOL, key=PoolKey.from_tokens(WETH, USDC, 500))


class TestFlashLoanRequest(unittest.TestCase):

    def test_borrow_token1(self):
        request = FlashLoanRequest(_pool_ref(), 0, 10**18, b"")
        self.assertFalse(request.borrows_token0)
        self.assertEqual(request.borrowed_amount, 10**18)
        self.assertEqual(request.borrowed_asset, WETH)
        self.assertEqual(request.counter_asset, USDC)

    def test_borrow_token0(self):
        request = FlashLoanRequest(_pool_ref(), 5, 0, b"")
        self.assertEqual(request.borrowed_asset, USDC)
        self.assertEqual(request.counter_asset, WETH)

    def test_both_amounts_rejected(self):
        with self.assertRaises(ValidationError):
            FlashLoanRequest(_pool_ref(), 1, 1, b"")

    def test_no_amount_rejected(self):
        with self.assertRaises(ValidationError):
            FlashLoanRequest(_pool_ref(), 0, 0, b"")

    def test_params_must_be_bytes(self):
        with self.assertRaises(ValidationError):
            FlashLoanRequest(_pool_ref(), 0, 1, "0x")


class TestCallbackContext(unittest.TestCase):

    def test_reported_fee_follows_borrowed_side(self):
        context = CallbackContext(sender=POOL, fee0=7, fee1=500, amount0=0, amount1=10**6)
        self.assertEqual(context.reported_fee, 500)
        self.assertEqual(context.borrowed_amount, 10**6)


class TestSerialization(unittest.TestCase):

    def test_outcome_amounts_are_strings(self):
        outcome = SettlementOutcome(owed=1, realized=3, profit=2, committed=True)
        self.assertEqual(outcome.to_dict(), {"owed": "1", "realized": "3", "profit": "2", "committed": True})

    def test_event_to_dict(self):
        event = SettlementEvent(emitter=POOL, pool=POOL, asset=WETH, owed=1, realized=2, profit=1)
        data = event.to_dict()
        self.assertEqual(data["name"], "FlashSwapSettled")
        self.assertEqual(data["profit"], "1")


class TestToken(unittest.TestCase):

    def test_checksums_address(self):
        self.assertEqual(Token("WETH", WETH.lower()).address, WETH)

    def test_invalid_decimals(self):
        with self.assertRaises(ValidationError):
            Token("BAD", WETH, decimals=77)


if __name__ == "__main__":
    unittest.main()
