# PATH: tests/unit/test_format_money.py
"""
Unit tests for format_money module.
"""

import unittest
from decimal import Decimal

from core.format_money import format_money, format_wei


class TestFormatMoney(unittest.TestCase):
    """Tests for format_money function."""

    def test_format_string_input(self):
        self.assertEqual(format_money("123.456789"), "123.456789")
        self.assertEqual(format_money("0"), "0.000000")

    def test_format_decimal_input(self):
        self.assertEqual(format_money(Decimal("0.0095"), 4), "0.0095")

    def test_format_int_input(self):
        self.assertEqual(format_money(100), "100.000000")

    def test_none_and_empty(self):
        self.assertEqual(format_money(None), "0.000000")
        self.assertEqual(format_money("   "), "0.000000")

    def test_garbage_never_raises(self):
        self.assertEqual(format_money("abc"), "0.000000")

    def test_rounding_half_up(self):
        self.assertEqual(format_money("0.005", 2), "0.01")

    def test_negative_zero_normalized(self):
        self.assertEqual(format_money("-0.0000001", 2), "0.00")

    def test_zero_decimals(self):
        self.assertEqual(format_money("12.5", 0), "13")


class TestFormatWei(unittest.TestCase):

    def test_weth(self):
        self.assertEqual(format_wei(1_000_500_000_000_000_000, 18, 4), "1.0005")

    def test_usdc_default_places(self):
        self.assertEqual(format_wei(3_000_000_000, 6), "3000.000000")

    def test_negative_profit(self):
        self.assertEqual(format_wei(-9_500_000_000_000_000, 18, 4), "-0.0095")

    def test_invalid_amount(self):
        self.assertEqual(format_wei("x", 18, 2), "0.00")


if __name__ == "__main__":
    unittest.main()
