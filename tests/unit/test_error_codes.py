# PATH: tests/unit/test_error_codes.py
"""
Unit tests for the ErrorCode / exception contract.

Ensures:
- every ErrorCode.XXX usage in the codebase exists in the enum
- every abort kind maps to its code and revert reason
- revert payloads decode back to the reason callers see

Run: python -m pytest tests/unit/test_error_codes.py -v
"""

import re
import unittest
from pathlib import Path
from typing import Set

from core.abi import decode_revert_reason
from core.constants import ErrorCode
from core.exceptions import (
    ArithmeticOverflowError,
    ExternalCallError,
    FlashSwapError,
    InsufficientRepaymentError,
    MalformedParamsError,
    ReentrancyError,
    SlippageError,
    UnauthorizedCallbackError,
    ValidationError,
)


class TestErrorCodeContract(unittest.TestCase):
    """Test that all ErrorCode usages in codebase are valid."""

    SCAN_PATTERNS = [
        "core/**/*.py",
        "chains/**/*.py",
        "dex/**/*.py",
        "execution/**/*.py",
        "scripts/**/*.py",
    ]

    def find_errorcode_usages(self, filepath: Path) -> Set[str]:
        content = filepath.read_text(encoding="utf-8")
        return set(re.findall(r"ErrorCode\.([A-Z_]+)", content))

    def test_all_errorcode_enum_usages_exist(self):
        """Verify all ErrorCode.XXXX usages reference valid enum members."""
        project_root = Path(__file__).parent.parent.parent
        valid_names = {code.name for code in ErrorCode}

        all_usages = set()
        files_scanned = 0
        for pattern in self.SCAN_PATTERNS:
            for filepath in project_root.glob(pattern):
                if "__pycache__" in str(filepath):
                    continue
                all_usages.update(self.find_errorcode_usages(filepath))
                files_scanned += 1

        invalid_usages = all_usages - valid_names
        self.assertEqual(
            invalid_usages,
            set(),
            f"Invalid ErrorCode usages found: {invalid_usages}\n"
            f"Valid codes: {sorted(valid_names)}"
        )
        self.assertGreater(files_scanned, 0, "No files scanned!")


class TestAbortKinds(unittest.TestCase):
    """Each abort kind carries a fixed code and revert reason."""

    EXPECTED = [
        (UnauthorizedCallbackError, ErrorCode.UNAUTHORIZED_CALLBACK, "FlashSwap: Unauthorized callback"),
        (SlippageError, ErrorCode.SLIPPAGE_VIOLATION, "FlashSwap: Swap output below minimum"),
        (InsufficientRepaymentError, ErrorCode.INSUFFICIENT_REPAYMENT, "FlashSwap: Insufficient funds to repay loan"),
        (ArithmeticOverflowError, ErrorCode.ARITHMETIC_OVERFLOW, "Panic(0x11)"),
        (MalformedParamsError, ErrorCode.MALFORMED_PARAMS, "FlashSwap: Malformed params"),
        (ReentrancyError, ErrorCode.REENTRANT_CALL, "FlashSwap: Reentrant call"),
    ]

    def test_codes_and_reasons(self):
        for cls, code, reason in self.EXPECTED:
            with self.subTest(cls=cls.__name__):
                error = cls()
                self.assertIsInstance(error, FlashSwapError)
                self.assertEqual(error.code, code)
                self.assertEqual(error.reason, reason)

    def test_revert_data_decodes_to_reason(self):
        for cls, _, reason in self.EXPECTED:
            with self.subTest(cls=cls.__name__):
                self.assertEqual(decode_revert_reason(cls().revert_data()), reason)

    def test_only_insufficient_repayment_is_expected(self):
        for cls, _, _ in self.EXPECTED:
            with self.subTest(cls=cls.__name__):
                self.assertEqual(cls.is_expected, cls is InsufficientRepaymentError)

    def test_external_reason_kept_verbatim(self):
        error = ExternalCallError("LOK", details={"pool": "0x1"})
        self.assertEqual(error.code, ErrorCode.EXTERNAL_CALL_FAILED)
        self.assertEqual(error.reason, "LOK")
        self.assertEqual(decode_revert_reason(error.revert_data()), "LOK")

    def test_str_and_to_dict(self):
        error = ValidationError("amount must be > 0", {"amount": "0"})
        self.assertEqual(str(error), "[INVALID_INPUT] amount must be > 0")
        data = error.to_dict()
        self.assertEqual(data["error_code"], "INVALID_INPUT")
        self.assertEqual(data["details"], {"amount": "0"})

    def test_message_defaults_to_reason(self):
        error = InsufficientRepaymentError(details={"owed": "2"})
        self.assertEqual(error.message, "FlashSwap: Insufficient funds to repay loan")


if __name__ == "__main__":
    unittest.main()
