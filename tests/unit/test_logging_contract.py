# PATH: tests/unit/test_logging_contract.py
"""
Tests specifically for logging contract enforcement.

No kwargs to logger; only extra={"context": {...}} allowed.
"""

import ast
import json
import logging
import unittest
from pathlib import Path
from typing import Any, Dict, List

from core.logging import (
    JSONFormatter,
    clear_global_context,
    get_logger,
    log_abort,
    log_settlement,
    set_global_context,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent


class TestLoggingContractEnforcement(unittest.TestCase):
    """AST-based tests for logging contract."""

    ALLOWED_KWARGS = {"exc_info", "extra", "stack_info", "stacklevel"}
    SCAN_DIRS = ["core", "chains", "dex", "execution", "scripts"]

    def _find_logger_violations(self, source_code: str) -> List[Dict[str, Any]]:
        """Find logger calls with invalid kwargs using AST."""
        violations = []
        tree = ast.parse(source_code)

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
                continue

            method_name = node.func.attr
            if method_name not in ("debug", "info", "warning", "error", "critical", "exception"):
                continue

            obj = node.func.value
            if isinstance(obj, ast.Name):
                is_logger = "log" in obj.id.lower()
            elif isinstance(obj, ast.Attribute):
                is_logger = "log" in obj.attr.lower()
            else:
                is_logger = False
            if not is_logger:
                continue

            for kw in node.keywords:
                if kw.arg and kw.arg not in self.ALLOWED_KWARGS:
                    violations.append({
                        "line": node.lineno,
                        "method": method_name,
                        "invalid_kwarg": kw.arg,
                    })

        return violations

    def test_detector_flags_bad_call(self):
        source = 'logger.info("x", pool="0x1")\n'
        self.assertEqual(len(self._find_logger_violations(source)), 1)

    def test_project_has_no_invalid_kwargs(self):
        """Every module under the engine packages passes the contract."""
        msg = ""
        scanned = 0
        for directory in self.SCAN_DIRS:
            for filepath in sorted((PROJECT_ROOT / directory).rglob("*.py")):
                scanned += 1
                source = filepath.read_text(encoding="utf-8")
                for v in self._find_logger_violations(source):
                    msg += f"  {filepath.name}:{v['line']}: logger.{v['method']}(..., {v['invalid_kwarg']}=...)\n"
        self.assertGreater(scanned, 0)
        if msg:
            self.fail("Logging violations:\n" + msg)


class TestLoggingContextCapture(unittest.TestCase):
    """Tests that context is properly captured in log records."""

    def setUp(self):
        self.captured_records = []

        class CapturingHandler(logging.Handler):
            def __init__(self, records_list):
                super().__init__()
                self.records = records_list

            def emit(self, record):
                self.records.append(record)

        self.logger_name = f"test_capture_{id(self)}"
        base = logging.getLogger(self.logger_name)
        base.setLevel(logging.DEBUG)
        base.handlers = []
        base.propagate = False
        base.addHandler(CapturingHandler(self.captured_records))
        self.logger = get_logger(self.logger_name, engine="0xengine")

    def tearDown(self):
        clear_global_context()

    def test_adapter_merges_default_context(self):
        self.logger.info("Leg filled", extra={"context": {"leg": 1}})
        record = self.captured_records[0]
        self.assertEqual(record.context, {"engine": "0xengine", "leg": 1})

    def test_log_settlement_amounts_are_strings(self):
        log_settlement(self.logger, pool="0xpool", asset="0xweth", owed=2, realized=3, profit=1)
        record = self.captured_records[0]
        self.assertEqual(record.levelno, logging.INFO)
        self.assertEqual(record.context["profit"], "1")
        self.assertEqual(record.context["owed"], "2")

    def test_expected_abort_logged_at_info(self):
        log_abort(self.logger, "INSUFFICIENT_REPAYMENT", "FlashSwap: Insufficient funds to repay loan", expected=True)
        self.assertEqual(self.captured_records[0].levelno, logging.INFO)

    def test_unexpected_abort_logged_at_warning(self):
        log_abort(self.logger, "UNAUTHORIZED_CALLBACK", "FlashSwap: Unauthorized callback", failed_in="AUTHORIZING")
        record = self.captured_records[0]
        self.assertEqual(record.levelno, logging.WARNING)
        self.assertEqual(record.context["failed_in"], "AUTHORIZING")

    def test_json_formatter_includes_global_context(self):
        set_global_context(service="flashswap-test")
        self.logger.info("hello", extra={"context": {"pool": "0xpool"}})
        entry = json.loads(JSONFormatter().format(self.captured_records[0]))
        self.assertEqual(entry["message"], "hello")
        self.assertEqual(entry["context"]["service"], "flashswap-test")
        self.assertEqual(entry["context"]["pool"], "0xpool")


if __name__ == "__main__":
    unittest.main()
