# PATH: core/logging.py
"""
core/logging.py - Structured JSON logging.

All contextual fields are passed only via extra={"context": {...}}.
All logs include:
- timestamp (ISO 8601)
- level
- logger
- message
- context (pool, asset, owed, realized, error_code, etc.)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Global context that gets added to all log entries
_global_context: dict[str, Any] = {}


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {
        "timestamp": "2026-01-04T12:00:00.000+00:00",
        "level": "INFO",
        "logger": "execution.orchestrator",
        "message": "Flash swap settled",
        "context": {
            "owed": "1000500000000000000",
            "realized": "1010000000000000000"
        }
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {}
        context.update(_global_context)

        if hasattr(record, "context") and record.context:
            context.update(record.context)

        if record.exc_info:
            context["exception"] = self.formatException(record.exc_info)

        if context:
            log_entry["context"] = context

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        base = f"{timestamp} | {record.levelname:<8} | {record.name} | {record.getMessage()}"

        if hasattr(record, "context") and record.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in list(record.context.items())[:4])
            if len(record.context) > 4:
                ctx_str += f", ... (+{len(record.context) - 4} more)"
            base += f" | {ctx_str}"

        return base


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds context to all log entries.
    """

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        context = {**self.extra, **extra.get("context", {})}

        kwargs["extra"] = {"context": context}
        return msg, kwargs


def set_global_context(**kwargs: Any) -> None:
    """
    Set global context that gets added to all JSON log entries.

    Example:
        set_global_context(chain_id=1, engine="0x...")
    """
    _global_context.update(kwargs)


def clear_global_context() -> None:
    """Clear global logging context."""
    _global_context.clear()


def get_logger(name: str, **context: Any) -> ContextAdapter:
    """
    Get a logger with optional default context.

    Example:
        logger = get_logger("execution.swap_executor", engine=address)
        logger.debug("Leg executed", extra={"context": {"amount_out": "123"}})
    """
    logger = logging.getLogger(name)
    return ContextAdapter(logger, context)


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Setup logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON formatting on the console
        log_file: Optional file path; file output is always JSON
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def log_settlement(
    logger: ContextAdapter,
    pool: str,
    asset: str,
    owed: int,
    realized: int,
    profit: int,
    **extra: Any,
) -> None:
    """Log a committed flash swap with standard context."""
    logger.info(
        f"Flash swap settled | profit={profit}",
        extra={
            "context": {
                "pool": pool,
                "asset": asset,
                "owed": str(owed),
                "realized": str(realized),
                "profit": str(profit),
                **extra,
            }
        },
    )


def log_abort(
    logger: ContextAdapter,
    error_code: str,
    reason: str,
    expected: bool = False,
    **extra: Any,
) -> None:
    """Log an aborted flash swap; expected aborts are not warnings."""
    level = logging.INFO if expected else logging.WARNING
    logger.log(
        level,
        f"[{error_code}] Flash swap aborted: {reason}",
        extra={
            "context": {
                "error_code": error_code,
                "reason": reason,
                **extra,
            }
        },
    )
