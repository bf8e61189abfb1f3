"""Logging setup and structured error reporting for the Tina Content MCP server.

- ``mcp_call_logger`` records every tool call with its arguments and result.
- ``error_logger`` receives classified failures from ``log_structured_error``.
- ``configure_logging`` wires both to stderr (stdout belongs to the stdio
  transport) and optionally to a rotating call log file.
"""

from __future__ import annotations

import datetime
import functools
import inspect
import json
import logging
import sys
import traceback
from enum import Enum
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING
from typing import Any

from .metrics_config import record_tool_call_error
from .metrics_config import record_tool_call_start
from .metrics_config import record_tool_call_success

if TYPE_CHECKING:
    from .config import Settings

mcp_call_logger = logging.getLogger("tina_mcp.calls")
error_logger = logging.getLogger("tina_mcp.errors")

# Attributes every LogRecord carries; anything else on a record is extra context.
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class ErrorCategory(Enum):
    """Severity classification for structured error logging."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


_CATEGORY_LEVELS = {
    ErrorCategory.CRITICAL: logging.CRITICAL,
    ErrorCategory.ERROR: logging.ERROR,
    ErrorCategory.WARNING: logging.WARNING,
    ErrorCategory.INFO: logging.INFO,
}


class StructuredLogFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        return json.dumps(log_data, default=str)


def log_structured_error(
    category: ErrorCategory,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
    operation: str | None = None,
    **kwargs,
) -> None:
    """Log a classified error with its context as structured extra fields."""
    extra: dict[str, Any] = {"error_category": category.value}
    if operation:
        extra["operation"] = operation
    if context:
        extra.update(context)
    extra.update(kwargs)
    # Keys that clash with LogRecord attributes would make logging raise.
    extra = {
        (f"ctx_{key}" if key in _RESERVED_RECORD_ATTRS else key): value
        for key, value in extra.items()
    }

    error_logger.log(
        _CATEGORY_LEVELS[category],
        message,
        extra=extra,
        exc_info=exception is not None,
    )


def _describe(value: Any) -> str:
    if hasattr(value, "model_dump_json"):
        return value.model_dump_json(exclude_none=True)
    return repr(value)


def _format_call(args: tuple, kwargs: dict) -> str:
    try:
        logged_args = [_describe(arg) for arg in args]
        logged_kwargs = {k: _describe(v) for k, v in kwargs.items()}
        return f"args={logged_args}, kwargs={logged_kwargs}"
    except Exception as e:
        return f"args/kwargs logging error: {e}"


def _format_result(result: Any) -> str:
    try:
        if isinstance(result, list):
            return "[" + ", ".join(_describe(item) for item in result) + "]"
        return _describe(result)
    except Exception as e:
        return f"Result logging error: {e}"


def _report_failure(func_name: str, start_time: float | None, error: Exception) -> None:
    record_tool_call_error(func_name, start_time, error)
    mcp_call_logger.error(f"Tool {func_name} raised exception: {error}")
    log_structured_error(
        category=ErrorCategory.ERROR,
        message=f"Tool {func_name} failed",
        exception=error,
        operation="tool_execution",
        function=func_name,
    )


def log_mcp_call(func):
    """Log arguments, results and failures of an MCP tool, sync or async."""
    func_name = getattr(func, "__name__", "unknown_function")

    def _start(args, kwargs) -> float | None:
        start_time = record_tool_call_start(func_name)
        mcp_call_logger.info(f"Calling tool: {func_name} with {_format_call(args, kwargs)}")
        return start_time

    def _finish(start_time: float | None, result: Any) -> None:
        record_tool_call_success(func_name, start_time)
        mcp_call_logger.info(f"Tool {func_name} returned: {_format_result(result)}")

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = _start(args, kwargs)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _report_failure(func_name, start_time, e)
                raise
            _finish(start_time, result)
            return result

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = _start(args, kwargs)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _report_failure(func_name, start_time, e)
            raise
        _finish(start_time, result)
        return result

    return wrapper


def configure_logging(settings: Settings) -> None:
    """Route application logs to stderr and, optionally, a rotating call log."""
    if settings.structured_logging:
        formatter: logging.Formatter = StructuredLogFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)

    package_logger = logging.getLogger("tina_mcp")
    package_logger.handlers.clear()
    package_logger.addHandler(stderr_handler)
    package_logger.setLevel(settings.log_level)
    package_logger.propagate = False

    mcp_call_logger.handlers.clear()
    if settings.call_log_file:
        # 10MB per file, 5 backups
        file_handler = RotatingFileHandler(
            settings.call_log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        mcp_call_logger.addHandler(file_handler)
        mcp_call_logger.propagate = False
    else:
        mcp_call_logger.propagate = True
