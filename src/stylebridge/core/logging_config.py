"""
Structured Logging Configuration
Compiler diagnostics and tree events through structlog, on stderr.
"""

import logging
import sys
from typing import Any, Mapping

import structlog
from pythonjsonlogger import jsonlogger

from .errors import Diagnostic

_PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _render_diagnostics(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Turn Diagnostic values (single or sequences) into plain dicts."""
    for key, value in event_dict.items():
        if isinstance(value, Diagnostic):
            event_dict[key] = value.to_dict()
        elif isinstance(value, (list, tuple)) and value and isinstance(value[0], Diagnostic):
            event_dict[key] = [item.to_dict() for item in value]
    return event_dict


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structured logging for the compiler.

    Output always goes to stderr: stdout is reserved for compiled trees.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Use JSON formatter for machine-readable logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter(_JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            _render_diagnostics,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Structured logger for a module (pass ``__name__``)."""
    return structlog.get_logger(name)


class LogContext:
    """
    Bind document and element context to every log line in scope.

    None values are skipped, and leaving the scope restores whatever the
    enclosing scope had bound for the same keys.
    """

    def __init__(self, **kwargs: Any):
        self.context = {key: value for key, value in kwargs.items() if value is not None}
        self.tokens: Mapping[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self.tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.reset_contextvars(**self.tokens)
