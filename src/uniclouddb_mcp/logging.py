"""Structured logging helpers with per-call context."""

from __future__ import annotations

import logging
import sys
from typing import cast

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars


def configure_logging(level: str) -> None:
    """Configure structlog with JSON output on stderr.

    stdout is reserved for the MCP stdio transport.
    """
    level_name = level.upper()
    numeric_level = logging._nameToLevel.get(level_name, logging.INFO)

    logging.basicConfig(format="%(message)s", level=numeric_level, stream=sys.stderr)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_call_context(call_id: str, tool_name: str) -> None:
    """Bind the tool call identity into the logging context."""
    bind_contextvars(call_id=call_id, tool_name=tool_name)


def clear_logging_context() -> None:
    """Clear bound context variables after a tool call completes."""
    clear_contextvars()


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structured logger."""
    return cast(structlog.BoundLogger, structlog.get_logger(name))
