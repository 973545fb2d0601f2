"""
Loguru configuration for acmestore.

This module configures loguru with:
- Automatic Trace ID in each log
- Configurable format from settings
- Redirection of standard library logs to loguru

Library code logs through ``from loguru import logger``; applications
embedding the store call ``configure_logger()`` once at startup.
"""

import logging
import sys
from typing import Any

from loguru import logger

from acmestore.config import Settings, get_settings
from acmestore.core.trace_context import trace_id_context

__all__ = ["logger", "InterceptHandler", "configure_logger", "add_trace_id"]


def add_trace_id(record: dict[str, Any]) -> bool:
    """
    Adds the trace_id to the log record.

    The trace_id is obtained from the current context, allowing tracking
    of the writes that belong to the same compound store operation.

    Args:
        record: Loguru record

    Returns:
        True to indicate that the filter passed
    """
    trace_id = trace_id_context.get()
    record["extra"]["trace_id"] = trace_id if trace_id else "N/A"
    return True


def configure_logger(settings: Settings | None = None) -> int:
    """
    Configures loguru with storage settings.

    This function:
    1. Removes default loguru handlers
    2. Adds handler to stderr with custom configuration
    3. Configures level, format, colorization, etc.

    Args:
        settings: Settings to use, the cached settings if omitted

    Returns:
        Identifier of the added loguru handler
    """
    settings = settings or get_settings()

    # Remove default configuration
    logger.remove()

    return logger.add(
        sink=sys.stderr,
        level=settings.log_level.upper(),
        format=settings.log_format,
        filter=add_trace_id,
        colorize=True,
        serialize=False,
        backtrace=True,
        diagnose=False,
        enqueue=settings.logger_enqueue,
    )


class InterceptHandler(logging.Handler):
    """
    Handler to redirect standard logging logs to loguru.

    Usage:
        import logging
        from acmestore.core.logging import InterceptHandler

        logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)
    """

    def emit(self, record: logging.LogRecord) -> None:
        """
        Redirects a standard logging record to loguru.

        Args:
            record: logging.LogRecord record
        """
        loguru_logger = logger.opt(depth=6, exception=record.exc_info)
        loguru_logger.log(record.levelname, record.getMessage())


def intercept_standard_logging(logger_names: list[str] | None = None) -> None:
    """
    Configures redirection of standard logging to loguru.

    Args:
        logger_names: Standard loggers to intercept in addition to the root
    """
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)

    for logger_name in logger_names or []:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False
