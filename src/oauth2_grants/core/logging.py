"""Logging setup for the OAuth2 grant server.

Importing the package never touches handlers. Applications opt in with
``configure_logging()``; otherwise records propagate to whatever the host
application has configured.
"""

import logging
import os
import sys
from contextvars import ContextVar

LOGGER_NAME = "oauth2_grants"
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(request_id)s%(message)s"

# Context variable to store request_id across async calls
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

logger = logging.getLogger(LOGGER_NAME)


class RequestIdFilter(logging.Filter):
    """Logging filter that adds request_id to log records."""

    def filter(self, record):
        """Add request_id to the log record if available."""
        request_id = request_id_ctx.get()
        record.request_id = f"[{request_id}] " if request_id else ""
        return True


def configure_logging(debug: bool | None = None) -> logging.Logger:
    """Attach a stderr handler with request ids to the package logger.

    Safe to call more than once; the handler is only installed the first
    time. Only the ``oauth2_grants`` logger is touched.

    Args:
        debug: Log at DEBUG level; defaults to the ``OAUTH2_DEBUG`` variable

    Returns:
        The package logger
    """
    if debug is None:
        debug = os.getenv("OAUTH2_DEBUG", "").lower() in ("true", "1", "yes")

    if not any(handler.get_name() == LOGGER_NAME for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(LOGGER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(RequestIdFilter())
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if debug:
        logger.debug("Debug mode enabled")

    return logger
