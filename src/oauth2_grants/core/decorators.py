"""Decorators for the OAuth2 grant server."""

import functools
import traceback
import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import ParamSpec, TypeVar

from .exceptions import OAuthError
from .logging import logger, request_id_ctx

P = ParamSpec("P")
R = TypeVar("R")


def track_grant(
    grant_name: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator to track grant pipeline runs with timing and error handling.

    Protocol errors are logged at INFO since they are expected client
    mistakes; anything else is logged at ERROR with its traceback at DEBUG.

    Args:
        grant_name: Name of the grant entry point being tracked

    Returns:
        Decorated function with request tracking
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            request_id = str(uuid.uuid4())[:8]
            start_time = datetime.now(UTC).timestamp()

            token = request_id_ctx.set(request_id)

            logger.info("Starting %s grant", grant_name)

            try:
                result = await func(*args, **kwargs)
            except OAuthError as e:
                duration = datetime.now(UTC).timestamp() - start_time
                logger.info(
                    "Rejected %s after %.3fs: %s (%s)",
                    grant_name,
                    duration,
                    e.kind,
                    e.description,
                )
                raise
            except Exception as e:
                duration = datetime.now(UTC).timestamp() - start_time
                logger.error("Failed %s after %.3fs: %s", grant_name, duration, str(e))
                logger.debug("Traceback: %s", traceback.format_exc())
                raise
            else:
                duration = datetime.now(UTC).timestamp() - start_time
                logger.info("Completed %s in %.3fs", grant_name, duration)
            finally:
                request_id_ctx.reset(token)

            return result

        return wrapper

    return decorator
