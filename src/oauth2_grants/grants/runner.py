"""Sequential step runner for grant pipelines."""

import logging
from collections.abc import Awaitable, Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from ..core.exceptions import SERVER_ERROR, error
from .context import GrantContext

logger = logging.getLogger(__name__)

Step = Callable[[GrantContext], Awaitable[Any]]


async def run_steps(steps: Sequence[Step], context: GrantContext) -> Any:
    """Run ``steps`` one at a time against ``context``.

    A step fails by raising; the first exception stops the pipeline and
    propagates untouched, so later steps never run.

    Args:
        steps: Ordered pipeline steps
        context: Shared per-request state

    Returns:
        The return value of the final step
    """
    result = None
    total = len(steps)
    for position, step in enumerate(steps, start=1):
        logger.debug("Step %d/%d: %s", position, total, step.__name__)
        result = await step(context)
    return result


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Report any failure of a storage model call as ``server_error``.

    The original exception is kept as the error's cause.
    """
    try:
        yield
    except Exception as e:
        logger.warning("Storage operation %s failed: %r", operation, e)
        raise error(SERVER_ERROR, None, e) from e
