"""
Token endpoint for Starlette applications.

Translates between Starlette requests and the transport-independent grant
pipeline, and renders its results and errors as JSON responses.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import JSONResponse

from ..config.grant_config import GrantConfig
from ..core.constants import FORM_CONTENT_TYPE, NO_CACHE_HEADERS
from ..core.exceptions import OAuthError
from ..grants.credentials import GrantRequest
from ..grants.grant import grant

logger = logging.getLogger(__name__)

AfterResponse = Callable[[GrantRequest], Awaitable[Any]]


async def grant_request_from_starlette(request: Request) -> GrantRequest:
    """Build a GrantRequest from a Starlette request."""
    content_type = request.headers.get("content-type")
    grant_request = GrantRequest(
        method=request.method,
        content_type=content_type,
        authorization=request.headers.get("authorization"),
    )

    if grant_request.mime_type == FORM_CONTENT_TYPE:
        form = await request.form()
        grant_request.payload = {
            key: value for key, value in form.items() if isinstance(value, str)
        }

    return grant_request


def error_response(exc: OAuthError) -> JSONResponse:
    """Render an OAuthError as an RFC 6749 error response."""
    return JSONResponse(
        exc.to_dict(),
        status_code=exc.status_code,
        headers={**NO_CACHE_HEADERS, **exc.headers},
    )


async def token_endpoint(
    request: Request,
    config: GrantConfig,
    after_response: AfterResponse | None = None,
) -> JSONResponse:
    """Token endpoint - runs the grant pipeline for a token request.

    Args:
        request: Incoming Starlette request
        config: Grant configuration
        after_response: Coroutine run after the response is sent, only
            when ``config.continue_after_response`` is enabled

    Returns:
        Token response or error response
    """
    grant_request = await grant_request_from_starlette(request)

    try:
        result = await grant(config, grant_request)
    except OAuthError as e:
        return error_response(e)

    # Expose the resolved principals to downstream handlers
    for key, value in grant_request.state.items():
        setattr(request.state, key, value)

    background = None
    if config.continue_after_response and after_response is not None:
        logger.debug("Continuing request processing after the token response")
        background = BackgroundTask(after_response, grant_request)

    return JSONResponse(
        result.body,
        status_code=result.status_code,
        headers=result.headers,
        background=background,
    )
