"""
Token route registration for Starlette applications.

This module provides a clean interface to register the token endpoint,
using the route handler from the auth.routes module.
"""

import logging
from typing import TYPE_CHECKING

from starlette.routing import Route

from .routes import AfterResponse, token_endpoint

if TYPE_CHECKING:
    from starlette.applications import Starlette

    from ..config.grant_config import GrantConfig

logger = logging.getLogger(__name__)


def build_token_route(
    config: "GrantConfig",
    path: str = "/token",
    after_response: AfterResponse | None = None,
) -> Route:
    """
    Create the token endpoint route.

    A closure adapter injects the grant configuration into the handler.

    Args:
        config: Grant configuration
        path: Route path
        after_response: Post-response hook (see ``token_endpoint``)

    Returns:
        POST route for the token endpoint
    """

    async def _token_endpoint(request):
        """Token endpoint - issues tokens for all enabled grant types."""
        return await token_endpoint(request, config, after_response)

    return Route(path, _token_endpoint, methods=["POST"])


def setup_token_route(
    app: "Starlette",
    config: "GrantConfig",
    path: str = "/token",
    after_response: AfterResponse | None = None,
) -> None:
    """
    Register the token endpoint with a Starlette application.

    Example:
        >>> from starlette.applications import Starlette
        >>> from oauth2_grants import GrantConfig, InMemoryGrantModel
        >>> from oauth2_grants.auth.setup import setup_token_route
        >>> from oauth2_grants.core import configure_logging
        >>>
        >>> configure_logging()
        >>> app = Starlette()
        >>> setup_token_route(app, GrantConfig(model=InMemoryGrantModel()))
    """
    app.router.routes.append(build_token_route(config, path, after_response))
    logger.info("Token endpoint registered at %s", path)
