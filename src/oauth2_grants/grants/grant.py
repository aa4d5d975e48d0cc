"""Token endpoint grant pipeline."""

from ..config.grant_config import GrantConfig
from ..core.decorators import track_grant
from .client import check_client, check_grant_type_allowed
from .context import GrantContext
from .credentials import GrantRequest, extract_credentials
from .dispatch import check_grant_type
from .response import GrantResponse, expose_client, expose_user, send_response
from .runner import run_steps
from .tokens import (
    generate_access_token,
    generate_refresh_token,
    save_access_token,
    save_refresh_token,
)

# Order matters: each step relies on what the previous ones put on the context
GRANT_STEPS = (
    extract_credentials,
    check_client,
    expose_client,
    check_grant_type_allowed,
    check_grant_type,
    expose_user,
    generate_access_token,
    save_access_token,
    generate_refresh_token,
    save_refresh_token,
    send_response,
)


@track_grant("token")
async def grant(config: GrantConfig, request: GrantRequest) -> GrantResponse:
    """Process a token request.

    Args:
        config: Grant configuration
        request: Token request

    Returns:
        Token response to send with no-cache headers

    Raises:
        OAuthError: The first failure in the pipeline
    """
    context = GrantContext(config=config, request=request)
    return await run_steps(GRANT_STEPS, context)
