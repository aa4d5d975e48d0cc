"""Direct grants for pre-approved users (e.g. SSO bridging).

In-server use only: the caller has already established who the user is,
so there is no request parsing and no grant type dispatch.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from ..config.grant_config import GrantConfig
from ..core.constants import PRE_APPROVED_GRANT_TYPE
from ..core.decorators import track_grant
from ..core.exceptions import INVALID_GRANT, ConfigurationError, error
from .client import check_client
from .context import GrantContext
from .credentials import Client, validate_client_credentials
from .response import return_response
from .runner import run_steps
from .tokens import (
    generate_access_token,
    generate_refresh_token,
    save_access_token,
    save_refresh_token,
)


class PreApproved(BaseModel):
    """Input of a pre-approved grant."""

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    user: Any = None
    client_id: str | None = None
    client_secret: str | None = None
    grant_type: str | None = None


async def extract_pre_approved_credentials(ctx: GrantContext) -> None:
    """Validate the pre-approved input and build the client identity."""
    if not ctx.pre_approved.user:
        raise error(INVALID_GRANT, "Pre-approved user is missing")

    ctx.client = Client(ctx.pre_approved.client_id, ctx.pre_approved.client_secret)
    validate_client_credentials(ctx.client, ctx.config)


async def use_pre_approved_grant(ctx: GrantContext) -> None:
    """Take the user as given."""
    ctx.user = ctx.pre_approved.user


PRE_APPROVED_STEPS = (
    extract_pre_approved_credentials,
    check_client,
    use_pre_approved_grant,
    generate_access_token,
    save_access_token,
    generate_refresh_token,
    save_refresh_token,
    return_response,
)


class PreApprovedGrant:
    """Issues tokens directly to a known-trusted user.

    There is no response phase to continue after, so a configuration with
    ``continue_after_response`` is rejected at construction.
    """

    def __init__(self, config: GrantConfig) -> None:
        if config.continue_after_response:
            msg = "Pre-approved grants cannot be used with continue_after_response"
            raise ConfigurationError(msg)
        self.config = config

    @track_grant("pre_approved")
    async def issue(self, pre_approved: PreApproved | dict[str, Any]) -> dict[str, Any]:
        """Issue tokens for a pre-approved user.

        Args:
            pre_approved: ``user``, ``client_id``, ``client_secret`` and an
                optional ``grant_type`` (defaults to ``preApproved``)

        Returns:
            Token response body

        Raises:
            OAuthError: The first failure in the pipeline
        """
        pre_approved = PreApproved.model_validate(pre_approved)
        context = GrantContext(
            config=self.config,
            pre_approved=pre_approved,
            grant_type=pre_approved.grant_type or PRE_APPROVED_GRANT_TYPE,
        )
        return await run_steps(PRE_APPROVED_STEPS, context)


async def pre_approved_grant(
    config: GrantConfig,
    pre_approved: PreApproved | dict[str, Any],
) -> dict[str, Any]:
    """Shortcut for ``PreApprovedGrant(config).issue(pre_approved)``."""
    return await PreApprovedGrant(config).issue(pre_approved)
