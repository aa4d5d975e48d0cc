"""Client authentication steps."""

from ..core.exceptions import INVALID_CLIENT, error
from .context import GrantContext
from .runner import storage_errors


async def check_client(ctx: GrantContext) -> None:
    """Authenticate the extracted client against the storage model.

    The opaque client record is kept on the context; the ``Client``
    identity itself is left untouched.
    """
    with storage_errors("get_client"):
        client_model = await ctx.model.get_client(
            ctx.client.client_id,
            ctx.client.client_secret,
        )

    if not client_model:
        raise error(INVALID_CLIENT, "Client credentials are invalid")

    ctx.client_model = client_model


async def check_grant_type_allowed(ctx: GrantContext) -> None:
    """Check the grant type is allowed for this client."""
    with storage_errors("grant_type_allowed"):
        allowed = await ctx.model.grant_type_allowed(ctx.client.client_id, ctx.grant_type)

    if not allowed:
        raise error(INVALID_CLIENT, "The grant type is unauthorised for this client_id")
