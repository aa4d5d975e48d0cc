"""Grant type dispatch.

Each built-in grant type maps to a handler that resolves ``ctx.user`` or
raises. Extension grant types (``scheme:...``) are delegated to the
storage model when it implements ``SupportsExtendedGrant``.
"""

import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any

from ..core.constants import EXTENSION_GRANT_PATTERN, GrantType
from ..core.exceptions import (
    INVALID_CLIENT,
    INVALID_GRANT,
    INVALID_REQUEST,
    SERVER_ERROR,
    ExtendedGrantError,
    OAuthError,
    error,
)
from ..model.base import RevokesRefreshTokens, SupportsExtendedGrant
from ..model.records import AuthCodeRecord, RefreshTokenRecord, principal_id
from .context import GrantContext
from .runner import storage_errors

logger = logging.getLogger(__name__)

GrantHandler = Callable[[GrantContext], Awaitable[None]]

EXTENSION_GRANT_RE = re.compile(EXTENSION_GRANT_PATTERN)


def _as_record(record_type: type[Any], raw: Any) -> Any:
    if isinstance(raw, record_type):
        return raw
    if isinstance(raw, dict):
        return record_type.model_validate(raw)
    return record_type.model_validate(raw, from_attributes=True)


async def use_auth_code_grant(ctx: GrantContext) -> None:
    """Grant for the authorization_code grant type."""
    code = ctx.request.payload.get("code")
    if not code:
        raise error(INVALID_REQUEST, 'No "code" parameter')

    with storage_errors("get_auth_code"):
        raw = await ctx.model.get_auth_code(code)
        auth_code = _as_record(AuthCodeRecord, raw) if raw else None

    if auth_code is None or auth_code.client_id != ctx.client.client_id:
        raise error(INVALID_GRANT, "Invalid code")
    # A code without an expiry is never valid
    if auth_code.expires is None or auth_code.expires < ctx.now:
        raise error(INVALID_GRANT, "Code has expired")

    user = auth_code.resolve_user()
    if principal_id(user) is None:
        raise error(
            SERVER_ERROR,
            None,
            "No user/userId parameter returned from get_auth_code",
        )

    ctx.user = user


async def use_password_grant(ctx: GrantContext) -> None:
    """Grant for the password grant type."""
    username = ctx.request.payload.get("username")
    password = ctx.request.payload.get("password")
    if not username or not password:
        raise error(
            INVALID_CLIENT,
            'Missing parameters. "username" and "password" are required',
        )

    with storage_errors("get_user"):
        user = await ctx.model.get_user(username, password)

    if not user:
        raise error(INVALID_GRANT, "User credentials are invalid")

    ctx.user = user


async def use_refresh_token_grant(ctx: GrantContext) -> None:
    """Grant for the refresh_token grant type.

    When the model can revoke refresh tokens, the presented token is
    revoked here so it can only be used once.
    """
    token = ctx.request.payload.get("refresh_token")
    if not token:
        raise error(INVALID_REQUEST, 'No "refresh_token" parameter')

    with storage_errors("get_refresh_token"):
        raw = await ctx.model.get_refresh_token(token)
        refresh_token = _as_record(RefreshTokenRecord, raw) if raw else None

    if refresh_token is None or refresh_token.client_id != ctx.client.client_id:
        raise error(INVALID_GRANT, "Invalid refresh token")
    if refresh_token.expires is not None and refresh_token.expires < ctx.now:
        raise error(INVALID_GRANT, "Refresh token has expired")

    if refresh_token.user is None and refresh_token.user_id is None:
        raise error(
            SERVER_ERROR,
            None,
            "No user/userId parameter returned from get_refresh_token",
        )

    ctx.user = refresh_token.resolve_user()

    if isinstance(ctx.model, RevokesRefreshTokens):
        with storage_errors("revoke_refresh_token"):
            await ctx.model.revoke_refresh_token(token)
        logger.debug("Revoked presented refresh token for client %s", ctx.client.client_id)


async def use_client_credentials_grant(ctx: GrantContext) -> None:
    """Grant for the client_credentials grant type."""
    client_id = ctx.client.client_id
    client_secret = ctx.client.client_secret
    if not client_id or not client_secret:
        raise error(
            INVALID_CLIENT,
            'Missing parameters. "client_id" and "client_secret" are required',
        )

    with storage_errors("get_user_from_client"):
        user = await ctx.model.get_user_from_client(client_id, client_secret)

    if not user:
        raise error(INVALID_GRANT, "Client credentials are invalid")

    ctx.user = user


async def use_extended_grant(ctx: GrantContext) -> None:
    """Grant for extension grant types, delegated to the storage model.

    This is the only branch where the model chooses the error kind: raise
    ``ExtendedGrantError`` (or ``OAuthError``) to report one.
    """
    try:
        supported, user = await ctx.model.extended_grant(ctx.grant_type, ctx.request)
    except ExtendedGrantError as e:
        raise error(e.type or SERVER_ERROR, e.description, e) from e
    except OAuthError as e:
        raise error(e.kind, e.description, e) from e
    except Exception as e:
        logger.warning("Extended grant %s failed: %r", ctx.grant_type, e)
        raise error(SERVER_ERROR, str(e) or None, e) from e

    if not supported:
        raise error(INVALID_REQUEST, "Invalid grant_type parameter or parameter missing")
    if principal_id(user) is None:
        raise error(INVALID_REQUEST, "Invalid request.")

    ctx.user = user


GRANT_HANDLERS: dict[str, GrantHandler] = {
    GrantType.AUTHORIZATION_CODE.value: use_auth_code_grant,
    GrantType.PASSWORD.value: use_password_grant,
    GrantType.REFRESH_TOKEN.value: use_refresh_token_grant,
    GrantType.CLIENT_CREDENTIALS.value: use_client_credentials_grant,
}


async def check_grant_type(ctx: GrantContext) -> None:
    """Delegate to the relevant grant handler based on the grant type."""
    if EXTENSION_GRANT_RE.search(ctx.grant_type) and isinstance(
        ctx.model, SupportsExtendedGrant
    ):
        await use_extended_grant(ctx)
        return

    handler = GRANT_HANDLERS.get(ctx.grant_type)
    if handler is None:
        raise error(INVALID_REQUEST, "Invalid grant_type parameter or parameter missing")

    await handler(ctx)
