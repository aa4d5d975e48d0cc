"""Token generation, persistence and expiry.

A generated token is either a new value that must be persisted
(``Generated``) or an existing token handed back by the storage model
(``Reissued``) that is reused as-is without another write.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..config.grant_config import LifetimePolicy
from ..core.constants import TokenKind
from ..model.base import GeneratesTokens
from .context import GrantContext
from .runner import storage_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Generated:
    """Freshly minted token that still has to be saved."""

    value: str


@dataclass(frozen=True)
class Reissued:
    """Existing token to hand out again; never saved a second time."""

    value: str


Token = Generated | Reissued


def as_token(value: "Token | str") -> Token:
    """Wrap a plain token string as ``Generated``."""
    if isinstance(value, Generated | Reissued):
        return value
    if isinstance(value, str):
        return Generated(value)
    msg = f"Token generator returned {type(value).__name__}, expected str, Generated or Reissued"
    raise TypeError(msg)


def random_token() -> str:
    """Unguessable 40 character hex token."""
    return secrets.token_hex(20)


async def generate_token(ctx: GrantContext, kind: str) -> Token:
    """Default token generator.

    Uses the model's ``generate_token`` when it implements
    ``GeneratesTokens``; a None result falls back to a random token.
    """
    if isinstance(ctx.model, GeneratesTokens):
        with storage_errors("generate_token"):
            value = await ctx.model.generate_token(kind, ctx)
            token = as_token(value) if value is not None else None
        if token is not None:
            return token

    return Generated(random_token())


def compute_expires(now: datetime, lifetime: int | None) -> datetime | None:
    """Expiry timestamp for a token created at ``now``."""
    if lifetime is None:
        return None
    return now + timedelta(seconds=lifetime)


def _expires_for(ctx: GrantContext, policy: LifetimePolicy) -> datetime | None:
    return compute_expires(ctx.now, policy.resolve(ctx.client.client_id))


async def _generate(ctx: GrantContext, kind: TokenKind) -> Token:
    generator = ctx.config.token_generator or generate_token
    return as_token(await generator(ctx, kind.value))


async def generate_access_token(ctx: GrantContext) -> None:
    """Generate an access token."""
    ctx.access_token = await _generate(ctx, TokenKind.ACCESS)


async def save_access_token(ctx: GrantContext) -> None:
    """Save the access token with the model, unless it was reissued."""
    token = ctx.access_token
    ctx.access_token = token.value

    if isinstance(token, Reissued):
        logger.debug("Reusing reissued access token for client %s", ctx.client.client_id)
        return

    expires = _expires_for(ctx, ctx.config.access_token_lifetime)
    with storage_errors("save_access_token"):
        await ctx.model.save_access_token(
            token.value,
            ctx.client.client_id,
            expires,
            ctx.user,
            ctx.grant_type,
        )


async def generate_refresh_token(ctx: GrantContext) -> None:
    """Generate a refresh token, if refresh tokens are enabled."""
    if not ctx.config.issues_refresh_tokens:
        return

    ctx.refresh_token = await _generate(ctx, TokenKind.REFRESH)


async def save_refresh_token(ctx: GrantContext) -> None:
    """Save the refresh token with the model, unless absent or reissued."""
    token = ctx.refresh_token
    if token is None:
        return

    ctx.refresh_token = token.value

    if isinstance(token, Reissued):
        logger.debug("Reusing reissued refresh token for client %s", ctx.client.client_id)
        return

    expires = _expires_for(ctx, ctx.config.refresh_token_lifetime)
    with storage_errors("save_refresh_token"):
        await ctx.model.save_refresh_token(
            token.value,
            ctx.client.client_id,
            expires,
            ctx.user,
        )
