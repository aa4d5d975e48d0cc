"""Token response assembly and exposure of the resolved principals."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from ..core.constants import NO_CACHE_HEADERS, TOKEN_TYPE
from .context import GrantContext


class TokenResponse(BaseModel):
    """Token endpoint response (RFC 6749 section 5.1)."""

    token_type: str = TOKEN_TYPE
    access_token: str
    expires_in: int | None = None
    refresh_token: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON body, omitting absent optional fields."""
        return self.model_dump(exclude_none=True)


@dataclass
class GrantResponse:
    """Successful token response ready for transmission."""

    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=lambda: dict(NO_CACHE_HEADERS))
    status_code: int = 200


def build_response(ctx: GrantContext) -> TokenResponse:
    """Assemble the token response from the context."""
    return TokenResponse(
        access_token=ctx.access_token,
        expires_in=ctx.config.access_token_lifetime.resolve(ctx.client.client_id),
        refresh_token=ctx.refresh_token or None,
    )


async def expose_client(ctx: GrantContext) -> None:
    """Expose the authenticated client record to downstream processing."""
    ctx.request.state["oauth"] = {"client": ctx.client_model}


async def expose_user(ctx: GrantContext) -> None:
    """Expose the resolved user to downstream processing."""
    ctx.request.state["user"] = ctx.user


async def send_response(ctx: GrantContext) -> GrantResponse:
    """Final step of the token endpoint pipeline."""
    return GrantResponse(body=build_response(ctx).to_dict())


async def return_response(ctx: GrantContext) -> dict[str, Any]:
    """Final step of in-process grants: the response body itself."""
    return build_response(ctx).to_dict()
