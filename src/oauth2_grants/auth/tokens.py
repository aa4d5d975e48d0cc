"""JWT token generator.

Mints self-contained signed tokens instead of random strings. Plug it in
through ``GrantConfig(token_generator=JWTTokenGenerator(...))``.
"""

import secrets
from typing import Any

from jose import JWTError, jwt

from ..config.settings import Settings, get_settings
from ..core.constants import TokenKind
from ..core.exceptions import INVALID_TOKEN, error
from ..grants.context import GrantContext
from ..grants.tokens import Generated, compute_expires
from ..model.records import principal_id


class JWTTokenGenerator:
    """Token generator signing access and refresh tokens as JWTs."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str | None = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            secret_key: Secret key for JWT signing
            algorithm: JWT algorithm (default: HS256)
            issuer: Value of the ``iss`` claim, omitted when None
        """
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "JWTTokenGenerator":
        """Create a generator from the OAUTH2_JWT_* settings."""
        settings = settings or get_settings()
        return cls(
            secret_key=settings.oauth2_jwt_secret_key,
            algorithm=settings.oauth2_jwt_algorithm,
            issuer=settings.oauth2_issuer,
        )

    async def __call__(self, ctx: GrantContext, kind: str) -> Generated:
        """Mint a token of ``kind`` for the context's client and user."""
        if kind == TokenKind.REFRESH.value:
            policy = ctx.config.refresh_token_lifetime
        else:
            policy = ctx.config.access_token_lifetime

        claims: dict[str, Any] = {
            "sub": str(principal_id(ctx.user)),
            "client_id": ctx.client.client_id,
            "grant_type": ctx.grant_type,
            "token_use": kind,
            "iat": ctx.now,
            "jti": secrets.token_urlsafe(16),
        }
        if self.issuer:
            claims["iss"] = self.issuer

        expires = compute_expires(ctx.now, policy.resolve(ctx.client.client_id))
        if expires is not None:
            claims["exp"] = expires

        return Generated(jwt.encode(claims, self.secret_key, algorithm=self.algorithm))

    def decode(self, token: str) -> dict[str, Any]:
        """
        Validate a token minted by this generator.

        Returns:
            Token claims

        Raises:
            OAuthError: ``invalid_token`` if the signature, issuer or expiry
                does not check out
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
        except JWTError as e:
            raise error(INVALID_TOKEN, "The access token provided is invalid", e) from e
