"""
Protocols describing the storage model the grant pipeline talks to.

The required surface lives on ``GrantModel``. Optional capabilities are
separate protocols; the pipeline detects them with ``isinstance`` checks
and only uses them when a model implements them.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..grants.context import GrantContext
    from ..grants.credentials import GrantRequest
    from ..grants.tokens import Reissued
    from .records import AuthCodeRecord, RefreshTokenRecord


@runtime_checkable
class GrantModel(Protocol):
    """
    Protocol defining the storage operations required by the grant pipeline.
    Every method is a coroutine yielding exactly one result; raising any
    exception is reported to the client as ``server_error``.
    """

    async def get_client(self, client_id: str, client_secret: str) -> Any | None:
        """
        Authenticate a client.

        Returns:
            Opaque client record, or None when the credentials are invalid
        """
        ...

    async def grant_type_allowed(self, client_id: str, grant_type: str) -> bool:
        """Check whether ``client_id`` may use ``grant_type``."""
        ...

    async def get_user(self, username: str, password: str) -> Any | None:
        """
        Look up a user by resource owner credentials (password grant).

        Returns:
            User principal exposing an ``id``, or None
        """
        ...

    async def get_user_from_client(self, client_id: str, client_secret: str) -> Any | None:
        """Look up the user a client acts as (client_credentials grant)."""
        ...

    async def get_auth_code(self, code: str) -> "AuthCodeRecord | dict[str, Any] | None":
        """Look up an authorization code."""
        ...

    async def get_refresh_token(
        self, token: str
    ) -> "RefreshTokenRecord | dict[str, Any] | None":
        """Look up a refresh token."""
        ...

    async def save_access_token(
        self,
        token: str,
        client_id: str,
        expires: datetime | None,
        user: Any,
        grant_type: str,
    ) -> None:
        """
        Persist an access token.

        Args:
            token: Opaque token string
            client_id: Client the token was issued to
            expires: Expiry timestamp, None when the token never expires
            user: Resolved user principal
            grant_type: Grant type that produced the token
        """
        ...

    async def save_refresh_token(
        self,
        token: str,
        client_id: str,
        expires: datetime | None,
        user: Any,
    ) -> None:
        """Persist a refresh token."""
        ...


@runtime_checkable
class RevokesRefreshTokens(Protocol):
    """Optional capability: one-time-use refresh tokens."""

    async def revoke_refresh_token(self, token: str) -> None: ...


@runtime_checkable
class SupportsExtendedGrant(Protocol):
    """Optional capability: extension grant types (``scheme:...``)."""

    async def extended_grant(
        self, grant_type: str, request: "GrantRequest"
    ) -> tuple[bool, Any]:
        """
        Resolve a user for an extension grant.

        Returns:
            ``(supported, user)``; raise ``ExtendedGrantError`` to report a
            specific error kind
        """
        ...


@runtime_checkable
class GeneratesTokens(Protocol):
    """Optional capability: custom token strings or token reissue."""

    async def generate_token(
        self, kind: str, context: "GrantContext"
    ) -> "str | Reissued | None":
        """
        Produce a token of ``kind`` (``accessToken`` or ``refreshToken``).

        Returns:
            A new token string, a ``Reissued`` marker wrapping an existing
            token, or None to fall back to a random token
        """
        ...
