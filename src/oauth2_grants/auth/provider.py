"""In-memory grant model implementation.

This module provides a reference storage model implementing every
capability the grant pipeline uses, including one-time-use refresh tokens.
Secrets and passwords are stored hashed.
"""

import logging
from datetime import datetime
from typing import Any

from passlib.context import CryptContext

from ..model.records import AuthCodeRecord, RefreshTokenRecord, principal_id
from .storage import (
    StoredAccessToken,
    StoredAuthCode,
    StoredClient,
    StoredRefreshToken,
    StoredUser,
)

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class InMemoryGrantModel:
    """Grant model keeping every entity in process memory.

    Suitable for development and tests; for multiple server processes,
    implement ``GrantModel`` against a shared database.
    """

    def __init__(self) -> None:
        self.clients: dict[str, StoredClient] = {}
        self.users: dict[str, StoredUser] = {}
        self.auth_codes: dict[str, StoredAuthCode] = {}
        self.access_tokens: dict[str, StoredAccessToken] = {}
        self.refresh_tokens: dict[str, StoredRefreshToken] = {}

    # ========== Registration ==========

    def add_client(
        self,
        client_id: str,
        client_secret: str,
        grant_types: list[str] | None = None,
        user_id: Any = None,
    ) -> StoredClient:
        """Register a client.

        Args:
            client_id: Client ID
            client_secret: Plain client secret (stored hashed)
            grant_types: Grant types the client may use
            user_id: Principal for the client_credentials grant

        Returns:
            Stored client
        """
        client = StoredClient(
            client_id=client_id,
            client_secret_hash=pwd_context.hash(client_secret),
            grant_types=grant_types or [],
            user_id=user_id,
        )
        self.clients[client_id] = client
        logger.info("Registered client: %s", client_id)
        return client

    def add_user(self, user_id: Any, username: str, password: str) -> StoredUser:
        """Register a resource owner."""
        user = StoredUser(
            id=user_id,
            username=username,
            password_hash=pwd_context.hash(password),
        )
        self.users[username] = user
        return user

    def add_auth_code(
        self,
        code: str,
        client_id: str,
        user_id: Any,
        expires: datetime | None,
    ) -> StoredAuthCode:
        """Store an authorization code issued by an authorization endpoint."""
        auth_code = StoredAuthCode(
            code=code,
            client_id=client_id,
            user_id=user_id,
            expires=expires,
        )
        self.auth_codes[code] = auth_code
        return auth_code

    def add_refresh_token(
        self,
        token: str,
        client_id: str,
        user_id: Any,
        expires: datetime | None = None,
    ) -> StoredRefreshToken:
        """Store a refresh token directly."""
        refresh_token = StoredRefreshToken(
            token=token,
            client_id=client_id,
            user_id=user_id,
            expires=expires,
        )
        self.refresh_tokens[token] = refresh_token
        return refresh_token

    # ========== Client Management ==========

    async def get_client(self, client_id: str, client_secret: str) -> StoredClient | None:
        """Return the client when the secret matches."""
        client = self.clients.get(client_id)
        if client is None or not pwd_context.verify(client_secret, client.client_secret_hash):
            return None
        return client

    async def grant_type_allowed(self, client_id: str, grant_type: str) -> bool:
        """Check the client registration lists the grant type."""
        client = self.clients.get(client_id)
        return client is not None and grant_type in client.grant_types

    # ========== Users ==========

    async def get_user(self, username: str, password: str) -> dict[str, Any] | None:
        """Return the principal when the password matches."""
        user = self.users.get(username)
        if user is None or not pwd_context.verify(password, user.password_hash):
            return None
        return user.principal()

    async def get_user_from_client(
        self, client_id: str, client_secret: str
    ) -> dict[str, Any] | None:
        """Return the principal bound to the client, if any."""
        client = await self.get_client(client_id, client_secret)
        if client is None or client.user_id is None:
            return None
        return {"id": client.user_id}

    # ========== Codes and Tokens ==========

    async def get_auth_code(self, code: str) -> AuthCodeRecord | None:
        """Load an authorization code."""
        stored = self.auth_codes.get(code)
        if stored is None:
            return None
        return AuthCodeRecord(
            client_id=stored.client_id,
            expires=stored.expires,
            user_id=stored.user_id,
        )

    async def get_refresh_token(self, token: str) -> RefreshTokenRecord | None:
        """Load a refresh token."""
        stored = self.refresh_tokens.get(token)
        if stored is None:
            return None
        return RefreshTokenRecord(
            client_id=stored.client_id,
            expires=stored.expires,
            user_id=stored.user_id,
        )

    async def get_access_token(self, token: str) -> StoredAccessToken | None:
        """Load an access token."""
        return self.access_tokens.get(token)

    async def save_access_token(
        self,
        token: str,
        client_id: str,
        expires: datetime | None,
        user: Any,
        grant_type: str,
    ) -> None:
        """Store an issued access token."""
        self.access_tokens[token] = StoredAccessToken(
            token=token,
            client_id=client_id,
            user_id=principal_id(user),
            grant_type=grant_type,
            expires=expires,
        )
        logger.info("Issued access token for client: %s", client_id)

    async def save_refresh_token(
        self,
        token: str,
        client_id: str,
        expires: datetime | None,
        user: Any,
    ) -> None:
        """Store an issued refresh token."""
        self.refresh_tokens[token] = StoredRefreshToken(
            token=token,
            client_id=client_id,
            user_id=principal_id(user),
            expires=expires,
        )

    # ========== Revocation ==========

    async def revoke_refresh_token(self, token: str) -> None:
        """Revoke a refresh token (one-time use)."""
        if self.refresh_tokens.pop(token, None) is not None:
            logger.info("Revoked refresh token")
