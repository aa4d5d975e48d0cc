"""Pydantic models for OAuth entity storage.

These models define the structure the in-memory reference model keeps for
clients, users, authorization codes, access tokens, and refresh tokens.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class StoredClient(BaseModel):
    """OAuth client stored by the model."""

    client_id: str
    client_secret_hash: str
    grant_types: list[str] = Field(default_factory=list)
    user_id: Any = None  # Principal used by the client_credentials grant


class StoredUser(BaseModel):
    """Resource owner stored by the model."""

    id: Any
    username: str
    password_hash: str

    def principal(self) -> dict[str, Any]:
        """User principal handed to the grant pipeline (no secrets)."""
        return {"id": self.id, "username": self.username}


class StoredAuthCode(BaseModel):
    """Authorization code stored by the model."""

    code: str
    client_id: str
    user_id: Any
    expires: datetime | None


class StoredAccessToken(BaseModel):
    """Access token stored by the model."""

    token: str
    client_id: str
    user_id: Any
    grant_type: str
    expires: datetime | None = None  # None = no expiry


class StoredRefreshToken(BaseModel):
    """Refresh token stored by the model."""

    token: str
    client_id: str
    user_id: Any
    expires: datetime | None = None  # None = no expiry
