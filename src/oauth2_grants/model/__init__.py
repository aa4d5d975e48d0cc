"""Storage model interface for the OAuth2 grant server."""

from .base import (
    GeneratesTokens,
    GrantModel,
    RevokesRefreshTokens,
    SupportsExtendedGrant,
)
from .records import AuthCodeRecord, RefreshTokenRecord, principal_id

__all__ = [
    "AuthCodeRecord",
    "GeneratesTokens",
    "GrantModel",
    "RefreshTokenRecord",
    "RevokesRefreshTokens",
    "SupportsExtendedGrant",
    "principal_id",
]
